# app/crud/inventory/suppliers_crud.py
import logging
import uuid
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from shared.core.exceptions import NotFoundError
from shared.core.schemas import Lookup
from shared.helpers.query_helper import apply_sorting, paginate
from ...enum.inventory_enum import SortOrder
from ...helpers.inventory_helper import require_text
from ...models.inventory.suppliers import Supplier
from ...schemas.inventory.suppliers_schemas import (
    SupplierCreate,
    SupplierListResponse,
    SupplierOut,
    SupplierRequest,
    SupplierUpdate,
)

logger = logging.getLogger(__name__)

SUPPLIER_SORT_COLUMNS = {
    "name": Supplier.name,
    "created_at": Supplier.created_at,
}

# ----------------- Build Filters for Suppliers -----------------


def build_supplier_filters(farm_id: uuid.UUID, params: SupplierRequest):
    filters = [Supplier.farm_id == farm_id,
               Supplier.is_deleted == False]

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(
            or_(
                Supplier.name.ilike(search_term),
                Supplier.address.ilike(search_term),
            )
        )

    return filters


def get_suppliers(db: Session, farm_id: uuid.UUID, params: SupplierRequest) -> SupplierListResponse:
    query = db.query(Supplier).filter(*build_supplier_filters(farm_id, params))
    query = apply_sorting(query, params, SUPPLIER_SORT_COLUMNS,
                          default_sort="name", tie_breaker=Supplier.id,
                          default_order=SortOrder.asc)

    suppliers, total = paginate(query, params)
    return SupplierListResponse(
        suppliers=[SupplierOut.model_validate(s) for s in suppliers],
        total=total,
    )


def get_supplier_by_id(db: Session, farm_id: uuid.UUID, supplier_id: uuid.UUID) -> Optional[Supplier]:
    return (
        db.query(Supplier)
        .filter(Supplier.id == supplier_id,
                Supplier.farm_id == farm_id,
                Supplier.is_deleted == False)
        .first()
    )


def get_supplier(db: Session, farm_id: uuid.UUID, supplier_id: uuid.UUID) -> Supplier:
    db_supplier = get_supplier_by_id(db, farm_id, supplier_id)
    if not db_supplier:
        raise NotFoundError("supplier", supplier_id)
    return db_supplier


def ensure_supplier(db: Session, farm_id: uuid.UUID, supplier_id: Optional[uuid.UUID]):
    """Items may only point at a live supplier of their own farm."""
    if supplier_id is not None:
        get_supplier(db, farm_id, supplier_id)


def create_supplier(db: Session, farm_id: uuid.UUID, supplier: SupplierCreate) -> Supplier:
    data = supplier.model_dump()
    data["name"] = require_text(data.get("name"), "name")

    db_supplier = Supplier(farm_id=farm_id, **data)
    db.add(db_supplier)
    db.commit()
    db.refresh(db_supplier)
    logger.info("Created supplier %s for farm %s", db_supplier.id, farm_id)
    return db_supplier


def update_supplier(db: Session, farm_id: uuid.UUID, supplier_id: uuid.UUID,
                    supplier: SupplierUpdate) -> Supplier:
    db_supplier = get_supplier(db, farm_id, supplier_id)

    update_data = supplier.model_dump(exclude_unset=True)
    if "name" in update_data:
        update_data["name"] = require_text(update_data["name"], "name")

    for key, value in update_data.items():
        setattr(db_supplier, key, value)

    db.commit()
    db.refresh(db_supplier)
    return db_supplier

# ----------------- Delete (Soft Delete) -----------------


def delete_supplier(db: Session, farm_id: uuid.UUID, supplier_id: uuid.UUID) -> Supplier:
    # items keep their supplier_id, the reference is informational
    db_supplier = get_supplier(db, farm_id, supplier_id)
    db_supplier.is_deleted = True
    db_supplier.updated_at = func.now()
    db.commit()
    db.refresh(db_supplier)
    logger.info("Archived supplier %s of farm %s", supplier_id, farm_id)
    return db_supplier


def supplier_lookup(db: Session, farm_id: uuid.UUID) -> List[Lookup]:
    suppliers = (
        db.query(Supplier.id.label("id"), Supplier.name.label("name"))
        .filter(Supplier.farm_id == farm_id, Supplier.is_deleted == False)
        .order_by(Supplier.name.asc())
        .all()
    )
    return [Lookup(id=s.id, name=s.name) for s in suppliers]
