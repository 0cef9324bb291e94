# app/crud/inventory/inventory_items_crud.py
import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from shared.core.exceptions import ConflictError, NotFoundError, PersistenceError, ValidationError
from shared.core.schemas import Lookup
from shared.helpers.query_helper import apply_sorting, paginate
from ...core.item_locks import item_locks
from ...enum.inventory_enum import InventoryCategory, InventoryUnit, TransactionType
from ...helpers.inventory_helper import (
    parse_category,
    parse_unit,
    require_non_negative,
    require_text,
    to_decimal,
)
from ...models.inventory.inventory_items import InventoryItem
from ...models.inventory.inventory_transactions import InventoryTransaction
from ...schemas.inventory.inventory_items_schemas import (
    InventoryItemCreate,
    InventoryItemListResponse,
    InventoryItemOut,
    InventoryItemRequest,
    InventoryItemUpdate,
)
from .suppliers_crud import ensure_supplier

logger = logging.getLogger(__name__)

ITEM_SORT_COLUMNS = {
    "name": InventoryItem.name,
    "category": InventoryItem.category,
    "quantity": InventoryItem.quantity,
    "created_at": InventoryItem.created_at,
}

# ----------------- Build Filters for Items -----------------


def build_item_filters(farm_id: uuid.UUID, params: InventoryItemRequest):
    filters = [InventoryItem.farm_id == farm_id,
               InventoryItem.is_deleted == False]

    if params.category and params.category.lower() != "all":
        filters.append(InventoryItem.category == parse_category(params.category).value)

    if params.name:
        filters.append(InventoryItem.name.ilike(f"%{params.name}%"))

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(
            or_(
                InventoryItem.name.ilike(search_term),
                InventoryItem.notes.ilike(search_term),
            )
        )

    return filters


def list_items(db: Session, farm_id: uuid.UUID, params: InventoryItemRequest) -> InventoryItemListResponse:
    query = db.query(InventoryItem).filter(*build_item_filters(farm_id, params))
    query = apply_sorting(query, params, ITEM_SORT_COLUMNS,
                          default_sort="created_at", tie_breaker=InventoryItem.id)

    items, total = paginate(query, params)
    return InventoryItemListResponse(
        items=[InventoryItemOut.model_validate(i) for i in items],
        page=params.page,
        page_size=params.page_size,
        total=total,
    )


def get_item_by_id(db: Session, farm_id: uuid.UUID, item_id: uuid.UUID,
                   refresh: bool = False) -> Optional[InventoryItem]:
    query = db.query(InventoryItem)
    if refresh:
        # overwrite whatever the identity map already holds
        query = query.execution_options(populate_existing=True)
    return (
        query
        .filter(InventoryItem.id == item_id,
                InventoryItem.farm_id == farm_id,
                InventoryItem.is_deleted == False)
        .first()
    )


def get_item(db: Session, farm_id: uuid.UUID, item_id: uuid.UUID,
             refresh: bool = False) -> InventoryItem:
    db_item = get_item_by_id(db, farm_id, item_id, refresh=refresh)
    if not db_item:
        raise NotFoundError("inventory item", item_id)
    return db_item


def item_has_transactions(db: Session, item_id: uuid.UUID) -> bool:
    return db.query(
        db.query(InventoryTransaction.id)
        .filter(InventoryTransaction.inventory_item_id == item_id)
        .exists()
    ).scalar()

# ----------------- Create -----------------


def create_item(db: Session, farm_id: uuid.UUID, item: InventoryItemCreate) -> InventoryItem:
    quantity = require_non_negative(item.quantity, "quantity")
    if quantity is None:
        raise ValidationError("quantity is required")

    db_item = InventoryItem(
        farm_id=farm_id,
        name=require_text(item.name, "name"),
        category=parse_category(item.category).value,
        unit=parse_unit(item.unit).value,
        quantity=quantity,
        initial_quantity=quantity,
        cost_per_unit=require_non_negative(item.cost_per_unit, "cost_per_unit"),
        supplier_id=item.supplier_id,
        expiry_date=item.expiry_date,
        low_stock_threshold=require_non_negative(item.low_stock_threshold, "low_stock_threshold"),
        notes=item.notes,
    )
    ensure_supplier(db, farm_id, item.supplier_id)

    try:
        db.add(db_item)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create inventory item for farm %s", farm_id)
        raise PersistenceError("could not save inventory item") from exc

    db.refresh(db_item)
    logger.info("Created inventory item %s (%s %s) for farm %s",
                db_item.id, db_item.quantity, db_item.unit, farm_id)
    return db_item

# ----------------- Update (metadata only) -----------------


def _clean_update(db: Session, farm_id: uuid.UUID, db_item: InventoryItem, item: InventoryItemUpdate) -> dict:
    update_data = item.model_dump(exclude_unset=True)

    if "quantity" in update_data:
        quantity = update_data.pop("quantity")
        if quantity is None or to_decimal(quantity) != to_decimal(db_item.quantity):
            raise ValidationError(
                "quantity cannot be edited directly, record a transaction instead")

    for required in ("name", "category", "unit"):
        if required in update_data and update_data[required] is None:
            raise ValidationError(f"{required} is required")

    if "name" in update_data:
        update_data["name"] = require_text(update_data["name"], "name")
    if "category" in update_data:
        update_data["category"] = parse_category(update_data["category"]).value
    if "unit" in update_data:
        update_data["unit"] = parse_unit(update_data["unit"]).value
        if update_data["unit"] != db_item.unit and item_has_transactions(db, db_item.id):
            raise ValidationError("unit cannot change once the item has transactions")
    for field in ("cost_per_unit", "low_stock_threshold"):
        if field in update_data:
            update_data[field] = require_non_negative(update_data[field], field)
    if update_data.get("supplier_id") is not None:
        ensure_supplier(db, farm_id, update_data["supplier_id"])

    return update_data


def update_item_metadata(db: Session, farm_id: uuid.UUID, item_id: uuid.UUID,
                         item: InventoryItemUpdate) -> InventoryItem:
    # Fails fast rather than queueing behind a transaction on the same item
    with item_locks.hold(item_id, blocking=False):
        db_item = get_item(db, farm_id, item_id, refresh=True)
        update_data = _clean_update(db, farm_id, db_item, item)

        for key, value in update_data.items():
            setattr(db_item, key, value)

        try:
            db.commit()
        except StaleDataError as exc:
            db.rollback()
            raise ConflictError(item_id) from exc
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Failed to update inventory item %s", item_id)
            raise PersistenceError("could not save inventory item") from exc

    db.refresh(db_item)
    return db_item

# ----------------- Delete (Soft Delete) -----------------


def delete_item(db: Session, farm_id: uuid.UUID, item_id: uuid.UUID) -> InventoryItem:
    with item_locks.hold(item_id, blocking=False):
        db_item = get_item(db, farm_id, item_id)
        db_item.is_deleted = True
        db_item.deleted_at = datetime.now(timezone.utc)
        db_item.updated_at = func.now()

        try:
            db.commit()
        except StaleDataError as exc:
            db.rollback()
            raise ConflictError(item_id) from exc
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Failed to archive inventory item %s", item_id)
            raise PersistenceError("could not archive inventory item") from exc

    db.refresh(db_item)
    logger.info("Archived inventory item %s of farm %s", item_id, farm_id)
    return db_item

# ----------------- Lookups -----------------


def category_lookup() -> List[Lookup]:
    return [
        Lookup(id=category.value, name=category.name.capitalize())
        for category in InventoryCategory
    ]


def unit_lookup() -> List[Lookup]:
    return [
        Lookup(id=unit.value, name=unit.name.capitalize())
        for unit in InventoryUnit
    ]


def transaction_type_lookup() -> List[Lookup]:
    return [
        Lookup(id=txn_type.value, name=txn_type.name.capitalize())
        for txn_type in TransactionType
    ]
