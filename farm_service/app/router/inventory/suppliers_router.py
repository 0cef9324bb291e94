# app/router/inventory/suppliers_router.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_farm_db as get_db
from shared.core.schemas import Lookup
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.inventory import suppliers_crud as crud
from ...schemas.inventory.suppliers_schemas import (
    SupplierCreate,
    SupplierListResponse,
    SupplierOut,
    SupplierRequest,
    SupplierUpdate,
)

router = APIRouter(prefix="/api/farms/{farm_id}/suppliers",
                   tags=["suppliers"], dependencies=[Depends(validate_current_token)])


@router.get("", response_model=SupplierListResponse)
def get_suppliers(
    farm_id: UUID,
    params: SupplierRequest = Depends(),
    db: Session = Depends(get_db),
):
    return crud.get_suppliers(db, farm_id, params)


@router.get("/lookup", response_model=List[Lookup])
def supplier_lookup(
    farm_id: UUID,
    db: Session = Depends(get_db),
):
    return crud.supplier_lookup(db, farm_id)


@router.post("", response_model=None)
def create_supplier(
    farm_id: UUID,
    supplier: SupplierCreate,
    db: Session = Depends(get_db),
):
    db_supplier = crud.create_supplier(db, farm_id, supplier)
    return success_response(
        data=SupplierOut.model_validate(db_supplier),
        message="Supplier created",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL,
    )


@router.get("/{supplier_id}", response_model=SupplierOut)
def read_supplier(
    farm_id: UUID,
    supplier_id: UUID,
    db: Session = Depends(get_db),
):
    return crud.get_supplier(db, farm_id, supplier_id)


@router.put("/{supplier_id}", response_model=None)
def update_supplier(
    farm_id: UUID,
    supplier_id: UUID,
    supplier: SupplierUpdate,
    db: Session = Depends(get_db),
):
    db_supplier = crud.update_supplier(db, farm_id, supplier_id, supplier)
    return success_response(
        data=SupplierOut.model_validate(db_supplier),
        message="Supplier updated",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL,
    )


@router.delete("/{supplier_id}", response_model=None)
def delete_supplier(
    farm_id: UUID,
    supplier_id: UUID,
    db: Session = Depends(get_db),
):
    db_supplier = crud.delete_supplier(db, farm_id, supplier_id)
    return success_response(
        data={"id": str(db_supplier.id)},
        message="Supplier deleted",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL,
    )
