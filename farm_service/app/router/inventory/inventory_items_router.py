# app/router/inventory/inventory_items_router.py
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_farm_db as get_db
from shared.core.schemas import CommonQueryParams
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.inventory import inventory_items_crud as crud
from ...crud.inventory import inventory_queries_crud as queries
from ...schemas.inventory.inventory_items_schemas import (
    InventoryItemCreate,
    InventoryItemListResponse,
    InventoryItemOut,
    InventoryItemRequest,
    InventoryItemUpdate,
)

router = APIRouter(prefix="/api/farms/{farm_id}/inventory",
                   tags=["inventory"], dependencies=[Depends(validate_current_token)])


@router.get("", response_model=InventoryItemListResponse)
def list_items(
    farm_id: UUID,
    params: InventoryItemRequest = Depends(),
    db: Session = Depends(get_db),
):
    return crud.list_items(db, farm_id, params)


@router.post("", response_model=None)
def create_item(
    farm_id: UUID,
    item: InventoryItemCreate,
    db: Session = Depends(get_db),
):
    db_item = crud.create_item(db, farm_id, item)
    return success_response(
        data=InventoryItemOut.model_validate(db_item),
        message="Inventory item created",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL,
    )


# declared before /{item_id} so "low-stock" is not read as an id
@router.get("/low-stock", response_model=InventoryItemListResponse)
def low_stock_items(
    farm_id: UUID,
    params: CommonQueryParams = Depends(),
    db: Session = Depends(get_db),
):
    return queries.get_low_stock_items(db, farm_id, params)


@router.get("/{item_id}", response_model=InventoryItemOut)
def read_item(
    farm_id: UUID,
    item_id: UUID,
    db: Session = Depends(get_db),
):
    return crud.get_item(db, farm_id, item_id)


@router.put("/{item_id}", response_model=None)
def update_item(
    farm_id: UUID,
    item_id: UUID,
    item: InventoryItemUpdate,
    db: Session = Depends(get_db),
):
    db_item = crud.update_item_metadata(db, farm_id, item_id, item)
    return success_response(
        data=InventoryItemOut.model_validate(db_item),
        message="Inventory item updated",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL,
    )

# ---------------- Delete Inventory Item (Soft Delete) ----------------


@router.delete("/{item_id}", response_model=None)
def delete_item(
    farm_id: UUID,
    item_id: UUID,
    db: Session = Depends(get_db),
):
    db_item = crud.delete_item(db, farm_id, item_id)
    return success_response(
        data={"id": str(db_item.id)},
        message="Inventory item deleted",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL,
    )
