# app/router/inventory/inventory_transactions_router.py
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_farm_db as get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.inventory import inventory_queries_crud as queries
from ...crud.inventory import inventory_transactions_crud as crud
from ...schemas.inventory.inventory_items_schemas import InventoryItemOut
from ...schemas.inventory.inventory_transactions_schemas import (
    InventoryTransactionCreate,
    InventoryTransactionListResponse,
    InventoryTransactionOut,
    InventoryTransactionRequest,
    InventoryTransactionResult,
    LedgerSummaryOut,
)

router = APIRouter(prefix="/api/farms/{farm_id}/inventory/{item_id}",
                   tags=["inventory_transactions"], dependencies=[Depends(validate_current_token)])


@router.post("/transactions", response_model=None)
def create_transaction(
    farm_id: UUID,
    item_id: UUID,
    transaction: InventoryTransactionCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token),
):
    db_transaction, db_item = crud.apply_transaction(
        db, farm_id, item_id, transaction, performed_by=current_user.user_id)
    result = InventoryTransactionResult(
        transaction=InventoryTransactionOut.model_validate(db_transaction),
        item=InventoryItemOut.model_validate(db_item),
    )
    return success_response(
        data=result,
        message="Transaction recorded",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL,
    )


@router.get("/transactions", response_model=InventoryTransactionListResponse)
def transaction_history(
    farm_id: UUID,
    item_id: UUID,
    params: InventoryTransactionRequest = Depends(),
    db: Session = Depends(get_db),
):
    return queries.get_transaction_history(db, farm_id, item_id, params)


@router.get("/ledger", response_model=LedgerSummaryOut)
def ledger_summary(
    farm_id: UUID,
    item_id: UUID,
    db: Session = Depends(get_db),
):
    return queries.get_ledger_summary(db, farm_id, item_id)
