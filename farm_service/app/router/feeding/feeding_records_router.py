# app/router/feeding/feeding_records_router.py
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_farm_db as get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.feeding import feeding_records_crud as crud
from ...schemas.feeding.feeding_records_schemas import (
    FeedingRecordCreate,
    FeedingRecordListResponse,
    FeedingRecordOut,
    FeedingRecordRequest,
    FeedingRecordResult,
    FeedingRecordUpdate,
)
from ...schemas.inventory.inventory_transactions_schemas import InventoryTransactionOut

router = APIRouter(prefix="/api/farms/{farm_id}/feeding-records",
                   tags=["feeding_records"], dependencies=[Depends(validate_current_token)])


@router.get("", response_model=FeedingRecordListResponse)
def get_feeding_records(
    farm_id: UUID,
    params: FeedingRecordRequest = Depends(),
    db: Session = Depends(get_db),
):
    return crud.get_feeding_records(db, farm_id, params)


@router.post("", response_model=None)
def create_feeding_record(
    farm_id: UUID,
    record: FeedingRecordCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token),
):
    db_record, db_transaction = crud.create_feeding_record(
        db, farm_id, record, performed_by=current_user.user_id)
    result = FeedingRecordResult(
        record=FeedingRecordOut.model_validate(db_record),
        transaction=InventoryTransactionOut.model_validate(db_transaction) if db_transaction else None,
    )
    return success_response(
        data=result,
        message="Feeding record created",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL,
    )


@router.get("/{record_id}", response_model=FeedingRecordOut)
def read_feeding_record(
    farm_id: UUID,
    record_id: UUID,
    db: Session = Depends(get_db),
):
    return crud.get_feeding_record(db, farm_id, record_id)


@router.put("/{record_id}", response_model=None)
def update_feeding_record(
    farm_id: UUID,
    record_id: UUID,
    record: FeedingRecordUpdate,
    db: Session = Depends(get_db),
):
    db_record = crud.update_feeding_record(db, farm_id, record_id, record)
    return success_response(
        data=FeedingRecordOut.model_validate(db_record),
        message="Feeding record updated",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL,
    )

# ---------------- Delete (Soft Delete) ----------------


@router.delete("/{record_id}", response_model=None)
def delete_feeding_record(
    farm_id: UUID,
    record_id: UUID,
    db: Session = Depends(get_db),
):
    db_record = crud.delete_feeding_record(db, farm_id, record_id)
    return success_response(
        data={"id": str(db_record.id)},
        message="Feeding record deleted",
        status_code=AppStatusCode.OPERATION_SUCCESSFUL,
    )
