# app/crud/feeding/feeding_records_crud.py
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.core.exceptions import NotFoundError, PersistenceError, ValidationError
from shared.helpers.query_helper import apply_sorting, paginate
from ...enum.inventory_enum import TransactionType
from ...helpers.inventory_helper import parse_unit, require_non_negative, require_text, to_decimal
from ...models.feeding.feeding_records import FeedingRecord
from ...models.inventory.inventory_transactions import InventoryTransaction
from ...schemas.feeding.feeding_records_schemas import (
    FeedingRecordCreate,
    FeedingRecordListResponse,
    FeedingRecordOut,
    FeedingRecordRequest,
    FeedingRecordUpdate,
)
from ..inventory.inventory_transactions_crud import (
    apply_locked,
    get_item_for_update,
    run_ledger_write,
    validate_magnitude,
)

logger = logging.getLogger(__name__)

FEEDING_SORT_COLUMNS = {
    "date": FeedingRecord.date,
    "created_at": FeedingRecord.created_at,
}

# fields already reflected in the inventory ledger
LEDGER_BOUND_FIELDS = ("inventory_item_id", "amount", "unit")

# ----------------- Build Filters for Feeding Records -----------------


def build_feeding_filters(farm_id: uuid.UUID, params: FeedingRecordRequest):
    filters = [FeedingRecord.farm_id == farm_id,
               FeedingRecord.is_deleted == False]

    if params.feed_type:
        filters.append(FeedingRecord.feed_type.ilike(f"%{params.feed_type}%"))
    if params.animal_id:
        filters.append(FeedingRecord.animal_id == params.animal_id)
    if params.group_id:
        filters.append(FeedingRecord.group_id == params.group_id)
    if params.inventory_item_id:
        filters.append(FeedingRecord.inventory_item_id == params.inventory_item_id)
    if params.search:
        filters.append(FeedingRecord.notes.ilike(f"%{params.search}%"))

    return filters


def get_feeding_records(db: Session, farm_id: uuid.UUID, params: FeedingRecordRequest) -> FeedingRecordListResponse:
    query = db.query(FeedingRecord).filter(*build_feeding_filters(farm_id, params))
    query = apply_sorting(query, params, FEEDING_SORT_COLUMNS,
                          default_sort="date", tie_breaker=FeedingRecord.created_at)

    records, total = paginate(query, params)
    return FeedingRecordListResponse(
        records=[FeedingRecordOut.model_validate(r) for r in records],
        total=total,
    )


def get_feeding_record(db: Session, farm_id: uuid.UUID, record_id: uuid.UUID) -> FeedingRecord:
    db_record = (
        db.query(FeedingRecord)
        .filter(FeedingRecord.id == record_id,
                FeedingRecord.farm_id == farm_id,
                FeedingRecord.is_deleted == False)
        .first()
    )
    if not db_record:
        raise NotFoundError("feeding record", record_id)
    return db_record

# ----------------- Create (with usage debit) -----------------


def _new_record(farm_id: uuid.UUID, record: FeedingRecordCreate, values: dict,
                performed_by: Optional[str]) -> FeedingRecord:
    return FeedingRecord(
        farm_id=farm_id,
        animal_id=record.animal_id,
        group_id=record.group_id,
        inventory_item_id=record.inventory_item_id,
        date=record.date,
        notes=record.notes,
        performed_by=performed_by,
        **values,
    )


def create_feeding_record(
    db: Session,
    farm_id: uuid.UUID,
    record: FeedingRecordCreate,
    performed_by: Optional[str] = None,
) -> Tuple[FeedingRecord, Optional[InventoryTransaction]]:
    """Save a feeding record, debiting the named inventory item in the same commit.

    If the debit is rejected (insufficient stock, unit mismatch, missing
    item) nothing is saved, the record included.
    """
    amount = validate_magnitude(record.amount)
    unit = parse_unit(record.unit).value
    values = {
        "feed_type": require_text(record.feed_type, "feed_type"),
        "amount": amount,
        "unit": unit,
        "cost": require_non_negative(record.cost, "cost"),
    }

    if record.inventory_item_id is None:
        db_record = _new_record(farm_id, record, values, performed_by)
        try:
            db.add(db_record)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Failed to save feeding record for farm %s", farm_id)
            raise PersistenceError("could not save feeding record") from exc
        db.refresh(db_record)
        return db_record, None

    item_id = record.inventory_item_id

    def work():
        db_item = get_item_for_update(db, farm_id, item_id)
        if db_item.unit != unit:
            raise ValidationError(
                f"feeding unit {unit} does not match inventory unit {db_item.unit}",
                details={"unit": unit, "inventory_unit": db_item.unit},
            )
        db_record = _new_record(farm_id, record, values, performed_by)
        db.add(db_record)
        db.flush()
        db_transaction, _ = apply_locked(
            db, farm_id, item_id, TransactionType.usage, amount, performed_by,
            notes=f"Feeding: {db_record.feed_type}",
            feeding_record_id=db_record.id,
        )
        return db_record, db_transaction

    db_record, db_transaction = run_ledger_write(db, item_id, work)
    db.refresh(db_record)
    logger.info("Feeding record %s debited %s %s from item %s",
                db_record.id, amount, unit, item_id)
    return db_record, db_transaction

# ----------------- Update (metadata only) -----------------


def update_feeding_record(db: Session, farm_id: uuid.UUID, record_id: uuid.UUID,
                          record: FeedingRecordUpdate) -> FeedingRecord:
    db_record = get_feeding_record(db, farm_id, record_id)
    update_data = record.model_dump(exclude_unset=True)

    for field in LEDGER_BOUND_FIELDS:
        if field not in update_data:
            continue
        new_value, current = update_data.pop(field), getattr(db_record, field)
        if field == "amount" and new_value is not None:
            changed = to_decimal(new_value) != to_decimal(current)
        elif field == "unit" and new_value is not None:
            changed = new_value.lower() != current
        else:
            changed = new_value != current
        if changed:
            raise ValidationError(
                f"{field} cannot change, the debit is already in the inventory ledger")

    if "feed_type" in update_data:
        update_data["feed_type"] = require_text(update_data["feed_type"], "feed_type")
    if "date" in update_data and update_data["date"] is None:
        raise ValidationError("date is required")
    if "cost" in update_data:
        update_data["cost"] = require_non_negative(update_data["cost"], "cost")

    for key, value in update_data.items():
        setattr(db_record, key, value)

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to update feeding record %s", record_id)
        raise PersistenceError("could not save feeding record") from exc
    db.refresh(db_record)
    return db_record

# ----------------- Delete (Soft Delete) -----------------


def delete_feeding_record(db: Session, farm_id: uuid.UUID, record_id: uuid.UUID) -> FeedingRecord:
    # the usage transaction stays, the ledger is append-only
    db_record = get_feeding_record(db, farm_id, record_id)
    db_record.is_deleted = True
    db_record.deleted_at = datetime.now(timezone.utc)
    db_record.updated_at = func.now()
    db.commit()
    db.refresh(db_record)
    logger.info("Archived feeding record %s of farm %s", record_id, farm_id)
    return db_record
