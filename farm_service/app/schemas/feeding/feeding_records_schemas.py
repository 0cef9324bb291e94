import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel
from ...enum.inventory_enum import DEFAULT_INVENTORY_UNIT
from ..inventory.inventory_transactions_schemas import InventoryTransactionOut


class FeedingRecordCreate(EmptyStringModel):
    animal_id: Optional[UUID] = None
    group_id: Optional[UUID] = None
    inventory_item_id: Optional[UUID] = None
    feed_type: str
    amount: Decimal
    unit: str = DEFAULT_INVENTORY_UNIT.value
    date: datetime.date
    cost: Optional[Decimal] = None
    notes: Optional[str] = None


class FeedingRecordUpdate(EmptyStringModel):
    animal_id: Optional[UUID] = None
    group_id: Optional[UUID] = None
    feed_type: Optional[str] = None
    date: Optional[datetime.date] = None
    cost: Optional[Decimal] = None
    notes: Optional[str] = None
    # ledger-bound, rejected when sent
    inventory_item_id: Optional[UUID] = None
    amount: Optional[Decimal] = None
    unit: Optional[str] = None


class FeedingRecordOut(BaseModel):
    id: UUID
    farm_id: UUID
    animal_id: Optional[UUID] = None
    group_id: Optional[UUID] = None
    inventory_item_id: Optional[UUID] = None
    feed_type: str
    amount: float
    unit: str
    date: datetime.date
    cost: Optional[float] = None
    notes: Optional[str] = None
    performed_by: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

    model_config = {
        "from_attributes": True
    }


class FeedingRecordResult(BaseModel):
    record: FeedingRecordOut
    # usage debit, absent when the record names no inventory item
    transaction: Optional[InventoryTransactionOut] = None


class FeedingRecordRequest(CommonQueryParams):
    feed_type: Optional[str] = None
    animal_id: Optional[UUID] = None
    group_id: Optional[UUID] = None
    inventory_item_id: Optional[UUID] = None


class FeedingRecordListResponse(BaseModel):
    records: List[FeedingRecordOut]
    total: int

    model_config = {"from_attributes": True}
