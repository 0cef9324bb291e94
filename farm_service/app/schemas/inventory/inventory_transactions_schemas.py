from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel
from .inventory_items_schemas import InventoryItemOut


class InventoryTransactionCreate(EmptyStringModel):
    transaction_type: str
    quantity: Decimal  # magnitude, the type decides the sign
    cost: Optional[Decimal] = None
    supplier_id: Optional[UUID] = None
    notes: Optional[str] = None
    # optional echo of the path id, must match when sent
    inventory_item_id: Optional[UUID] = None


class InventoryTransactionOut(BaseModel):
    id: UUID
    farm_id: UUID
    inventory_item_id: UUID
    transaction_type: str
    quantity: float
    quantity_delta: float
    quantity_before: float
    quantity_after: float
    cost: Optional[float] = None
    supplier_id: Optional[UUID] = None
    notes: Optional[str] = None
    performed_by: Optional[str] = None
    feeding_record_id: Optional[UUID] = None
    created_at: datetime

    model_config = {
        "from_attributes": True
    }


class InventoryTransactionResult(BaseModel):
    transaction: InventoryTransactionOut
    item: InventoryItemOut


class InventoryTransactionRequest(CommonQueryParams):
    transaction_type: Optional[str] = None


class InventoryTransactionListResponse(BaseModel):
    transactions: List[InventoryTransactionOut]
    page: int
    page_size: int
    total: int


class LedgerSummaryOut(BaseModel):
    inventory_item_id: UUID
    unit: str
    initial_quantity: float
    quantity: float
    transactions_total: float
    transaction_count: int
    # initial_quantity + transactions_total == quantity
    balanced: bool
