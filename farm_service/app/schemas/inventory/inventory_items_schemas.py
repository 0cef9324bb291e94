from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, computed_field

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel
from ...helpers.inventory_helper import is_low_stock


class InventoryItemBase(EmptyStringModel):
    name: str
    category: str
    unit: str
    cost_per_unit: Optional[Decimal] = None
    supplier_id: Optional[UUID] = None
    expiry_date: Optional[date] = None
    low_stock_threshold: Optional[Decimal] = None
    notes: Optional[str] = None


class InventoryItemCreate(InventoryItemBase):
    # opening balance, recorded as the item's initial quantity
    quantity: Optional[Decimal] = None


class InventoryItemUpdate(EmptyStringModel):
    name: Optional[str] = None
    category: Optional[str] = None
    unit: Optional[str] = None
    cost_per_unit: Optional[Decimal] = None
    supplier_id: Optional[UUID] = None
    expiry_date: Optional[date] = None
    low_stock_threshold: Optional[Decimal] = None
    notes: Optional[str] = None
    # echoed back by edit forms, must equal the current quantity
    quantity: Optional[Decimal] = None


class InventoryItemOut(BaseModel):
    id: UUID
    farm_id: UUID
    name: str
    category: str
    quantity: float
    initial_quantity: float
    unit: str
    cost_per_unit: Optional[float] = None
    supplier_id: Optional[UUID] = None
    expiry_date: Optional[date] = None
    low_stock_threshold: Optional[float] = None
    notes: Optional[str] = None
    version: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }

    @computed_field
    @property
    def is_low_stock(self) -> bool:
        return is_low_stock(self)


class InventoryItemRequest(CommonQueryParams):
    category: Optional[str] = None
    name: Optional[str] = None


class InventoryItemListResponse(BaseModel):
    items: List[InventoryItemOut]
    page: int
    page_size: int
    total: int

    model_config = {"from_attributes": True}
