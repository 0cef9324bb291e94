from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel

from shared.core.schemas import CommonQueryParams
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel


class SupplierBase(EmptyStringModel):
    name: str
    contact_info: Optional[Dict[str, Any]] = None  # {"phone":..., "email":..., "contact_name":...}
    address: Optional[str] = None
    notes: Optional[str] = None


class SupplierCreate(SupplierBase):
    pass


class SupplierUpdate(EmptyStringModel):
    name: Optional[str] = None
    contact_info: Optional[Dict[str, Any]] = None
    address: Optional[str] = None
    notes: Optional[str] = None


class SupplierOut(BaseModel):
    id: UUID
    farm_id: UUID
    name: str
    contact_info: Optional[Dict[str, Any]] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class SupplierRequest(CommonQueryParams):
    pass


class SupplierListResponse(BaseModel):
    suppliers: List[SupplierOut]
    total: int

    model_config = {"from_attributes": True}
