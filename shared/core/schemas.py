from pydantic import BaseModel, model_validator
from typing import Generic, Optional, TypeVar, Union
from uuid import UUID

from shared.core.config import settings
from shared.wrappers.empty_string_model_wrapper import EmptyStringModel

# Shared properties
T = TypeVar("T")


class UserToken(BaseModel):
    user_id: str
    session_id: Optional[str] = None
    name: Optional[str] = None
    account_type: Optional[str] = None
    status: Optional[str] = None
    exp: Optional[int] = None


class CommonQueryParams(EmptyStringModel):
    search: Optional[str] = None
    page: int = 1
    page_size: int = settings.DEFAULT_PAGE_SIZE
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None

    @model_validator(mode="after")
    def clamp_paging(self):
        self.page = max(self.page or 1, 1)
        self.page_size = min(max(self.page_size or 1, 1), settings.MAX_PAGE_SIZE)
        return self

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


class Lookup(BaseModel):
    id: Union[str, UUID]  # accepts both UUID and str
    name: str

    class Config:
        from_attributes = True


class JsonOutResult(BaseModel, Generic[T]):
    data: Optional[T] = None
    status: str
    status_code: str
    message: str
