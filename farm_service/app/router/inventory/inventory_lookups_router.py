# app/router/inventory/inventory_lookups_router.py
from typing import List

from fastapi import APIRouter, Depends

from shared.core.auth import validate_current_token
from shared.core.schemas import Lookup
from ...crud.inventory import inventory_items_crud as crud

router = APIRouter(prefix="/api/inventory",
                   tags=["inventory_lookups"], dependencies=[Depends(validate_current_token)])


@router.get("/categories-lookup", response_model=List[Lookup])
def categories_lookup():
    return crud.category_lookup()


@router.get("/units-lookup", response_model=List[Lookup])
def units_lookup():
    return crud.unit_lookup()


@router.get("/transaction-types-lookup", response_model=List[Lookup])
def transaction_types_lookup():
    return crud.transaction_type_lookup()
