# app/crud/inventory/inventory_queries_crud.py
import uuid
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.core.schemas import CommonQueryParams
from shared.helpers.query_helper import apply_sorting, paginate
from ...enum.inventory_enum import SortOrder
from ...helpers.inventory_helper import parse_transaction_type, to_decimal
from ...models.inventory.inventory_items import InventoryItem
from ...models.inventory.inventory_transactions import InventoryTransaction
from ...schemas.inventory.inventory_items_schemas import InventoryItemListResponse, InventoryItemOut
from ...schemas.inventory.inventory_transactions_schemas import (
    InventoryTransactionListResponse,
    InventoryTransactionOut,
    InventoryTransactionRequest,
    LedgerSummaryOut,
)
from .inventory_items_crud import ITEM_SORT_COLUMNS, get_item

TRANSACTION_SORT_COLUMNS = {
    "created_at": InventoryTransaction.created_at,
    "transaction_type": InventoryTransaction.transaction_type,
    "quantity": InventoryTransaction.quantity,
}

# ----------------- Transaction History -----------------


def get_transaction_history(db: Session, farm_id: uuid.UUID, item_id: uuid.UUID,
                            params: InventoryTransactionRequest) -> InventoryTransactionListResponse:
    get_item(db, farm_id, item_id)

    query = db.query(InventoryTransaction).filter(
        InventoryTransaction.farm_id == farm_id,
        InventoryTransaction.inventory_item_id == item_id,
    )
    if params.transaction_type and params.transaction_type.lower() != "all":
        query = query.filter(
            InventoryTransaction.transaction_type == parse_transaction_type(params.transaction_type).value
        )

    # newest first, ties broken by id
    query = apply_sorting(query, params, TRANSACTION_SORT_COLUMNS,
                          default_sort="created_at", tie_breaker=InventoryTransaction.id)

    transactions, total = paginate(query, params)
    return InventoryTransactionListResponse(
        transactions=[InventoryTransactionOut.model_validate(t) for t in transactions],
        page=params.page,
        page_size=params.page_size,
        total=total,
    )

# ----------------- Low Stock -----------------


def low_stock_filters(farm_id: uuid.UUID):
    # SQL form of is_low_stock
    return [
        InventoryItem.farm_id == farm_id,
        InventoryItem.is_deleted == False,
        InventoryItem.low_stock_threshold.isnot(None),
        InventoryItem.quantity <= InventoryItem.low_stock_threshold,
    ]


def get_low_stock_items(db: Session, farm_id: uuid.UUID, params: CommonQueryParams) -> InventoryItemListResponse:
    query = db.query(InventoryItem).filter(*low_stock_filters(farm_id))
    query = apply_sorting(query, params, ITEM_SORT_COLUMNS,
                          default_sort="quantity", tie_breaker=InventoryItem.id,
                          default_order=SortOrder.asc)

    items, total = paginate(query, params)
    return InventoryItemListResponse(
        items=[InventoryItemOut.model_validate(i) for i in items],
        page=params.page,
        page_size=params.page_size,
        total=total,
    )

# ----------------- Ledger Summary -----------------


def get_ledger_summary(db: Session, farm_id: uuid.UUID, item_id: uuid.UUID) -> LedgerSummaryOut:
    db_item = get_item(db, farm_id, item_id)

    delta_sum, transaction_count = (
        db.query(
            func.coalesce(func.sum(InventoryTransaction.quantity_delta), 0),
            func.count(InventoryTransaction.id),
        )
        .filter(InventoryTransaction.inventory_item_id == item_id)
        .one()
    )

    initial = to_decimal(db_item.initial_quantity)
    quantity = to_decimal(db_item.quantity)
    # sqlite sums Numeric as float, quantize back to the column scale
    transactions_total = to_decimal(delta_sum).quantize(Decimal("0.001"))

    return LedgerSummaryOut(
        inventory_item_id=db_item.id,
        unit=db_item.unit,
        initial_quantity=float(initial),
        quantity=float(quantity),
        transactions_total=float(transactions_total),
        transaction_count=transaction_count,
        balanced=initial + transactions_total == quantity,
    )
