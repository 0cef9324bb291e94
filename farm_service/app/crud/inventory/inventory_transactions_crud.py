# app/crud/inventory/inventory_transactions_crud.py
"""
Transaction processor: the only code path that changes an item's quantity.

A write runs as

    per-item lock -> SELECT ... FOR UPDATE -> validate -> insert transaction
    + update quantity -> commit

The in-process lock serializes writers in this service. The row lock and the
item's ``version`` column catch writers in other processes; those surface as
``StaleDataError`` and are retried, re-reading and re-validating each time.
"""
import logging
import uuid
from decimal import Decimal
from typing import Callable, Optional, Tuple, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from shared.core.config import settings
from shared.core.exceptions import (
    ConflictError,
    InsufficientStockError,
    InventoryLedgerError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from ...core.item_locks import item_locks
from ...enum.inventory_enum import DECREASING_TRANSACTION_TYPES, TransactionType
from ...helpers.inventory_helper import (
    parse_decimal,
    parse_transaction_type,
    require_non_negative,
    signed_delta,
    to_decimal,
)
from ...models.inventory.inventory_items import InventoryItem
from ...models.inventory.inventory_transactions import InventoryTransaction
from ...schemas.inventory.inventory_transactions_schemas import InventoryTransactionCreate

logger = logging.getLogger(__name__)

T = TypeVar("T")


def validate_magnitude(value) -> Decimal:
    magnitude = parse_decimal(value, "quantity")
    if magnitude is None or magnitude <= 0:
        raise ValidationError("invalid quantity", details={"quantity": str(value)})
    return magnitude


def get_item_for_update(db: Session, farm_id: uuid.UUID, item_id: uuid.UUID) -> InventoryItem:
    db_item = db.execute(
        select(InventoryItem)
        .where(InventoryItem.id == item_id,
               InventoryItem.farm_id == farm_id,
               InventoryItem.is_deleted == False)
        .with_for_update()  # Row-level lock
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()
    if db_item is None:
        raise NotFoundError("inventory item", item_id)
    return db_item


def apply_locked(
    db: Session,
    farm_id: uuid.UUID,
    item_id: uuid.UUID,
    transaction_type: TransactionType,
    magnitude: Decimal,
    performed_by: Optional[str],
    cost: Optional[Decimal] = None,
    supplier_id: Optional[uuid.UUID] = None,
    notes: Optional[str] = None,
    feeding_record_id: Optional[uuid.UUID] = None,
) -> Tuple[InventoryTransaction, InventoryItem]:
    """Apply one transaction and flush. Caller holds the item lock and commits."""
    db_item = get_item_for_update(db, farm_id, item_id)
    current = to_decimal(db_item.quantity)

    if transaction_type in DECREASING_TRANSACTION_TYPES and magnitude > current:
        raise InsufficientStockError(current, magnitude, db_item.unit)

    delta = signed_delta(transaction_type, magnitude)
    new_quantity = current + delta

    db_transaction = InventoryTransaction(
        farm_id=farm_id,
        inventory_item_id=db_item.id,
        transaction_type=transaction_type.value,
        quantity=magnitude,
        quantity_delta=delta,
        quantity_before=current,
        quantity_after=new_quantity,
        cost=cost,
        supplier_id=supplier_id,
        notes=notes,
        performed_by=performed_by,
        feeding_record_id=feeding_record_id,
    )
    db_item.quantity = new_quantity
    db.add(db_transaction)
    db.flush()
    return db_transaction, db_item


def run_ledger_write(db: Session, item_id: uuid.UUID, work: Callable[[], T]) -> T:
    """Run ``work`` under the item lock and commit it, retrying version conflicts.

    ``work`` must be safe to call again: each attempt starts from a rolled
    back session and re-reads the item.
    """
    attempt = 0
    while True:
        attempt += 1
        try:
            with item_locks.hold(item_id, timeout=settings.LOCK_TIMEOUT_SECONDS):
                result = work()
                db.commit()
            return result
        except (StaleDataError, IntegrityError) as exc:
            # another process moved the row, or the quantity CHECK fired
            db.rollback()
            if attempt > settings.MAX_CONFLICT_RETRIES:
                logger.warning("Giving up on inventory item %s after %d conflicting attempts",
                               item_id, attempt)
                raise ConflictError(item_id) from exc
            logger.warning("Write conflict on inventory item %s, retrying (attempt %d)",
                           item_id, attempt)
        except InventoryLedgerError:
            db.rollback()
            raise
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Ledger write failed for inventory item %s", item_id)
            raise PersistenceError("could not record inventory transaction") from exc


def apply_transaction(
    db: Session,
    farm_id: uuid.UUID,
    item_id: uuid.UUID,
    transaction: InventoryTransactionCreate,
    performed_by: Optional[str] = None,
) -> Tuple[InventoryTransaction, InventoryItem]:
    # Everything that does not depend on current stock is checked before locking
    transaction_type = parse_transaction_type(transaction.transaction_type)
    magnitude = validate_magnitude(transaction.quantity)
    cost = require_non_negative(transaction.cost, "cost")
    if transaction.inventory_item_id is not None and transaction.inventory_item_id != item_id:
        raise ValidationError("inventory_item_id does not match the item in the path")

    try:
        db_transaction, db_item = run_ledger_write(
            db, item_id,
            lambda: apply_locked(
                db, farm_id, item_id, transaction_type, magnitude, performed_by,
                cost=cost,
                supplier_id=transaction.supplier_id,
                notes=transaction.notes,
            ),
        )
    except InsufficientStockError as exc:
        logger.warning("Rejected %s of %s on item %s: %s",
                       transaction_type.value, magnitude, item_id, exc.message)
        raise

    db.refresh(db_item)
    logger.info("Applied %s %s to item %s: %s -> %s",
                db_transaction.transaction_type, db_transaction.quantity_delta,
                item_id, db_transaction.quantity_before, db_transaction.quantity_after)
    return db_transaction, db_item
