from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from shared.core.exceptions import ValidationError
from ..enum.inventory_enum import (
    INCREASING_TRANSACTION_TYPES,
    InventoryCategory,
    InventoryUnit,
    TransactionType,
)


def is_low_stock(item: Any) -> bool:
    """True iff the item has a threshold and its quantity is at or below it.

    Works on anything exposing ``quantity`` and ``low_stock_threshold``
    (ORM rows and response schemas alike). No threshold means never low.
    """
    threshold = getattr(item, "low_stock_threshold", None)
    if threshold is None:
        return False
    return to_decimal(item.quantity) <= to_decimal(threshold)


def signed_delta(transaction_type: TransactionType, magnitude: Decimal) -> Decimal:
    """Effective change a transaction applies to the item's quantity."""
    if transaction_type in INCREASING_TRANSACTION_TYPES:
        return magnitude
    return -magnitude


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # floats go through str so 0.1 stays 0.1
    return Decimal(str(value))


def parse_decimal(value: Any, field: str) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        number = to_decimal(value)
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"{field} must be a number") from exc
    if not number.is_finite():
        raise ValidationError(f"{field} must be a number")
    return number


def require_non_negative(value: Any, field: str) -> Optional[Decimal]:
    number = parse_decimal(value, field)
    if number is not None and number < 0:
        raise ValidationError(f"{field} must be greater than or equal to 0")
    return number


def require_text(value: Optional[str], field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    return str(value).strip()


def parse_category(value: Optional[str]) -> InventoryCategory:
    try:
        return InventoryCategory(require_text(value, "category").lower())
    except ValueError as exc:
        raise ValidationError(f"unknown category: {value}") from exc


def parse_unit(value: Optional[str]) -> InventoryUnit:
    try:
        return InventoryUnit(require_text(value, "unit").lower())
    except ValueError as exc:
        raise ValidationError(f"unknown unit: {value}") from exc


def parse_transaction_type(value: Optional[str]) -> TransactionType:
    try:
        return TransactionType(require_text(value, "transaction_type").lower())
    except ValueError as exc:
        raise ValidationError(f"unknown transaction type: {value}") from exc
