"""
Typed exceptions raised by the crud layer.

Every exception carries a machine-readable ``code`` (an ``AppStatusCode``),
the HTTP status the API answers with, and structured ``details`` so callers
never have to parse messages:

    InventoryLedgerError
    |
    +-- ValidationError            400  malformed input
    |   +-- InsufficientStockError 400  usage/loss larger than stock on hand
    +-- NotFoundError              404  missing, archived or other farm
    +-- ConflictError              409  concurrent modification, retry
    +-- PersistenceError           500  storage failure
"""
from decimal import Decimal
from typing import Any, Optional

from shared.utils.app_status_code import AppStatusCode


class InventoryLedgerError(Exception):
    code: str = AppStatusCode.OPERATION_FAILED
    http_status: int = 400

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(InventoryLedgerError):
    code = AppStatusCode.INVALID_INPUT
    http_status = 400


class InsufficientStockError(ValidationError):
    code = AppStatusCode.INSUFFICIENT_STOCK

    def __init__(self, available: Decimal, requested: Decimal, unit: str):
        self.available = available
        self.requested = requested
        self.unit = unit
        super().__init__(
            f"insufficient stock: only {available.normalize():f} {unit} available",
            details={
                "available": float(available),
                "requested": float(requested),
                "unit": unit,
            },
        )


class NotFoundError(InventoryLedgerError):
    code = AppStatusCode.NOT_FOUND
    http_status = 404

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found", details={"id": str(entity_id)})


class ConflictError(InventoryLedgerError):
    code = AppStatusCode.CONCURRENT_MODIFICATION
    http_status = 409

    def __init__(self, entity_id: Any, message: str = "item is being modified, try again"):
        self.entity_id = entity_id
        super().__init__(message, details={"id": str(entity_id)})


class PersistenceError(InventoryLedgerError):
    code = AppStatusCode.PERSISTENCE_ERROR
    http_status = 500
