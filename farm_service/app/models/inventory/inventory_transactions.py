# app/models/inventory/inventory_transactions.py
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Numeric, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class InventoryTransaction(Base):
    """Append-only ledger row. Never updated or deleted once flushed."""

    __tablename__ = "inventory_transactions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    farm_id = Column(UUID(as_uuid=True), nullable=False)
    inventory_item_id = Column(
        UUID(as_uuid=True),
        ForeignKey("inventory_items.id"),
        nullable=False
    )
    transaction_type = Column(String(32), nullable=False)
    quantity = Column(Numeric(14, 3), nullable=False)          # magnitude as entered
    quantity_delta = Column(Numeric(14, 3), nullable=False)    # signed effect on the item
    quantity_before = Column(Numeric(14, 3), nullable=False)
    quantity_after = Column(Numeric(14, 3), nullable=False)
    cost = Column(Numeric(14, 2))
    supplier_id = Column(UUID(as_uuid=True))
    notes = Column(Text)
    performed_by = Column(String(64))
    feeding_record_id = Column(UUID(as_uuid=True), nullable=True)
    # Set in python so rows committed within the same second still order
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    item = relationship("InventoryItem")

    __table_args__ = (
        Index("ix_inventory_transactions_item_created",
              "inventory_item_id", "created_at", "id"),
    )

    def __repr__(self):
        return f"<InventoryTransaction {self.id} {self.transaction_type} {self.quantity_delta:+} on {self.inventory_item_id}>"
