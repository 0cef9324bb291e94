# app/models/inventory/inventory_items.py
import uuid
from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, Index, Integer, String, Numeric, Text, func
from sqlalchemy.dialects.postgresql import UUID
from shared.core.database import Base


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    farm_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    category = Column(String(32), nullable=False)
    # Only the transaction processor writes quantity
    quantity = Column(Numeric(14, 3), nullable=False, default=0)
    initial_quantity = Column(Numeric(14, 3), nullable=False, default=0)
    unit = Column(String(32), nullable=False)
    cost_per_unit = Column(Numeric(14, 2))
    supplier_id = Column(UUID(as_uuid=True))  # weak reference, no FK
    expiry_date = Column(Date)
    low_stock_threshold = Column(Numeric(14, 3))
    notes = Column(Text)
    version = Column(Integer, nullable=False)

    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="chk_inventory_items_quantity_non_negative"),
        Index("ix_inventory_items_farm_category", "farm_id", "category"),
    )

    def __repr__(self):
        return f"<InventoryItem {self.id} {self.name!r} qty={self.quantity} {self.unit}>"
