# app/models/feeding/feeding_records.py
import uuid
from sqlalchemy import Boolean, Column, Date, DateTime, String, Numeric, Text, func
from sqlalchemy.dialects.postgresql import UUID
from shared.core.database import Base


class FeedingRecord(Base):
    __tablename__ = "feeding_records"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    farm_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    animal_id = Column(UUID(as_uuid=True))
    group_id = Column(UUID(as_uuid=True))
    inventory_item_id = Column(UUID(as_uuid=True), index=True)
    feed_type = Column(String(200), nullable=False)
    amount = Column(Numeric(14, 3), nullable=False)
    unit = Column(String(32), nullable=False)
    date = Column(Date, nullable=False)
    cost = Column(Numeric(14, 2))
    notes = Column(Text)
    performed_by = Column(String(64))
    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())
