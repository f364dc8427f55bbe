from sqlalchemy import Column, DateTime, String, Text, func

from app.db.base import Base


class StorageSlot(Base):
    """
    Durable key-value slot.

    One row per key; the value is an opaque serialized document
    (the quiz history is stored as a JSON array under a single key).
    """
    __tablename__ = "storage_slots"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)

    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
