import uuid
import enum
from datetime import datetime
from sqlalchemy import String, Text, DateTime, Enum
from sqlalchemy.orm import Mapped, mapped_column
from lostfound.db.compat import GUID

from lostfound.db.base import Base


class ItemType(str, enum.Enum):
    LOST = "lost"
    FOUND = "found"

    @property
    def opposite(self) -> "ItemType":
        return ItemType.FOUND if self is ItemType.LOST else ItemType.LOST


class ItemStatus(str, enum.Enum):
    # Only ACTIVE items are offered as match candidates
    ACTIVE = "active"
    CLAIMED = "claimed"
    MATCHED = "matched"
    RETURNED = "returned"
    CLOSED = "closed"
    REMOVED = "removed"


class Item(Base):
    """A reported lost or found item."""

    __tablename__ = "items"

    id: Mapped[uuid.UUID] = mapped_column(
        GUID(), primary_key=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    location: Mapped[str] = mapped_column(String(255), nullable=True)
    type: Mapped[ItemType] = mapped_column(Enum(ItemType), nullable=False, index=True)
    status: Mapped[ItemStatus] = mapped_column(
        Enum(ItemStatus), default=ItemStatus.ACTIVE, index=True
    )
    reported_by: Mapped[str] = mapped_column(String(100), nullable=True)

    # Metadata
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<Item {self.id}: {self.type.value if self.type else '?'} '{self.title}'>"
