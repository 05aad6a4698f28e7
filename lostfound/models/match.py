import uuid
import enum
from datetime import datetime
from sqlalchemy import String, Text, DateTime, Float, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from lostfound.db.compat import GUID, JSONDocument

from lostfound.db.base import Base


class ConfidenceTier(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MatchStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    EXPIRED = "expired"


class MatchType(str, enum.Enum):
    AI_GENERATED = "ai_generated"
    USER_SUGGESTED = "user_suggested"
    MANUAL = "manual"


class Match(Base):
    """Proposed pairing of a lost item with a found item."""

    __tablename__ = "matches"
    __table_args__ = (
        UniqueConstraint("lost_item_id", "found_item_id", name="uq_matches_lost_found"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        GUID(), primary_key=True, default=uuid.uuid4
    )
    lost_item_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("items.id"), nullable=False, index=True
    )
    found_item_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("items.id"), nullable=False, index=True
    )
    similarity: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    confidence: Mapped[ConfidenceTier] = mapped_column(Enum(ConfidenceTier), nullable=False)
    status: Mapped[MatchStatus] = mapped_column(
        Enum(MatchStatus), default=MatchStatus.PENDING, index=True
    )
    match_type: Mapped[MatchType] = mapped_column(
        Enum(MatchType), default=MatchType.AI_GENERATED, nullable=False
    )
    match_details: Mapped[dict] = mapped_column(JSONDocument, nullable=True)

    # Review tracking
    confirmed_by: Mapped[str] = mapped_column(String(100), nullable=True)
    confirmed_at: Mapped[datetime] = mapped_column(DateTime, nullable=True)
    notes: Mapped[str] = mapped_column(Text, nullable=True)

    # Metadata
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    lost_item: Mapped["Item"] = relationship("Item", foreign_keys=[lost_item_id])
    found_item: Mapped["Item"] = relationship("Item", foreign_keys=[found_item_id])

    def __repr__(self) -> str:
        return f"<Match {self.id}: {self.similarity}% ({self.confidence.value})>"
