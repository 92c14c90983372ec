"""SQLAlchemy ORM model for the append-only trip_proposal_activity table."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.db.schemas.base import Base

if TYPE_CHECKING:
    from core.db.schemas.proposal import TripProposal


class TripProposalActivity(Base):
    __tablename__ = "trip_proposal_activity"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    trip_proposal_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("trip_proposals.id", ondelete="CASCADE"), nullable=False
    )
    action: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    actor_type: Mapped[str] = mapped_column(String(30), nullable=False, server_default="system")
    actor_name: Mapped[str | None] = mapped_column(String(255))
    metadata_ = mapped_column("metadata", JSONB, nullable=False, server_default=text("'{}'::jsonb"))
    created_at = mapped_column(TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()"))

    proposal: Mapped[TripProposal] = relationship(back_populates="activity")

    __table_args__ = (
        Index("idx_trip_proposal_activity_proposal", "trip_proposal_id"),
        Index("idx_trip_proposal_activity_created", text("created_at DESC")),
    )
