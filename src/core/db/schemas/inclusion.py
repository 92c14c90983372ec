"""SQLAlchemy ORM model for the trip_proposal_inclusions table."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, Numeric, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.db.schemas.base import Base

if TYPE_CHECKING:
    from core.db.schemas.proposal import TripProposal


class TripProposalInclusion(Base):
    __tablename__ = "trip_proposal_inclusions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    trip_proposal_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("trip_proposals.id", ondelete="CASCADE"), nullable=False
    )
    inclusion_type: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    pricing_type: Mapped[str] = mapped_column(String(20), nullable=False, server_default="flat")
    quantity = mapped_column(Numeric(10, 2), nullable=False, server_default="1")
    unit: Mapped[str | None] = mapped_column(String(50))
    unit_price = mapped_column(Numeric(10, 2), nullable=False, server_default="0")
    total_price = mapped_column(Numeric(10, 2), nullable=False, server_default="0")
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    show_on_proposal: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))
    notes: Mapped[str | None] = mapped_column(Text)
    created_at = mapped_column(TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()"))
    updated_at = mapped_column(TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()"))

    proposal: Mapped[TripProposal] = relationship(back_populates="inclusions")

    __table_args__ = (
        CheckConstraint(
            "inclusion_type IN ('transportation', 'chauffeur', 'gratuity', 'planning_fee', "
            "'arranged_tasting', 'custom')",
            name="chk_inclusion_type",
        ),
        CheckConstraint("pricing_type IN ('flat', 'per_person', 'per_day')", name="chk_inclusion_pricing_type"),
        Index("idx_trip_proposal_inclusions_proposal", "trip_proposal_id"),
    )
