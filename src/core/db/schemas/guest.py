"""SQLAlchemy ORM model for the trip_proposal_guests table."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, Numeric, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.db.schemas.base import Base

if TYPE_CHECKING:
    from core.db.schemas.proposal import TripProposal


class TripProposalGuest(Base):
    __tablename__ = "trip_proposal_guests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    trip_proposal_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("trip_proposals.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255))
    phone: Mapped[str | None] = mapped_column(String(50))
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
    dietary_restrictions: Mapped[str | None] = mapped_column(Text)
    accessibility_needs: Mapped[str | None] = mapped_column(Text)
    special_requests: Mapped[str | None] = mapped_column(Text)
    room_assignment: Mapped[str | None] = mapped_column(String(100))
    is_registered: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
    rsvp_status: Mapped[str] = mapped_column(String(30), nullable=False, server_default="pending")
    amount_owed = mapped_column(Numeric(10, 2), nullable=False, server_default="0")
    amount_paid = mapped_column(Numeric(10, 2), nullable=False, server_default="0")
    payment_status: Mapped[str] = mapped_column(String(20), nullable=False, server_default="unpaid")
    created_at = mapped_column(TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()"))
    updated_at = mapped_column(TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()"))

    proposal: Mapped[TripProposal] = relationship(back_populates="guests")

    __table_args__ = (
        CheckConstraint("rsvp_status IN ('pending', 'confirmed', 'declined', 'maybe')", name="chk_guest_rsvp_status"),
        CheckConstraint(
            "payment_status IN ('unpaid', 'partial', 'paid', 'refunded')", name="chk_guest_payment_status"
        ),
        Index("idx_trip_proposal_guests_proposal", "trip_proposal_id"),
        Index("idx_trip_proposal_guests_email", "email"),
    )
