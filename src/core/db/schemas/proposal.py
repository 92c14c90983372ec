"""SQLAlchemy ORM model for the trip_proposals table."""

from sqlalchemy import Boolean, CheckConstraint, Index, Integer, Numeric, String, Text, text
from sqlalchemy.dialects.postgresql import TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column, relationship

from core.db.schemas.base import Base


class TripProposal(Base):
    __tablename__ = "trip_proposals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    proposal_number: Mapped[str] = mapped_column(String(30), nullable=False, unique=True)
    status: Mapped[str] = mapped_column(String(30), nullable=False, server_default="draft")

    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str | None] = mapped_column(String(255))
    customer_phone: Mapped[str | None] = mapped_column(String(50))

    party_size: Mapped[int] = mapped_column(Integer, nullable=False)
    min_guests: Mapped[int | None] = mapped_column(Integer)
    max_guests: Mapped[int | None] = mapped_column(Integer)

    discount_percentage = mapped_column(Numeric(5, 2), nullable=False, server_default="0")
    tax_rate = mapped_column(Numeric(5, 4), nullable=False, server_default="0.089")
    gratuity_percentage = mapped_column(Numeric(5, 2), nullable=False, server_default="0")
    deposit_percentage = mapped_column(Numeric(5, 2), nullable=False, server_default="50")

    subtotal = mapped_column(Numeric(10, 2), nullable=False, server_default="0")
    discount_amount = mapped_column(Numeric(10, 2), nullable=False, server_default="0")
    taxes = mapped_column(Numeric(10, 2), nullable=False, server_default="0")
    gratuity_amount = mapped_column(Numeric(10, 2), nullable=False, server_default="0")
    total = mapped_column(Numeric(10, 2), nullable=False, server_default="0")
    deposit_amount = mapped_column(Numeric(10, 2), nullable=False, server_default="0")
    balance_due = mapped_column(Numeric(10, 2), nullable=False, server_default="0")
    deposit_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))

    view_count: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    sent_at = mapped_column(TIMESTAMP(timezone=True))
    first_viewed_at = mapped_column(TIMESTAMP(timezone=True))
    last_viewed_at = mapped_column(TIMESTAMP(timezone=True))
    accepted_at = mapped_column(TIMESTAMP(timezone=True))
    accepted_signature: Mapped[str | None] = mapped_column(Text)
    accepted_ip: Mapped[str | None] = mapped_column(String(50))
    converted_at = mapped_column(TIMESTAMP(timezone=True))
    converted_to_booking_id: Mapped[int | None] = mapped_column(Integer)

    created_at = mapped_column(TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()"))
    updated_at = mapped_column(TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()"))

    inclusions: Mapped[list["TripProposalInclusion"]] = relationship(
        back_populates="proposal", cascade="all, delete-orphan"
    )
    guests: Mapped[list["TripProposalGuest"]] = relationship(back_populates="proposal", cascade="all, delete-orphan")
    activity: Mapped[list["TripProposalActivity"]] = relationship(
        back_populates="proposal", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'sent', 'viewed', 'accepted', 'declined', 'expired', 'converted')",
            name="chk_trip_proposals_status",
        ),
        CheckConstraint("party_size >= 1 AND party_size <= 100", name="chk_trip_proposals_party_size"),
        CheckConstraint(
            "max_guests IS NULL OR min_guests IS NULL OR max_guests >= min_guests",
            name="chk_trip_proposals_guest_bounds",
        ),
        Index("idx_trip_proposals_status", "status"),
        Index("idx_trip_proposals_customer_email", "customer_email"),
    )


# Avoid circular import — related models are resolved by string reference above
from core.db.schemas.activity import TripProposalActivity  # noqa: E402, F401
from core.db.schemas.guest import TripProposalGuest  # noqa: E402, F401
from core.db.schemas.inclusion import TripProposalInclusion  # noqa: E402, F401
