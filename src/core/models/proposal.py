from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator


class ProposalStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    VIEWED = "viewed"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"
    CONVERTED = "converted"


class PricingType(str, Enum):
    FLAT = "flat"
    PER_PERSON = "per_person"
    PER_DAY = "per_day"


class InclusionType(str, Enum):
    TRANSPORTATION = "transportation"
    CHAUFFEUR = "chauffeur"
    GRATUITY = "gratuity"
    PLANNING_FEE = "planning_fee"
    ARRANGED_TASTING = "arranged_tasting"
    CUSTOM = "custom"


class RsvpStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    MAYBE = "maybe"


def _coerce_pricing_type(value: Any) -> PricingType:
    """Missing or unrecognised pricing types are billed as flat."""
    try:
        return PricingType(value)
    except ValueError:
        return PricingType.FLAT


class Proposal(BaseModel):
    id: int
    proposal_number: str
    status: ProposalStatus = ProposalStatus.DRAFT
    customer_name: str
    customer_email: str | None = None
    customer_phone: str | None = None
    party_size: int = Field(..., ge=1, le=100)
    min_guests: int | None = None
    max_guests: int | None = None

    discount_percentage: float = 0.0
    tax_rate: float = 0.089
    gratuity_percentage: float = 0.0
    deposit_percentage: float = 50.0

    subtotal: float = 0.0
    discount_amount: float = 0.0
    taxes: float = 0.0
    gratuity_amount: float = 0.0
    total: float = 0.0
    deposit_amount: float = 0.0
    balance_due: float = 0.0
    deposit_paid: bool = False

    view_count: int = 0
    sent_at: datetime | None = None
    first_viewed_at: datetime | None = None
    last_viewed_at: datetime | None = None
    accepted_at: datetime | None = None
    accepted_signature: str | None = None
    accepted_ip: str | None = None
    converted_at: datetime | None = None
    converted_to_booking_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator(
        "discount_percentage",
        "tax_rate",
        "gratuity_percentage",
        "deposit_percentage",
        "deposit_amount",
        "view_count",
        mode="before",
    )
    @classmethod
    def _null_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        # Nullable columns fall back to the field default rather than failing validation
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class ProposalCreate(BaseModel):
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: str | None = Field(default=None, max_length=255)
    customer_phone: str | None = Field(default=None, max_length=50)
    party_size: int = Field(..., ge=1, le=100)
    min_guests: int | None = Field(default=None, ge=0)
    max_guests: int | None = Field(default=None, ge=0)
    discount_percentage: float = Field(default=0.0, ge=0.0, le=100.0)
    tax_rate: float | None = Field(default=None, ge=0.0, le=1.0)
    gratuity_percentage: float = Field(default=0.0, ge=0.0, le=100.0)
    deposit_percentage: float = Field(default=50.0, ge=0.0, le=100.0)

    @model_validator(mode="after")
    def max_not_below_min(self) -> "ProposalCreate":
        if self.min_guests is not None and self.max_guests is not None and self.max_guests < self.min_guests:
            raise ValueError("max_guests must be greater than or equal to min_guests")
        return self


_REQUIRED_ON_UPDATE = (
    "customer_name",
    "party_size",
    "discount_percentage",
    "tax_rate",
    "gratuity_percentage",
    "deposit_percentage",
    "deposit_paid",
    "deposit_amount",
    "status",
)


class ProposalUpdate(BaseModel):
    """Partial edit of a proposal. Only fields present in the input are written.

    Computed totals are not editable; they are owned by pricing.
    """

    customer_name: str | None = Field(default=None, min_length=1, max_length=255)
    customer_email: str | None = Field(default=None, max_length=255)
    customer_phone: str | None = Field(default=None, max_length=50)
    party_size: int | None = Field(default=None, ge=1, le=100)
    min_guests: int | None = Field(default=None, ge=0)
    max_guests: int | None = Field(default=None, ge=0)
    discount_percentage: float | None = Field(default=None, ge=0.0, le=100.0)
    tax_rate: float | None = Field(default=None, ge=0.0, le=1.0)
    gratuity_percentage: float | None = Field(default=None, ge=0.0, le=100.0)
    deposit_percentage: float | None = Field(default=None, ge=0.0, le=100.0)
    deposit_paid: bool | None = None
    deposit_amount: float | None = Field(default=None, ge=0.0)
    status: ProposalStatus | None = None

    @field_validator("customer_email", "customer_phone", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def no_null_for_required_columns(self) -> "ProposalUpdate":
        nulled = [name for name in _REQUIRED_ON_UPDATE if name in self.model_fields_set and getattr(self, name) is None]
        if nulled:
            raise ValueError(f"{', '.join(nulled)} cannot be null")
        return self


class Inclusion(BaseModel):
    id: int
    trip_proposal_id: int
    inclusion_type: str = InclusionType.CUSTOM.value
    description: str = ""
    pricing_type: PricingType = PricingType.FLAT
    unit_price: float = 0.0
    quantity: float = 1.0
    unit: str | None = None
    total_price: float = 0.0
    sort_order: int = 0
    show_on_proposal: bool = True
    notes: str | None = None

    @field_validator("pricing_type", mode="before")
    @classmethod
    def _default_pricing_type(cls, value: Any) -> PricingType:
        return _coerce_pricing_type(value)

    @field_validator("unit_price", mode="before")
    @classmethod
    def _default_unit_price(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @field_validator("quantity", mode="before")
    @classmethod
    def _default_quantity(cls, value: Any) -> Any:
        return 1.0 if value is None else value


class InclusionCreate(BaseModel):
    inclusion_type: InclusionType
    description: str = Field(..., min_length=1)
    pricing_type: PricingType = PricingType.FLAT
    unit_price: float = Field(default=0.0, ge=0.0)
    quantity: float = Field(default=1.0, ge=0.0)
    unit: str | None = Field(default=None, max_length=50)
    sort_order: int | None = Field(default=None, ge=0)
    show_on_proposal: bool = True
    notes: str | None = None


class Guest(BaseModel):
    id: int
    trip_proposal_id: int
    name: str
    email: str | None = None
    phone: str | None = None
    is_primary: bool = False
    dietary_restrictions: str | None = None
    accessibility_needs: str | None = None
    special_requests: str | None = None
    room_assignment: str | None = None
    is_registered: bool = False
    rsvp_status: RsvpStatus = RsvpStatus.PENDING
    amount_owed: float = 0.0
    amount_paid: float = 0.0
    payment_status: str = "unpaid"
    created_at: datetime | None = None


class GuestCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: str | None = Field(default=None, max_length=50)
    is_primary: bool = False
    dietary_restrictions: str | None = None
    accessibility_needs: str | None = None
    special_requests: str | None = None
    room_assignment: str | None = Field(default=None, max_length=100)
    is_registered: bool = False
    rsvp_status: RsvpStatus = RsvpStatus.PENDING

    @field_validator("email", "phone", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value
