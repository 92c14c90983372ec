"""Pydantic models for pricing and per-person estimate results."""

from pydantic import BaseModel


class PricingBreakdown(BaseModel):
    stops_subtotal: float
    inclusions_subtotal: float
    services_subtotal: float
    subtotal: float
    discount_amount: float
    subtotal_after_discount: float
    taxes: float
    gratuity_amount: float
    total: float
    deposit_amount: float
    balance_due: float


class PerPersonEstimate(BaseModel):
    current_per_person: float
    ceiling_price: float
    floor_price: float
    current_guest_count: int
    min_guests: int | None
    max_guests: int | None
    total: float
