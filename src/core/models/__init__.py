"""
Pydantic models for the trip proposal engine.
"""

from core.models.pricing import PerPersonEstimate, PricingBreakdown
from core.models.proposal import (
    Guest,
    GuestCreate,
    Inclusion,
    InclusionCreate,
    InclusionType,
    PricingType,
    Proposal,
    ProposalCreate,
    ProposalUpdate,
    ProposalStatus,
    RsvpStatus,
)

__all__ = [
    "Guest",
    "GuestCreate",
    "Inclusion",
    "InclusionCreate",
    "InclusionType",
    "PerPersonEstimate",
    "PricingBreakdown",
    "PricingType",
    "Proposal",
    "ProposalCreate",
    "ProposalUpdate",
    "ProposalStatus",
    "RsvpStatus",
]
