"""Row and model builders shared by the unit tests."""

from decimal import Decimal
from typing import Any

from core.models import Inclusion, Proposal


def proposal_row(**overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": 1,
        "proposal_number": "TP-2026-00001",
        "status": "draft",
        "customer_name": "Jordan Reyes",
        "customer_email": "jordan@example.com",
        "party_size": 8,
        "min_guests": None,
        "max_guests": None,
        "discount_percentage": Decimal("0"),
        "tax_rate": Decimal("0"),
        "gratuity_percentage": Decimal("0"),
        "deposit_percentage": Decimal("50"),
        "deposit_paid": False,
        "deposit_amount": Decimal("0"),
        "total": Decimal("0"),
        "view_count": 0,
    }
    row.update(overrides)
    return row


def make_proposal(**overrides: Any) -> Proposal:
    return Proposal.model_validate(proposal_row(**overrides))


def inclusion_row(**overrides: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": 1,
        "trip_proposal_id": 1,
        "inclusion_type": "transportation",
        "description": "Full-day chauffeured tour",
        "pricing_type": "flat",
        "unit_price": Decimal("0"),
        "quantity": Decimal("1"),
        "unit": None,
        "total_price": Decimal("0"),
        "sort_order": 0,
        "show_on_proposal": True,
        "notes": None,
    }
    row.update(overrides)
    return row


def make_inclusion(**overrides: Any) -> Inclusion:
    return Inclusion.model_validate(inclusion_row(**overrides))
