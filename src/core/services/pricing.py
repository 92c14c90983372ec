"""Pricing calculator — derives a proposal's cost breakdown from its inclusions."""

import logging
from collections.abc import Iterable
from typing import Any

from core.errors import NotFoundError
from core.models import Inclusion, PricingBreakdown, PricingType, Proposal

logger = logging.getLogger(__name__)

# Stop-level costing is not modelled; every charge is an inclusion line item.
STOPS_SUBTOTAL = 0.0

_LOCK_PROPOSAL_SQL = "SELECT * FROM trip_proposals WHERE id = %s FOR UPDATE"

_INCLUSIONS_SQL = """
    SELECT id, trip_proposal_id, inclusion_type, description, pricing_type,
           unit_price, quantity, unit, total_price, sort_order, show_on_proposal, notes
    FROM trip_proposal_inclusions
    WHERE trip_proposal_id = %s
    ORDER BY sort_order, id
"""

_PERSIST_TOTALS_SQL = """
    UPDATE trip_proposals
    SET subtotal = %s, discount_amount = %s, taxes = %s, gratuity_amount = %s,
        total = %s, deposit_amount = %s, balance_due = %s, updated_at = NOW()
    WHERE id = %s
"""


def line_total(inclusion: Inclusion, party_size: int) -> float:
    """Price of one inclusion.

    per_person lines scale with the party size and ignore quantity;
    flat and per_day lines multiply by quantity (a day count for per_day).
    """
    if inclusion.pricing_type == PricingType.PER_PERSON:
        return inclusion.unit_price * party_size
    return inclusion.unit_price * inclusion.quantity


def compute_breakdown(proposal: Proposal, inclusions: Iterable[Inclusion]) -> PricingBreakdown:
    inclusions_subtotal = sum((line_total(i, proposal.party_size) for i in inclusions), 0.0)
    subtotal = inclusions_subtotal + STOPS_SUBTOTAL

    discount_amount = subtotal * proposal.discount_percentage / 100
    subtotal_after_discount = subtotal - discount_amount
    taxes = subtotal_after_discount * proposal.tax_rate
    gratuity_amount = subtotal_after_discount * proposal.gratuity_percentage / 100
    total = subtotal_after_discount + taxes + gratuity_amount

    if proposal.deposit_paid:
        # The collected amount is history; edits after payment never change what was charged
        deposit_amount = proposal.deposit_amount
        balance_due = total - deposit_amount
    else:
        deposit_amount = total * proposal.deposit_percentage / 100
        balance_due = total

    return PricingBreakdown(
        stops_subtotal=STOPS_SUBTOTAL,
        inclusions_subtotal=inclusions_subtotal,
        services_subtotal=inclusions_subtotal,
        subtotal=subtotal,
        discount_amount=discount_amount,
        subtotal_after_discount=subtotal_after_discount,
        taxes=taxes,
        gratuity_amount=gratuity_amount,
        total=total,
        deposit_amount=deposit_amount,
        balance_due=balance_due,
    )


def calculate_pricing(proposal_id: int, db: Any) -> PricingBreakdown:
    """Recompute and persist the proposal's totals.

    The proposal row stays locked for the whole read-compute-write so that
    inclusion edits (which take the same lock) cannot interleave with it.
    """
    logger.info("Calculating pricing for proposal %s", proposal_id)

    with db.transaction():
        row = db.fetch_one(_LOCK_PROPOSAL_SQL, (proposal_id,))
        if row is None:
            raise NotFoundError("TripProposal", proposal_id)
        proposal = Proposal.model_validate(row)

        inclusions = [Inclusion.model_validate(r) for r in db.fetch_all(_INCLUSIONS_SQL, (proposal_id,))]
        breakdown = compute_breakdown(proposal, inclusions)

        db.execute(
            _PERSIST_TOTALS_SQL,
            (
                breakdown.subtotal,
                breakdown.discount_amount,
                breakdown.taxes,
                breakdown.gratuity_amount,
                breakdown.total,
                breakdown.deposit_amount,
                breakdown.balance_due,
                proposal_id,
            ),
        )

    logger.info(
        "Pricing for proposal %s: %d inclusions, total %.2f, balance due %.2f",
        proposal_id,
        len(inclusions),
        breakdown.total,
        breakdown.balance_due,
    )
    return breakdown
