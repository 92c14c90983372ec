"""Per-person price envelope derived from the proposal total and its guest bounds."""

from typing import Any

from core.errors import NotFoundError
from core.models import PerPersonEstimate
from core.services.roster import get_guest_count


def estimate_per_person(
    total: float,
    guest_count: int,
    min_guests: int | None,
    max_guests: int | None,
) -> PerPersonEstimate:
    # Fewer guests means a higher share each, so the ceiling divides by the lower bound
    ceiling_divisor = max(1, min_guests or 1)
    floor_divisor = max(1, max_guests or 1)

    return PerPersonEstimate(
        current_per_person=total / guest_count if guest_count > 0 else total,
        ceiling_price=total / ceiling_divisor,
        floor_price=total / floor_divisor,
        current_guest_count=guest_count,
        min_guests=min_guests,
        max_guests=max_guests,
        total=total,
    )


def get_per_person_estimate(proposal_id: int, db: Any) -> PerPersonEstimate:
    row = db.fetch_one(
        "SELECT total, min_guests, max_guests FROM trip_proposals WHERE id = %s",
        (proposal_id,),
    )
    if row is None:
        raise NotFoundError("TripProposal", proposal_id)

    guest_count = get_guest_count(proposal_id, db)
    return estimate_per_person(float(row["total"] or 0), guest_count, row["min_guests"], row["max_guests"])
