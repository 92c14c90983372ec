"""
Business services for the trip proposal engine.

- pricing.py: cost breakdown derived from inclusions and percentage parameters
- roster.py: capacity-checked guest roster
- estimator.py: per-person price envelope
- lifecycle.py: status state machine
- proposals.py: proposal creation, editing and inclusion management
- activity.py: append-only activity log
"""

from core.services.estimator import get_per_person_estimate
from core.services.lifecycle import transition_status
from core.services.pricing import calculate_pricing
from core.services.proposals import (
    add_inclusion,
    create_proposal,
    delete_inclusion,
    get_proposal,
    get_proposal_by_number,
    list_inclusions,
    update_proposal,
)
from core.services.roster import add_guest, delete_guest, get_guest_count, is_email_registered, list_guests

__all__ = [
    "add_guest",
    "add_inclusion",
    "calculate_pricing",
    "create_proposal",
    "delete_guest",
    "delete_inclusion",
    "get_guest_count",
    "get_per_person_estimate",
    "get_proposal",
    "get_proposal_by_number",
    "is_email_registered",
    "list_guests",
    "list_inclusions",
    "transition_status",
    "update_proposal",
]
