"""Guest roster: capacity-checked inserts and proposal-scoped lookups."""

import logging
from typing import Any

import pydantic

from core.errors import ErrorCode, NotFoundError, ValidationError, field_errors_from
from core.models import Guest, GuestCreate

logger = logging.getLogger(__name__)

_LOCK_PROPOSAL_SQL = "SELECT id, max_guests FROM trip_proposals WHERE id = %s FOR UPDATE"

# Count and insert are evaluated in one statement. The preceding row lock on
# the proposal serializes concurrent adders, so each one counts committed rows.
_CAPACITY_CHECKED_INSERT_SQL = """
    WITH capacity AS (
        SELECT COUNT(*) AS cnt FROM trip_proposal_guests WHERE trip_proposal_id = %(proposal_id)s
    )
    INSERT INTO trip_proposal_guests (
        trip_proposal_id, name, email, phone, is_primary,
        dietary_restrictions, accessibility_needs, special_requests,
        room_assignment, is_registered, rsvp_status
    )
    SELECT %(proposal_id)s, %(name)s, %(email)s, %(phone)s, %(is_primary)s,
           %(dietary_restrictions)s, %(accessibility_needs)s, %(special_requests)s,
           %(room_assignment)s, %(is_registered)s, %(rsvp_status)s
    FROM capacity
    WHERE %(max_guests)s::int IS NULL OR capacity.cnt < %(max_guests)s::int
    RETURNING *
"""


def add_guest(proposal_id: int, guest_data: dict[str, Any] | GuestCreate, db: Any) -> Guest:
    """Add a guest unless the proposal is already at max_guests.

    An unknown proposal raises NotFoundError before the guest data is looked at.
    """
    logger.info("Adding guest to proposal %s", proposal_id)

    with db.transaction():
        proposal = db.fetch_one(_LOCK_PROPOSAL_SQL, (proposal_id,))
        if proposal is None:
            raise NotFoundError("TripProposal", proposal_id)

        try:
            guest = GuestCreate.model_validate(guest_data)
        except pydantic.ValidationError as e:
            raise ValidationError(
                "Invalid guest data", code=ErrorCode.INVALID_REQUEST, field_errors=field_errors_from(e)
            ) from e

        row = db.fetch_one(
            _CAPACITY_CHECKED_INSERT_SQL,
            {
                "proposal_id": proposal_id,
                "max_guests": proposal["max_guests"],
                **guest.model_dump(mode="json"),
            },
        )

    if row is None:
        logger.warning("Proposal %s is at capacity (%s guests)", proposal_id, proposal["max_guests"])
        raise ValidationError(
            "Trip is at maximum capacity",
            code=ErrorCode.CAPACITY_EXCEEDED,
            field_errors={"max_guests": [f"Limit of {proposal['max_guests']} guests reached"]},
        )

    return Guest.model_validate(row)


def get_guest_count(proposal_id: int, db: Any) -> int:
    row = db.fetch_one(
        "SELECT COUNT(*) AS count FROM trip_proposal_guests WHERE trip_proposal_id = %s",
        (proposal_id,),
    )
    return int(row["count"]) if row else 0


def is_email_registered(proposal_id: int, email: str, db: Any) -> bool:
    """Case-insensitive check for an existing guest email on this proposal."""
    row = db.fetch_one(
        "SELECT id FROM trip_proposal_guests WHERE trip_proposal_id = %s AND LOWER(email) = LOWER(%s) LIMIT 1",
        (proposal_id, email),
    )
    return row is not None


def list_guests(proposal_id: int, db: Any) -> list[Guest]:
    rows = db.fetch_all(
        "SELECT * FROM trip_proposal_guests WHERE trip_proposal_id = %s ORDER BY id",
        (proposal_id,),
    )
    return [Guest.model_validate(r) for r in rows]


def delete_guest(proposal_id: int, guest_id: int, db: Any) -> None:
    """Delete a guest owned by the proposal.

    A guest that does not exist and a guest on another proposal both raise
    the same NotFoundError.
    """
    logger.info("Deleting guest %s from proposal %s", guest_id, proposal_id)
    deleted = db.execute(
        "DELETE FROM trip_proposal_guests WHERE id = %s AND trip_proposal_id = %s",
        (guest_id, proposal_id),
    )
    if not deleted:
        raise NotFoundError("TripProposalGuest", guest_id)
