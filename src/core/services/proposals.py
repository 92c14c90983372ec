"""Proposal creation, lookup, editing and inclusion (line item) management."""

import logging
from typing import Any

import pydantic

from core.config import get_config
from core.errors import ErrorCode, NotFoundError, ValidationError, field_errors_from
from core.models import Inclusion, InclusionCreate, Proposal, ProposalCreate, ProposalUpdate
from core.services.activity import log_activity
from core.services.lifecycle import status_assignments, validate_transition
from core.services.pricing import line_total

logger = logging.getLogger(__name__)

_INSERT_PROPOSAL_SQL = """
    INSERT INTO trip_proposals (
        proposal_number, status, customer_name, customer_email, customer_phone,
        party_size, min_guests, max_guests,
        discount_percentage, tax_rate, gratuity_percentage, deposit_percentage
    )
    VALUES (
        generate_trip_proposal_number(), 'draft', %(customer_name)s, %(customer_email)s, %(customer_phone)s,
        %(party_size)s, %(min_guests)s, %(max_guests)s,
        %(discount_percentage)s, %(tax_rate)s, %(gratuity_percentage)s, %(deposit_percentage)s
    )
    RETURNING *
"""

_INSERT_INCLUSION_SQL = """
    INSERT INTO trip_proposal_inclusions (
        trip_proposal_id, inclusion_type, description, pricing_type, unit_price,
        quantity, unit, total_price, sort_order, show_on_proposal, notes
    )
    VALUES (
        %(trip_proposal_id)s, %(inclusion_type)s, %(description)s, %(pricing_type)s, %(unit_price)s,
        %(quantity)s, %(unit)s, %(total_price)s,
        COALESCE(
            %(sort_order)s::int,
            (SELECT COALESCE(MAX(sort_order), -1) + 1 FROM trip_proposal_inclusions
             WHERE trip_proposal_id = %(trip_proposal_id)s)
        ),
        %(show_on_proposal)s, %(notes)s
    )
    RETURNING *
"""


def _validate(model: type[pydantic.BaseModel], data: Any, label: str) -> Any:
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(
            f"Invalid {label} data", code=ErrorCode.INVALID_REQUEST, field_errors=field_errors_from(e)
        ) from e


def create_proposal(data: dict[str, Any] | ProposalCreate, db: Any, created_by: str | None = None) -> Proposal:
    validated: ProposalCreate = _validate(ProposalCreate, data, "proposal")
    values = validated.model_dump()
    if values["tax_rate"] is None:
        values["tax_rate"] = get_config().default_tax_rate

    logger.info("Creating trip proposal for party of %d", validated.party_size)
    with db.transaction():
        row = db.fetch_one(_INSERT_PROPOSAL_SQL, values)
        proposal = Proposal.model_validate(row)
        log_activity(
            proposal.id,
            "created",
            f"Proposal {proposal.proposal_number} created",
            db,
            actor_type="staff" if created_by else "system",
            actor_name=created_by,
        )
    return proposal


def get_proposal(proposal_id: int, db: Any) -> Proposal:
    row = db.fetch_one("SELECT * FROM trip_proposals WHERE id = %s", (proposal_id,))
    if row is None:
        raise NotFoundError("TripProposal", proposal_id)
    return Proposal.model_validate(row)


def get_proposal_by_number(proposal_number: str, db: Any) -> Proposal:
    row = db.fetch_one("SELECT * FROM trip_proposals WHERE proposal_number = %s", (proposal_number,))
    if row is None:
        raise NotFoundError("TripProposal", proposal_number)
    return Proposal.model_validate(row)


def update_proposal(
    proposal_id: int,
    data: dict[str, Any] | ProposalUpdate,
    db: Any,
    updated_by: str | None = None,
) -> Proposal:
    """Apply a partial edit to a proposal.

    Only the fields present in ``data`` are written. A status change must be a
    legal transition and carries the same side effects as transition_status.
    Totals are left as they are; run calculate_pricing afterwards to refresh them.
    """
    logger.info("Updating trip proposal %s", proposal_id)

    with db.transaction():
        current = db.fetch_one("SELECT * FROM trip_proposals WHERE id = %s FOR UPDATE", (proposal_id,))
        if current is None:
            raise NotFoundError("TripProposal", proposal_id)

        validated: ProposalUpdate = _validate(ProposalUpdate, data, "proposal")
        values = validated.model_dump(mode="json", exclude_unset=True)

        previous_status = current["status"]
        requested_status = values.pop("status", None)
        target = None
        if requested_status is not None and requested_status != previous_status:
            target = validate_transition(previous_status, requested_status)

        min_guests = values.get("min_guests", current["min_guests"])
        max_guests = values.get("max_guests", current["max_guests"])
        if min_guests is not None and max_guests is not None and max_guests < min_guests:
            raise ValidationError(
                "max_guests must be greater than or equal to min_guests",
                code=ErrorCode.INVALID_REQUEST,
                field_errors={"max_guests": [f"Must be at least {min_guests}"]},
            )

        if not values and target is None:
            return Proposal.model_validate(current)

        clauses = [f"{column} = %s" for column in values]
        params: list[Any] = list(values.values())
        if target is not None:
            status_clauses, status_params = status_assignments(target)
            clauses.extend(status_clauses)
            params.extend(status_params)
        clauses.append("updated_at = NOW()")
        params.append(proposal_id)

        row = db.fetch_one(
            f"UPDATE trip_proposals SET {', '.join(clauses)} WHERE id = %s RETURNING *",
            tuple(params),
        )

    changed = sorted(values) + (["status"] if target is not None else [])
    metadata: dict[str, Any] = {"fields": changed}
    if target is not None:
        metadata["previous_status"] = previous_status
    try:
        log_activity(
            proposal_id,
            "updated",
            "Proposal updated",
            db,
            actor_type="staff" if updated_by else "system",
            actor_name=updated_by,
            metadata=metadata,
        )
    except Exception:
        logger.exception("Failed to log update for proposal %s", proposal_id)

    return Proposal.model_validate(row)


def list_inclusions(proposal_id: int, db: Any) -> list[Inclusion]:
    rows = db.fetch_all(
        "SELECT * FROM trip_proposal_inclusions WHERE trip_proposal_id = %s ORDER BY sort_order, id",
        (proposal_id,),
    )
    return [Inclusion.model_validate(r) for r in rows]


def add_inclusion(proposal_id: int, data: dict[str, Any] | InclusionCreate, db: Any) -> Inclusion:
    logger.info("Adding inclusion to proposal %s", proposal_id)

    with db.transaction():
        # Same row lock as calculate_pricing
        row = db.fetch_one("SELECT id, party_size FROM trip_proposals WHERE id = %s FOR UPDATE", (proposal_id,))
        if row is None:
            raise NotFoundError("TripProposal", proposal_id)

        validated: InclusionCreate = _validate(InclusionCreate, data, "inclusion")
        values = validated.model_dump(mode="json")
        draft = Inclusion(
            id=0,
            trip_proposal_id=proposal_id,
            pricing_type=validated.pricing_type,
            unit_price=validated.unit_price,
            quantity=validated.quantity,
        )
        values.update(
            trip_proposal_id=proposal_id,
            total_price=line_total(draft, row["party_size"]),
        )
        inserted = db.fetch_one(_INSERT_INCLUSION_SQL, values)

    return Inclusion.model_validate(inserted)


def delete_inclusion(proposal_id: int, inclusion_id: int, db: Any) -> None:
    logger.info("Deleting inclusion %s from proposal %s", inclusion_id, proposal_id)
    with db.transaction():
        db.fetch_one("SELECT id FROM trip_proposals WHERE id = %s FOR UPDATE", (proposal_id,))
        deleted = db.execute(
            "DELETE FROM trip_proposal_inclusions WHERE id = %s AND trip_proposal_id = %s",
            (inclusion_id, proposal_id),
        )
    if not deleted:
        raise NotFoundError("TripProposalInclusion", inclusion_id)
