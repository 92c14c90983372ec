"""
Proposal status state machine.

Every legal move is listed in ALLOWED_TRANSITIONS, keyed by source status.
A status missing from the table has no outbound transitions. The side effects
of entering a status (timestamps, counters, acceptance details) live in
TRANSITION_EFFECTS and are applied in the same UPDATE as the status change.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from core.errors import ErrorCode, NotFoundError, ValidationError
from core.models import Proposal, ProposalStatus
from core.services.activity import log_activity

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[ProposalStatus, frozenset[ProposalStatus]] = {
    ProposalStatus.DRAFT: frozenset({ProposalStatus.SENT, ProposalStatus.DECLINED}),
    ProposalStatus.SENT: frozenset(
        {ProposalStatus.VIEWED, ProposalStatus.ACCEPTED, ProposalStatus.DECLINED, ProposalStatus.EXPIRED}
    ),
    ProposalStatus.VIEWED: frozenset(
        {ProposalStatus.ACCEPTED, ProposalStatus.DECLINED, ProposalStatus.EXPIRED, ProposalStatus.SENT}
    ),
    ProposalStatus.ACCEPTED: frozenset({ProposalStatus.CONVERTED}),
    ProposalStatus.DECLINED: frozenset({ProposalStatus.DRAFT}),
    ProposalStatus.EXPIRED: frozenset({ProposalStatus.DRAFT}),
    ProposalStatus.CONVERTED: frozenset(),
}


@dataclass(frozen=True)
class TransitionEffect:
    # column -> SQL expression evaluated by the database
    assignments: dict[str, str] = field(default_factory=dict)
    # metadata key -> column, copied only when the caller supplies the key
    metadata_columns: dict[str, str] = field(default_factory=dict)


TRANSITION_EFFECTS: dict[ProposalStatus, TransitionEffect] = {
    ProposalStatus.SENT: TransitionEffect(assignments={"sent_at": "NOW()"}),
    ProposalStatus.VIEWED: TransitionEffect(
        assignments={
            "view_count": "COALESCE(view_count, 0) + 1",
            "last_viewed_at": "NOW()",
            "first_viewed_at": "COALESCE(first_viewed_at, NOW())",
        }
    ),
    ProposalStatus.ACCEPTED: TransitionEffect(
        assignments={"accepted_at": "NOW()"},
        metadata_columns={"signature": "accepted_signature", "ip_address": "accepted_ip"},
    ),
    ProposalStatus.CONVERTED: TransitionEffect(
        assignments={"converted_at": "NOW()"},
        metadata_columns={"booking_id": "converted_to_booking_id"},
    ),
}

_LOCK_PROPOSAL_SQL = "SELECT id, status FROM trip_proposals WHERE id = %s FOR UPDATE"


def _label(status: ProposalStatus | str) -> str:
    return status.value if isinstance(status, ProposalStatus) else str(status)


def can_transition(current: ProposalStatus | str, requested: ProposalStatus | str) -> bool:
    try:
        source, target = ProposalStatus(current), ProposalStatus(requested)
    except ValueError:
        return False
    return target in ALLOWED_TRANSITIONS.get(source, frozenset())


def validate_transition(current: ProposalStatus | str, requested: ProposalStatus | str) -> ProposalStatus:
    """Return the requested status as an enum, or raise if the move is not allowed."""
    if not can_transition(current, requested):
        raise ValidationError(
            f"Cannot transition from {_label(current)} to {_label(requested)}",
            code=ErrorCode.INVALID_TRANSITION,
            field_errors={"status": [f"{_label(requested)} is not reachable from {_label(current)}"]},
        )
    return ProposalStatus(requested)


def status_assignments(
    status: ProposalStatus, metadata: dict[str, Any] | None = None
) -> tuple[list[str], list[Any]]:
    """SET clauses and their parameters for entering ``status``, effects included."""
    effect = TRANSITION_EFFECTS.get(status, TransitionEffect())
    metadata = metadata or {}

    clauses = ["status = %s"]
    params: list[Any] = [status.value]
    for column, expression in effect.assignments.items():
        clauses.append(f"{column} = {expression}")
    for key, column in effect.metadata_columns.items():
        if metadata.get(key) is not None:
            clauses.append(f"{column} = %s")
            params.append(metadata[key])
    return clauses, params


def build_status_update(
    proposal_id: int, status: ProposalStatus, metadata: dict[str, Any] | None = None
) -> tuple[str, tuple[Any, ...]]:
    clauses, params = status_assignments(status, metadata)
    clauses.append("updated_at = NOW()")
    params.append(proposal_id)
    sql = f"UPDATE trip_proposals SET {', '.join(clauses)} WHERE id = %s RETURNING *"
    return sql, tuple(params)


def transition_status(
    proposal_id: int,
    status: ProposalStatus | str,
    db: Any,
    metadata: dict[str, Any] | None = None,
) -> Proposal:
    """Move a proposal to a new status and record the change in its activity log."""
    logger.info("Updating status of proposal %s to %s", proposal_id, _label(status))

    with db.transaction():
        row = db.fetch_one(_LOCK_PROPOSAL_SQL, (proposal_id,))
        if row is None:
            raise NotFoundError("TripProposal", proposal_id)

        previous = row["status"]
        target = validate_transition(previous, status)

        sql, params = build_status_update(proposal_id, target, metadata)
        updated = db.fetch_one(sql, params)
        if updated is None:
            raise NotFoundError("TripProposal", proposal_id)

    metadata = metadata or {}
    try:
        log_activity(
            proposal_id,
            f"status_{target.value}",
            f"Status changed to {target.value}",
            db,
            actor_type=metadata.get("actor_type", "system"),
            metadata={"previous_status": previous, **metadata},
        )
    except Exception:
        logger.exception("Failed to log status change for proposal %s", proposal_id)

    logger.info("Proposal %s moved from %s to %s", proposal_id, previous, target.value)
    return Proposal.model_validate(updated)
