"""Append-only activity log for trip proposals."""

import logging
from typing import Any

from psycopg.types.json import Jsonb

logger = logging.getLogger(__name__)

ACTOR_TYPES = frozenset({"staff", "customer", "system"})


def resolve_actor_type(value: object) -> str:
    """Only known actor types are recorded; anything else is attributed to the system."""
    return value if isinstance(value, str) and value in ACTOR_TYPES else "system"


def log_activity(
    proposal_id: int,
    action: str,
    description: str,
    db: Any,
    actor_type: str = "system",
    actor_name: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> None:
    """Insert one activity row. Errors propagate; callers decide whether they are fatal."""
    db.execute(
        """
        INSERT INTO trip_proposal_activity
            (trip_proposal_id, action, description, actor_type, actor_name, metadata)
        VALUES (%s, %s, %s, %s, %s, %s)
        """,
        (
            proposal_id,
            action,
            description,
            resolve_actor_type(actor_type),
            actor_name,
            Jsonb(metadata or {}),
        ),
    )
    logger.debug("Logged activity %s for proposal %s", action, proposal_id)
