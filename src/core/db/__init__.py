"""
Database ORM models and clients for the trip proposal engine.

Importing this package registers all models on Base.metadata,
which Alembic needs for autogenerate.
"""

from core.db.postgres import PostgresClient
from core.db.schemas.activity import TripProposalActivity
from core.db.schemas.base import Base
from core.db.schemas.guest import TripProposalGuest
from core.db.schemas.inclusion import TripProposalInclusion
from core.db.schemas.proposal import TripProposal

__all__ = [
    "Base",
    "PostgresClient",
    "TripProposal",
    "TripProposalActivity",
    "TripProposalGuest",
    "TripProposalInclusion",
]
