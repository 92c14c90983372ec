"""Shared test fixtures for the trip proposal engine."""

import sys
import uuid
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load .env file for test configuration
load_dotenv()

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))


# PostgreSQL fixtures
@pytest.fixture
def pg_connection():
    """Provide a raw PostgreSQL connection for integration tests."""
    import psycopg
    from psycopg.rows import dict_row

    from core.config import get_config

    config = get_config()
    conn = psycopg.connect(
        host=config.db_host,
        port=config.db_port,
        dbname=config.db_name,
        user=config.db_user,
        password=config.db_password,
        autocommit=True,
        row_factory=dict_row,
    )
    yield conn
    conn.close()


@pytest.fixture
def db_client():
    """Provide a connected PostgresClient for integration tests."""
    from core.config import get_config
    from core.db import PostgresClient

    with PostgresClient(get_config()) as client:
        yield client


@pytest.fixture
def make_proposal(pg_connection):
    """Insert trip_proposals rows directly; every row created is deleted afterwards."""
    created: list[int] = []

    def _make(**overrides):
        values = {
            "proposal_number": f"TP-T-{uuid.uuid4().hex[:20]}",
            "status": "draft",
            "customer_name": "Integration Test",
            "party_size": 8,
            "min_guests": None,
            "max_guests": None,
            "discount_percentage": 0,
            "tax_rate": 0,
            "gratuity_percentage": 0,
            "deposit_percentage": 50,
            "deposit_paid": False,
            "deposit_amount": 0,
            "total": 0,
            **overrides,
        }
        columns = ", ".join(values)
        placeholders = ", ".join(f"%({k})s" for k in values)
        with pg_connection.cursor() as cur:
            cur.execute(f"INSERT INTO trip_proposals ({columns}) VALUES ({placeholders}) RETURNING id", values)
            proposal_id = cur.fetchone()["id"]
        created.append(proposal_id)
        return proposal_id

    yield _make

    # Cascades to guests, inclusions and activity
    with pg_connection.cursor() as cur:
        cur.execute("DELETE FROM trip_proposals WHERE id = ANY(%s)", (created,))
