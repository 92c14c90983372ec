"""create_trip_proposal_tables

Revision ID: 4b7e2a91c0d3
Revises: 
Create Date: 2026-10-17 09:12:44.218306

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b7e2a91c0d3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        CREATE TABLE trip_proposals (
            id SERIAL PRIMARY KEY,
            proposal_number VARCHAR(30) UNIQUE NOT NULL,
            status VARCHAR(30) NOT NULL DEFAULT 'draft',
            customer_name VARCHAR(255) NOT NULL,
            customer_email VARCHAR(255),
            customer_phone VARCHAR(50),
            party_size INTEGER NOT NULL,
            min_guests INTEGER,
            max_guests INTEGER,
            discount_percentage NUMERIC(5,2) NOT NULL DEFAULT 0,
            tax_rate NUMERIC(5,4) NOT NULL DEFAULT 0.089,
            gratuity_percentage NUMERIC(5,2) NOT NULL DEFAULT 0,
            deposit_percentage NUMERIC(5,2) NOT NULL DEFAULT 50,
            subtotal NUMERIC(10,2) NOT NULL DEFAULT 0,
            discount_amount NUMERIC(10,2) NOT NULL DEFAULT 0,
            taxes NUMERIC(10,2) NOT NULL DEFAULT 0,
            gratuity_amount NUMERIC(10,2) NOT NULL DEFAULT 0,
            total NUMERIC(10,2) NOT NULL DEFAULT 0,
            deposit_amount NUMERIC(10,2) NOT NULL DEFAULT 0,
            balance_due NUMERIC(10,2) NOT NULL DEFAULT 0,
            deposit_paid BOOLEAN NOT NULL DEFAULT FALSE,
            view_count INTEGER NOT NULL DEFAULT 0,
            sent_at TIMESTAMPTZ,
            first_viewed_at TIMESTAMPTZ,
            last_viewed_at TIMESTAMPTZ,
            accepted_at TIMESTAMPTZ,
            accepted_signature TEXT,
            accepted_ip VARCHAR(50),
            converted_at TIMESTAMPTZ,
            converted_to_booking_id INTEGER,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT chk_trip_proposals_status CHECK (
                status IN ('draft', 'sent', 'viewed', 'accepted', 'declined', 'expired', 'converted')
            ),
            CONSTRAINT chk_trip_proposals_party_size CHECK (party_size >= 1 AND party_size <= 100),
            CONSTRAINT chk_trip_proposals_guest_bounds CHECK (
                max_guests IS NULL OR min_guests IS NULL OR max_guests >= min_guests
            )
        )
    """)
    op.execute("CREATE INDEX idx_trip_proposals_status ON trip_proposals (status)")
    op.execute("CREATE INDEX idx_trip_proposals_customer_email ON trip_proposals (customer_email)")

    op.execute("""
        CREATE TABLE trip_proposal_inclusions (
            id SERIAL PRIMARY KEY,
            trip_proposal_id INTEGER NOT NULL REFERENCES trip_proposals(id) ON DELETE CASCADE,
            inclusion_type VARCHAR(50) NOT NULL,
            description TEXT NOT NULL,
            pricing_type VARCHAR(20) NOT NULL DEFAULT 'flat',
            quantity NUMERIC(10,2) NOT NULL DEFAULT 1,
            unit VARCHAR(50),
            unit_price NUMERIC(10,2) NOT NULL DEFAULT 0,
            total_price NUMERIC(10,2) NOT NULL DEFAULT 0,
            sort_order INTEGER NOT NULL DEFAULT 0,
            show_on_proposal BOOLEAN NOT NULL DEFAULT TRUE,
            notes TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT chk_inclusion_type CHECK (
                inclusion_type IN ('transportation', 'chauffeur', 'gratuity', 'planning_fee',
                                   'arranged_tasting', 'custom')
            ),
            CONSTRAINT chk_inclusion_pricing_type CHECK (pricing_type IN ('flat', 'per_person', 'per_day'))
        )
    """)
    op.execute("CREATE INDEX idx_trip_proposal_inclusions_proposal ON trip_proposal_inclusions (trip_proposal_id)")

    op.execute("""
        CREATE TABLE trip_proposal_guests (
            id SERIAL PRIMARY KEY,
            trip_proposal_id INTEGER NOT NULL REFERENCES trip_proposals(id) ON DELETE CASCADE,
            name VARCHAR(255) NOT NULL,
            email VARCHAR(255),
            phone VARCHAR(50),
            is_primary BOOLEAN NOT NULL DEFAULT FALSE,
            dietary_restrictions TEXT,
            accessibility_needs TEXT,
            special_requests TEXT,
            room_assignment VARCHAR(100),
            is_registered BOOLEAN NOT NULL DEFAULT FALSE,
            rsvp_status VARCHAR(30) NOT NULL DEFAULT 'pending',
            amount_owed NUMERIC(10,2) NOT NULL DEFAULT 0,
            amount_paid NUMERIC(10,2) NOT NULL DEFAULT 0,
            payment_status VARCHAR(20) NOT NULL DEFAULT 'unpaid',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT chk_guest_rsvp_status CHECK (rsvp_status IN ('pending', 'confirmed', 'declined', 'maybe')),
            CONSTRAINT chk_guest_payment_status CHECK (payment_status IN ('unpaid', 'partial', 'paid', 'refunded'))
        )
    """)
    op.execute("CREATE INDEX idx_trip_proposal_guests_proposal ON trip_proposal_guests (trip_proposal_id)")
    op.execute("CREATE INDEX idx_trip_proposal_guests_email ON trip_proposal_guests (email)")

    op.execute("""
        CREATE TABLE trip_proposal_activity (
            id SERIAL PRIMARY KEY,
            trip_proposal_id INTEGER NOT NULL REFERENCES trip_proposals(id) ON DELETE CASCADE,
            action VARCHAR(100) NOT NULL,
            description TEXT,
            actor_type VARCHAR(30) NOT NULL DEFAULT 'system',
            actor_name VARCHAR(255),
            metadata JSONB NOT NULL DEFAULT '{}'::jsonb,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX idx_trip_proposal_activity_proposal ON trip_proposal_activity (trip_proposal_id)")
    op.execute("CREATE INDEX idx_trip_proposal_activity_created ON trip_proposal_activity (created_at DESC)")

    # Format: TP-2026-00001
    op.execute("""
        CREATE OR REPLACE FUNCTION generate_trip_proposal_number()
        RETURNS VARCHAR(30) AS $$
        DECLARE
            year_part VARCHAR(4) := TO_CHAR(NOW(), 'YYYY');
            sequence_num INTEGER;
        BEGIN
            PERFORM pg_advisory_xact_lock(hashtext('trip_proposal_number'));
            SELECT COALESCE(MAX(CAST(SUBSTRING(proposal_number FROM 9) AS INTEGER)), 0) + 1
            INTO sequence_num
            FROM trip_proposals
            WHERE proposal_number LIKE 'TP-' || year_part || '-%';
            RETURN 'TP-' || year_part || '-' || LPAD(sequence_num::TEXT, 5, '0');
        END;
        $$ LANGUAGE plpgsql
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("DROP FUNCTION IF EXISTS generate_trip_proposal_number()")
    op.execute("DROP TABLE IF EXISTS trip_proposal_activity")
    op.execute("DROP TABLE IF EXISTS trip_proposal_guests")
    op.execute("DROP TABLE IF EXISTS trip_proposal_inclusions")
    op.execute("DROP TABLE IF EXISTS trip_proposals")
