"""Unit tests for the pricing calculator."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from core.errors import NotFoundError
from core.models import Inclusion, PricingType
from core.services.pricing import STOPS_SUBTOTAL, calculate_pricing, compute_breakdown, line_total
from helpers import inclusion_row, make_inclusion, make_proposal, proposal_row

# --- line_total ---


def test_flat_line_multiplies_quantity():
    assert line_total(make_inclusion(unit_price=150, quantity=3), party_size=8) == 450


def test_per_person_line_uses_party_size_and_ignores_quantity():
    inclusion = make_inclusion(pricing_type="per_person", unit_price=50, quantity=3)
    assert line_total(inclusion, party_size=8) == 400


def test_per_day_line_multiplies_day_count():
    inclusion = make_inclusion(pricing_type="per_day", unit_price=200, quantity=3)
    assert line_total(inclusion, party_size=8) == 600


@pytest.mark.parametrize("pricing_type", [None, "", "per_hour"])
def test_missing_or_unknown_pricing_type_is_flat(pricing_type):
    inclusion = make_inclusion(pricing_type=pricing_type, unit_price=100, quantity=2)
    assert inclusion.pricing_type == PricingType.FLAT
    assert line_total(inclusion, party_size=8) == 200


def test_null_quantity_and_price_fall_back():
    inclusion = Inclusion.model_validate(inclusion_row(unit_price=None, quantity=None))
    assert inclusion.quantity == 1
    assert line_total(inclusion, party_size=4) == 0


# --- compute_breakdown ---


def test_quote_with_discount_tax_gratuity_and_deposit():
    proposal = make_proposal(
        party_size=8,
        discount_percentage=10,
        tax_rate=Decimal("0.091"),
        gratuity_percentage=20,
        deposit_percentage=50,
        deposit_paid=False,
    )
    breakdown = compute_breakdown(proposal, [make_inclusion(unit_price=1150, quantity=1)])

    assert breakdown.subtotal == pytest.approx(1150)
    assert breakdown.discount_amount == pytest.approx(115)
    assert breakdown.subtotal_after_discount == pytest.approx(1035)
    assert breakdown.taxes == pytest.approx(94.185)
    assert breakdown.gratuity_amount == pytest.approx(207)
    assert breakdown.total == pytest.approx(1336.185)
    assert breakdown.deposit_amount == pytest.approx(668.0925)
    assert breakdown.balance_due == pytest.approx(1336.185)


def test_paid_deposit_is_preserved_and_subtracted():
    proposal = make_proposal(deposit_paid=True, deposit_amount=250, deposit_percentage=50)
    breakdown = compute_breakdown(proposal, [make_inclusion(unit_price=1000)])

    assert breakdown.total == pytest.approx(1000)
    assert breakdown.deposit_amount == 250
    assert breakdown.balance_due == pytest.approx(750)


def test_paid_deposit_survives_later_edits():
    proposal = make_proposal(deposit_paid=True, deposit_amount=250, deposit_percentage=50)
    more = [make_inclusion(id=1, unit_price=1000), make_inclusion(id=2, unit_price=600)]
    breakdown = compute_breakdown(proposal, more)

    assert breakdown.deposit_amount == 250
    assert breakdown.balance_due == pytest.approx(1350)


def test_unpaid_deposit_is_a_live_quote():
    proposal = make_proposal(deposit_paid=False, deposit_amount=999, deposit_percentage=25)
    breakdown = compute_breakdown(proposal, [make_inclusion(unit_price=1000)])

    assert breakdown.deposit_amount == pytest.approx(250)
    assert breakdown.balance_due == pytest.approx(1000)


def test_empty_inclusion_list_prices_to_zero():
    breakdown = compute_breakdown(make_proposal(tax_rate=Decimal("0.089")), [])
    assert breakdown.subtotal == 0
    assert breakdown.total == 0
    assert breakdown.deposit_amount == 0


INCLUSION_SETS = [
    [],
    [make_inclusion(unit_price=1150)],
    [
        make_inclusion(id=1, unit_price=85, pricing_type="per_person"),
        make_inclusion(id=2, unit_price=450, quantity=2, pricing_type="per_day"),
        make_inclusion(id=3, unit_price=300, quantity=1.5),
    ],
]


@pytest.mark.parametrize("inclusions", INCLUSION_SETS)
def test_services_subtotal_matches_inclusions_and_stops_are_zero(inclusions):
    breakdown = compute_breakdown(make_proposal(), inclusions)
    assert breakdown.services_subtotal == breakdown.inclusions_subtotal
    assert breakdown.stops_subtotal == STOPS_SUBTOTAL == 0


@pytest.mark.parametrize("inclusions", INCLUSION_SETS)
@pytest.mark.parametrize(
    "discount,tax_rate,gratuity",
    [(0, 0, 0), (10, 0.091, 20), (100, 0.1, 18), (33.3, 0.0725, 15)],
)
def test_totals_compose(inclusions, discount, tax_rate, gratuity):
    proposal = make_proposal(discount_percentage=discount, tax_rate=tax_rate, gratuity_percentage=gratuity)
    b = compute_breakdown(proposal, inclusions)

    assert b.subtotal_after_discount == pytest.approx(b.subtotal - b.discount_amount)
    assert b.total == pytest.approx(b.subtotal_after_discount + b.taxes + b.gratuity_amount)


def test_recompute_is_idempotent():
    proposal = make_proposal(discount_percentage=10, tax_rate=0.091, gratuity_percentage=20)
    inclusions = INCLUSION_SETS[2]
    assert compute_breakdown(proposal, inclusions) == compute_breakdown(proposal, inclusions)


# --- calculate_pricing ---


def test_calculate_pricing_persists_breakdown():
    db = MagicMock()
    db.fetch_one.return_value = proposal_row(
        id=12, discount_percentage=Decimal("10.00"), tax_rate=Decimal("0.0910"), gratuity_percentage=Decimal("20")
    )
    db.fetch_all.return_value = [inclusion_row(trip_proposal_id=12, unit_price=Decimal("1150.00"))]

    breakdown = calculate_pricing(12, db)

    db.transaction.assert_called_once()
    lock_sql, lock_params = db.fetch_one.call_args.args
    assert "FOR UPDATE" in lock_sql
    assert lock_params == (12,)

    db.execute.assert_called_once()
    sql, params = db.execute.call_args.args
    assert sql.strip().startswith("UPDATE trip_proposals")
    assert params[-1] == 12
    assert params[:-1] == (
        breakdown.subtotal,
        breakdown.discount_amount,
        breakdown.taxes,
        breakdown.gratuity_amount,
        breakdown.total,
        breakdown.deposit_amount,
        breakdown.balance_due,
    )
    assert breakdown.total == pytest.approx(1336.185)


def test_calculate_pricing_missing_proposal():
    db = MagicMock()
    db.fetch_one.return_value = None

    with pytest.raises(NotFoundError, match="TripProposal 99 not found"):
        calculate_pricing(99, db)

    db.fetch_all.assert_not_called()
    db.execute.assert_not_called()


def test_calculate_pricing_keeps_recorded_deposit():
    db = MagicMock()
    db.fetch_one.return_value = proposal_row(deposit_paid=True, deposit_amount=Decimal("250.00"))
    db.fetch_all.return_value = [inclusion_row(unit_price=Decimal("1000"))]

    breakdown = calculate_pricing(1, db)

    _, params = db.execute.call_args.args
    assert params[5] == 250
    assert params[6] == pytest.approx(750)
    assert breakdown.deposit_amount == 250
