"""Unit tests for the guest roster."""

from unittest.mock import MagicMock

import pytest

from core.errors import ErrorCode, NotFoundError, ValidationError
from core.services.roster import (
    add_guest,
    delete_guest,
    get_guest_count,
    is_email_registered,
    list_guests,
)

GUEST = {"name": "Sam Okafor", "email": "sam@example.com", "dietary_restrictions": "vegetarian"}


def _guest_row(**overrides):
    row = {
        "id": 31,
        "trip_proposal_id": 1,
        "name": "Sam Okafor",
        "email": "sam@example.com",
        "phone": None,
        "is_primary": False,
        "dietary_restrictions": "vegetarian",
        "is_registered": False,
        "rsvp_status": "pending",
    }
    row.update(overrides)
    return row


# --- add_guest ---


def test_add_guest_under_capacity():
    db = MagicMock()
    db.fetch_one.side_effect = [{"id": 1, "max_guests": 5}, _guest_row()]

    guest = add_guest(1, GUEST, db)

    assert guest.id == 31
    assert guest.name == "Sam Okafor"
    db.transaction.assert_called_once()

    lock_sql, lock_params = db.fetch_one.call_args_list[0].args
    assert "FOR UPDATE" in lock_sql
    assert lock_params == (1,)

    insert_sql, params = db.fetch_one.call_args_list[1].args
    assert "INSERT INTO trip_proposal_guests" in insert_sql
    assert "COUNT(*)" in insert_sql
    assert "RETURNING" in insert_sql
    assert params["proposal_id"] == 1
    assert params["max_guests"] == 5
    assert params["name"] == "Sam Okafor"
    assert params["rsvp_status"] == "pending"


def test_add_guest_at_capacity_raises():
    db = MagicMock()
    db.fetch_one.side_effect = [{"id": 1, "max_guests": 5}, None]

    with pytest.raises(ValidationError) as exc_info:
        add_guest(1, GUEST, db)

    assert exc_info.value.code == ErrorCode.CAPACITY_EXCEEDED
    assert exc_info.value.message == "Trip is at maximum capacity"
    assert "max_guests" in exc_info.value.field_errors


def test_add_guest_without_capacity_passes_null_limit():
    db = MagicMock()
    db.fetch_one.side_effect = [{"id": 1, "max_guests": None}, _guest_row()]

    add_guest(1, GUEST, db)

    _, params = db.fetch_one.call_args_list[1].args
    assert params["max_guests"] is None


def test_add_guest_missing_proposal():
    db = MagicMock()
    db.fetch_one.return_value = None

    with pytest.raises(NotFoundError) as exc_info:
        add_guest(404, GUEST, db)

    assert exc_info.value.code == ErrorCode.PROPOSAL_NOT_FOUND
    assert db.fetch_one.call_count == 1


def test_add_guest_rejects_invalid_data_without_inserting():
    db = MagicMock()
    db.fetch_one.return_value = {"id": 1, "max_guests": 5}

    with pytest.raises(ValidationError) as exc_info:
        add_guest(1, {"name": "", "email": "not-an-email"}, db)

    assert exc_info.value.code == ErrorCode.INVALID_REQUEST
    assert set(exc_info.value.field_errors) == {"name", "email"}
    assert db.fetch_one.call_count == 1


def test_add_guest_missing_proposal_wins_over_invalid_data():
    db = MagicMock()
    db.fetch_one.return_value = None

    with pytest.raises(NotFoundError) as exc_info:
        add_guest(404, {"name": "", "email": "not-an-email"}, db)

    assert exc_info.value.code == ErrorCode.PROPOSAL_NOT_FOUND


def test_add_guest_blank_email_is_stored_as_null():
    db = MagicMock()
    db.fetch_one.side_effect = [{"id": 1, "max_guests": None}, _guest_row(email=None)]

    add_guest(1, {"name": "Sam Okafor", "email": "  "}, db)

    _, params = db.fetch_one.call_args_list[1].args
    assert params["email"] is None


# --- counts and lookups ---


def test_get_guest_count():
    db = MagicMock()
    db.fetch_one.return_value = {"count": 5}
    assert get_guest_count(1, db) == 5
    assert db.fetch_one.call_args.args[1] == (1,)


def test_get_guest_count_without_row():
    db = MagicMock()
    db.fetch_one.return_value = None
    assert get_guest_count(1, db) == 0


def test_is_email_registered_is_case_insensitive_query():
    db = MagicMock()
    db.fetch_one.return_value = {"id": 31}

    assert is_email_registered(1, "SAM@Example.com", db) is True
    sql, params = db.fetch_one.call_args.args
    assert "LOWER(email) = LOWER(%s)" in sql
    assert params == (1, "SAM@Example.com")


def test_is_email_registered_false_when_no_row():
    db = MagicMock()
    db.fetch_one.return_value = None
    assert is_email_registered(1, "new@example.com", db) is False


def test_list_guests():
    db = MagicMock()
    db.fetch_all.return_value = [_guest_row(id=1), _guest_row(id=2, name="Lee Park", email=None)]

    guests = list_guests(1, db)

    assert [g.id for g in guests] == [1, 2]
    assert guests[1].email is None


# --- delete_guest ---


def test_delete_guest_scoped_to_proposal():
    db = MagicMock()
    db.execute.return_value = 1

    delete_guest(1, 31, db)

    sql, params = db.execute.call_args.args
    assert "id = %s AND trip_proposal_id = %s" in sql
    assert params == (31, 1)


def test_delete_guest_not_found_or_foreign_look_the_same():
    db = MagicMock()
    db.execute.return_value = 0

    with pytest.raises(NotFoundError) as missing:
        delete_guest(1, 999, db)
    with pytest.raises(NotFoundError) as foreign:
        delete_guest(2, 31, db)

    assert missing.value.code == foreign.value.code == ErrorCode.GUEST_NOT_FOUND
    assert foreign.value.message == "TripProposalGuest 31 not found"
