"""Validation layer — message aggregation and identifier format."""

import uuid

import pytest

from crudserver.server.errors import InvalidInput
from crudserver.server.validation import validate_create, validate_update, validate_user_id


VALID = {"username": "ana", "email": "ana@example.com", "name": "Ana"}


def _message(func, payload):
    with pytest.raises(InvalidInput) as exc_info:
        func(payload)
    return exc_info.value.message


# ─── create ──────────────────────────────────────────────────────

def test_create_accepts_valid_payload():
    user = validate_create({**VALID, "gender": "female", "bio": "hi"})

    assert user.username == "ana"
    assert user.gender == "female"
    assert user.bio == "hi"


def test_create_reports_every_missing_field():
    message = _message(validate_create, {})

    assert message == "Username is required, Email is required, Name is required"


def test_create_rejects_empty_strings():
    message = _message(validate_create, {"username": "", "email": "", "name": ""})

    assert "Username is required" in message
    assert "Email is required" in message
    assert "Name is required" in message


@pytest.mark.parametrize("email", ["not-an-email", "a@b", "missing-at.example.com"])
def test_create_rejects_bad_email_syntax(email):
    message = _message(validate_create, {**VALID, "email": email})

    assert message == "Invalid email format"


def test_create_reports_type_errors_with_field_name():
    message = _message(validate_create, {**VALID, "username": 123})

    assert message.startswith("username: ")


def test_create_rejects_non_object_body():
    assert _message(validate_create, None) == "Request body must be a JSON object"
    assert _message(validate_create, ["ana"]) == "Request body must be a JSON object"


def test_create_ignores_unknown_fields():
    user = validate_create({**VALID, "id": "forged", "createdAt": "yesterday"})

    assert not hasattr(user, "createdAt")


# ─── update ──────────────────────────────────────────────────────

def test_update_accepts_empty_payload():
    assert validate_update({}).changes() == {}


def test_update_tracks_only_supplied_fields():
    update = validate_update({"name": "New", "bio": None})

    assert update.changes() == {"name": "New", "bio": None}


def test_update_validates_present_fields_only():
    message = _message(validate_update, {"email": "broken", "name": ""})

    assert message == "Invalid email format, Name is required"


def test_update_rejects_null_required_field():
    assert _message(validate_update, {"username": None}) == "Username is required"


# ─── identifier ──────────────────────────────────────────────────

def test_user_id_accepts_canonical_uuid():
    user_id = str(uuid.uuid4())

    assert validate_user_id(user_id) == user_id


@pytest.mark.parametrize("user_id", [
    "not-a-uuid",
    "12345",
    "",
    uuid.uuid4().hex,
    str(uuid.uuid4()) + "0",
    str(uuid.uuid4()) + "\n",
])
def test_user_id_rejects_malformed_values(user_id):
    assert _message(validate_user_id, user_id) == "Invalid user ID format"
