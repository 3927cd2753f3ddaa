"""Error Hierarchy: codes, HTTP statuses and the REST error envelope."""

import pytest

from tkd_core.core.errors import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    ErrorCategory,
    ErrorContext,
    NotFoundError,
    StateError,
    TkdError,
    ValidationError,
)


@pytest.mark.parametrize("error,status,code", [
    (ValidationError("bad", "name"), 400, "VALIDATION_ERROR"),
    (NotFoundError("Rank", 7), 404, "RESOURCE_NOT_FOUND"),
    (ConflictError("taken"), 409, "CONFLICT"),
    (StateError("not a coach"), 400, "STATE_ERROR"),
    (AuthenticationError(), 401, "AUTHENTICATION_REQUIRED"),
    (DatabaseError("timeout", "commit"), 503, "DATABASE_ERROR"),
])
def test_status_and_code(error, status, code):
    assert isinstance(error, TkdError)
    assert error.http_status == status
    assert error.code == code


def test_not_found_fills_entity_context():
    error = NotFoundError("Person", 42)
    body = error.to_response()["error"]
    assert body["message"] == "Person '42' not found"
    assert body["category"] == ErrorCategory.RESOURCE_NOT_FOUND.value
    assert body["context"] == {"entity_type": "Person", "entity_id": "42"}


def test_user_message_overrides_message():
    error = ConflictError(
        "unique violation on attendance_session_person_key",
        context=ErrorContext(user_message="Attendance already recorded"),
    )
    assert error.to_response()["error"]["message"] == "Attendance already recorded"


def test_validation_error_keeps_field():
    assert ValidationError("bad", "level").field == "level"


def test_database_error_message_names_operation():
    assert DatabaseError("timeout", "commit").message == "Database commit failed: timeout"
