"""Unit tests for error codes and their HTTP / broker mappings"""

import pytest

from api.errors import status_for_error
from domain.documents.errors import (
    DomainError,
    EventPayloadError,
    FileReadError,
    HashCalculationError,
    NotFoundError,
    PersistenceError,
    PublishError,
    StatusUpdateError,
    StorageUploadError,
    UrlGenerationError,
    ValidationError,
)
from infrastructure.messaging.consumer import outcome_for_error


@pytest.mark.parametrize(
    "error,status_code",
    [
        (ValidationError(), 400),
        (EventPayloadError(), 400),
        (FileReadError(), 400),
        (NotFoundError(), 404),
        (HashCalculationError(), 500),
        (StorageUploadError(), 500),
        (PersistenceError(), 500),
        (StatusUpdateError(), 500),
        (UrlGenerationError(), 500),
        (PublishError(), 502),
        (DomainError(), 500),
    ],
)
def test_status_for_error(error, status_code):
    assert status_for_error(error) == status_code


@pytest.mark.parametrize(
    "error,outcome",
    [
        (None, "ack"),
        (ValidationError("bad"), "reject"),
        (EventPayloadError("bad json"), "reject"),
        (StatusUpdateError(), "requeue"),
        (PersistenceError(), "requeue"),
        (RuntimeError("boom"), "requeue"),
    ],
)
def test_outcome_for_error(error, outcome):
    assert outcome_for_error(error) == outcome


class TestDomainError:

    def test_codes_are_stable(self):
        assert ValidationError.code == "VALIDATION_ERROR"
        assert FileReadError.code == "FILE_READ_ERROR"
        assert HashCalculationError.code == "HASH_CALCULATE_ERROR"
        assert StorageUploadError.code == "STORAGE_UPLOAD_ERROR"
        assert PersistenceError.code == "PERSISTENCE_ERROR"
        assert NotFoundError.code == "NOT_FOUND"

    def test_default_message_and_cause(self):
        cause = OSError("connection reset")
        error = StorageUploadError(cause=cause)

        assert error.message == "failed to upload to storage"
        assert error.cause is cause
        assert str(error) == "failed to upload to storage: connection reset"

    def test_to_dict(self):
        error = NotFoundError("document 1 not found")
        assert error.to_dict() == {"error": "NOT_FOUND", "message": "document 1 not found"}

    def test_event_payload_error_is_validation_error(self):
        assert isinstance(EventPayloadError(), ValidationError)
