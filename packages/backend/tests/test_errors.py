"""Error classification tests."""

import pytest
from sqlalchemy.exc import DataError, OperationalError

from wardrobe.core.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
    store_errors,
)


def test_domain_errors_pass_through():
    with pytest.raises(ConflictError):
        with store_errors("test"):
            raise ConflictError("Email already exists")


def test_data_error_becomes_validation_error():
    with pytest.raises(ValidationError):
        with store_errors("test"):
            raise DataError("INSERT ...", {}, Exception("value too long"))


def test_value_error_becomes_not_found():
    with pytest.raises(NotFoundError):
        with store_errors("test"):
            raise ValueError("badly formed hexadecimal UUID string")


def test_other_store_errors_become_internal():
    with pytest.raises(InternalError) as exc:
        with store_errors("test"):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))
    assert exc.value.message == "Internal server error"
    assert exc.value.status_code == 500


def test_default_messages():
    assert ValidationError().message == "Validation error"
    assert NotFoundError("Clothing item not found").message == "Clothing item not found"


def test_unreachable_database_becomes_internal():
    with pytest.raises(InternalError):
        with store_errors("test"):
            raise ConnectionRefusedError(111, "Connect call failed")
