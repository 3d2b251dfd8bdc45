"""
Unit tests for core.models.errors
"""

import pytest

from core.models.errors import (
    FileSizeError,
    ImageServiceError,
    MIMETypeError,
    NotFoundError,
    ObjectStoreError,
    RepositoryError,
    UnauthorizedError,
    ValidationError,
)


class TestImageServiceError:
    def test_base_error(self) -> None:
        err = ImageServiceError(
            message="Something went wrong",
            error_code="TEST_ERROR",
            details={"foo": "bar"},
        )

        assert err.message == "Something went wrong"
        assert err.error_code == "TEST_ERROR"
        assert err.details == {"foo": "bar"}
        assert str(err) == "Something went wrong"

    def test_details_default_to_empty_dict(self) -> None:
        err = ImageServiceError(message="x", error_code="X")

        assert err.details == {}


@pytest.mark.parametrize(
    "error_cls,error_code",
    [
        (ValidationError, "VALIDATION_FAILED"),
        (MIMETypeError, "UNSUPPORTED_MIME_TYPE"),
        (FileSizeError, "FILE_SIZE_EXCEEDED"),
        (NotFoundError, "NOT_FOUND"),
        (ObjectStoreError, "OBJECT_STORE_ERROR"),
        (RepositoryError, "REPOSITORY_ERROR"),
    ],
)
def test_default_error_codes(error_cls, error_code) -> None:
    err = error_cls(message="failed")

    assert err.error_code == error_code
    assert isinstance(err, ImageServiceError)


def test_file_rule_errors_are_validation_errors() -> None:
    assert issubclass(MIMETypeError, ValidationError)
    assert issubclass(FileSizeError, ValidationError)


def test_unauthorized_default_message() -> None:
    err = UnauthorizedError()

    assert err.message == "Authentication required"
    assert err.error_code == "UNAUTHORIZED"


def test_explicit_error_code_overrides_default() -> None:
    err = NotFoundError(message="Image not found", error_code="IMAGE_NOT_FOUND")

    assert err.error_code == "IMAGE_NOT_FOUND"


def test_message_is_required_without_default() -> None:
    with pytest.raises(TypeError, match="NotFoundError"):
        NotFoundError()
