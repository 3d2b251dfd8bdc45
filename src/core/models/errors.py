"""
Domain exceptions for the photo album image service.

Every error carries a client-facing ``message``, a machine-readable
``error_code`` and optional ``details``. Subclasses only pin the default
code; the top-level handler decorator maps each class to an HTTP status.
"""

from typing import Any, ClassVar

from core.utils.constants import (
    ERROR_CODE_FILE_SIZE_EXCEEDED,
    ERROR_CODE_OBJECT_STORE,
    ERROR_CODE_REPOSITORY,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_UNAUTHORIZED,
    ERROR_CODE_UNSUPPORTED_MIME_TYPE,
    ERROR_CODE_VALIDATION_FAILED,
)


class ImageServiceError(Exception):
    """Base exception for all image service errors."""

    default_error_code: ClassVar[str | None] = None
    default_message: ClassVar[str | None] = None

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        resolved_message = message or self.default_message
        resolved_code = error_code or self.default_error_code
        if resolved_message is None or resolved_code is None:
            raise TypeError(f"{type(self).__name__} requires a message and an error code")

        self.message = resolved_message
        self.error_code = resolved_code
        self.details = details or {}

        super().__init__(self.message)


class ValidationError(ImageServiceError):
    """Client input failed validation. Never retried."""

    default_error_code = ERROR_CODE_VALIDATION_FAILED


class MIMETypeError(ValidationError):
    default_error_code = ERROR_CODE_UNSUPPORTED_MIME_TYPE


class FileSizeError(ValidationError):
    default_error_code = ERROR_CODE_FILE_SIZE_EXCEEDED


class UnauthorizedError(ImageServiceError):
    """The request carries no authenticated principal."""

    default_error_code = ERROR_CODE_UNAUTHORIZED
    default_message = "Authentication required"


class NotFoundError(ImageServiceError):
    default_error_code = ERROR_CODE_RESOURCE_NOT_FOUND


class ObjectStoreError(ImageServiceError):
    """A remote object store operation failed or timed out."""

    default_error_code = ERROR_CODE_OBJECT_STORE


class RepositoryError(ImageServiceError):
    """The metadata or album store is unavailable."""

    default_error_code = ERROR_CODE_REPOSITORY
