"""Request and image validation utilities.

Everything here is pure: no I/O, no logging of system failures. Violations
are raised as ``ValidationError`` subclasses and reported to the client.
"""

import json
from collections.abc import Sequence
from typing import Any, TypeVar

from pydantic import BaseModel

from core.models.errors import FileSizeError, MIMETypeError, ValidationError
from core.models.image import UploadedFile
from core.utils.constants import (
    ALLOWED_MIME_TYPES,
    COMMENT_MAX_LENGTH,
    ERROR_CODE_FILE_EMPTY,
    ERROR_CODE_FILE_MISSING,
    ERROR_CODE_INVALID_COMMENT,
    ERROR_CODE_INVALID_PERSON,
    ERROR_CODE_INVALID_TAGS,
    ERROR_CODE_TOO_MANY_FILES,
    ERROR_CODE_UNEXPECTED_FILE_FIELD,
    MAX_FILE_SIZE,
    MAX_TAGS,
    MAX_UPLOAD_FILES,
    PERSON_MAX_LENGTH,
    TAG_MAX_LENGTH,
    UPLOAD_FILE_FIELD,
    format_file_size,
    get_max_file_size_mb,
)

ModelT = TypeVar("ModelT", bound=BaseModel)


def sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Sanitize Pydantic validation errors for API responses.

    Removes sensitive/internal fields like:
    - url
    - ctx
    - input
    - internal exception details
    """
    sanitized: list[dict[str, str]] = []

    for err in errors:
        field = ".".join(str(x) for x in err.get("loc", [])) or "body"
        raw_msg = err.get("msg", "Invalid value")

        # Remove noisy prefixes
        msg = raw_msg.replace("Value error,", "").strip()

        # Friendly rewrites for common cases
        msg_lower = msg.lower()
        if "field required" in msg_lower:
            msg = "This field is required"
        elif "valid string" in msg_lower:
            msg = "Invalid value type"

        sanitized.append(
            {
                "field": field,
                "message": msg,
            }
        )

    return sanitized


def validate_request(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    """Validate request data against a Pydantic model.

    Raises:
        pydantic.ValidationError: If the data does not match the model
    """
    return model.model_validate(data)


# ============================================================================
# Upload file rules
# ============================================================================


def select_upload_file(files: Sequence[UploadedFile]) -> UploadedFile:
    """Return the single uploaded file sent in the ``image`` field."""
    if not files:
        raise ValidationError(
            message="No file provided",
            error_code=ERROR_CODE_FILE_MISSING,
        )

    if len(files) > MAX_UPLOAD_FILES:
        raise ValidationError(
            message="Too many files. Only one file is allowed.",
            error_code=ERROR_CODE_TOO_MANY_FILES,
            details={"file_count": len(files)},
        )

    file = files[0]
    if file.field_name != UPLOAD_FILE_FIELD:
        raise ValidationError(
            message=f'Unexpected field name. Use "{UPLOAD_FILE_FIELD}" as the field name.',
            error_code=ERROR_CODE_UNEXPECTED_FILE_FIELD,
            details={"field": file.field_name},
        )

    return file


def validate_image_file(file: UploadedFile | None) -> UploadedFile:
    """Check content type and size of an uploaded image."""
    if file is None:
        raise ValidationError(
            message="No file provided",
            error_code=ERROR_CODE_FILE_MISSING,
        )

    if file.content_type not in ALLOWED_MIME_TYPES:
        raise MIMETypeError(
            message="Invalid file type. Only JPEG, PNG, GIF, and WebP images are allowed.",
            details={"content_type": file.content_type},
        )

    if file.size > MAX_FILE_SIZE:
        raise FileSizeError(
            message=f"File size too large. Maximum size is {get_max_file_size_mb()}MB.",
            details={"size": format_file_size(file.size)},
        )

    if file.size == 0:
        raise ValidationError(
            message="Uploaded file is empty",
            error_code=ERROR_CODE_FILE_EMPTY,
        )

    return file


# ============================================================================
# Metadata rules
# ============================================================================


def parse_tags(value: Any) -> list[str]:
    """Parse and validate tags.

    Accepts:
    - list of strings
    - JSON text encoding a list of strings (multipart form fields)

    Returns:
    - list[str] in the order given; an empty or blank form value means no tags
    """
    if value is None:
        return []

    if isinstance(value, str) and not value.strip():
        return []

    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            raise ValidationError(
                message="Invalid tags format",
                error_code=ERROR_CODE_INVALID_TAGS,
            ) from exc

    if not isinstance(value, list):
        raise ValidationError(
            message="Tags must be an array",
            error_code=ERROR_CODE_INVALID_TAGS,
        )

    if len(value) > MAX_TAGS:
        raise ValidationError(
            message=f"Maximum {MAX_TAGS} tags allowed",
            error_code=ERROR_CODE_INVALID_TAGS,
            details={"count": len(value)},
        )

    for tag in value:
        if not isinstance(tag, str) or not tag.strip():
            raise ValidationError(
                message="All tags must be non-empty strings",
                error_code=ERROR_CODE_INVALID_TAGS,
            )
        if len(tag) > TAG_MAX_LENGTH:
            raise ValidationError(
                message=f"Each tag must be at most {TAG_MAX_LENGTH} characters",
                error_code=ERROR_CODE_INVALID_TAGS,
                details={"tag": tag[:TAG_MAX_LENGTH]},
            )

    return list(value)


def validate_person(value: Any) -> str | None:
    """Validate the optional free-text person field."""
    if value is None:
        return None

    if not isinstance(value, str):
        raise ValidationError(
            message="Person name must be a string",
            error_code=ERROR_CODE_INVALID_PERSON,
        )

    if len(value) > PERSON_MAX_LENGTH:
        raise ValidationError(
            message=f"Person name must be at most {PERSON_MAX_LENGTH} characters",
            error_code=ERROR_CODE_INVALID_PERSON,
        )

    return value


def validate_image_metadata(tags: Any = None, person: Any = None) -> tuple[list[str], str | None]:
    """Validate tags and person together, as the upload and update paths do."""
    return parse_tags(tags), validate_person(person)


def validate_comment_text(value: Any) -> str:
    """Validate comment text."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            message="Comment text is required",
            error_code=ERROR_CODE_INVALID_COMMENT,
        )

    text = value.strip()
    if len(text) > COMMENT_MAX_LENGTH:
        raise ValidationError(
            message=f"Comment must be at most {COMMENT_MAX_LENGTH} characters",
            error_code=ERROR_CODE_INVALID_COMMENT,
        )

    return text
