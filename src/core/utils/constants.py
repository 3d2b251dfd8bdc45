"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_UNSUPPORTED_MIME_TYPE = "UNSUPPORTED_MIME_TYPE"
ERROR_CODE_FILE_SIZE_EXCEEDED = "FILE_SIZE_EXCEEDED"
ERROR_CODE_FILE_MISSING = "FILE_MISSING"
ERROR_CODE_FILE_EMPTY = "FILE_EMPTY"
ERROR_CODE_TOO_MANY_FILES = "TOO_MANY_FILES"
ERROR_CODE_UNEXPECTED_FILE_FIELD = "UNEXPECTED_FILE_FIELD"
ERROR_CODE_INVALID_MULTIPART = "INVALID_MULTIPART"
ERROR_CODE_INVALID_TAGS = "INVALID_TAGS"
ERROR_CODE_INVALID_PERSON = "INVALID_PERSON"
ERROR_CODE_INVALID_COMMENT = "INVALID_COMMENT"

# Auth Errors
ERROR_CODE_UNAUTHORIZED = "UNAUTHORIZED"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"
ERROR_CODE_IMAGE_FILE_NOT_FOUND = "IMAGE_FILE_NOT_FOUND"

# Object Store Errors
ERROR_CODE_OBJECT_STORE = "OBJECT_STORE_ERROR"
ERROR_CODE_IMAGE_UPLOAD_FAILED = "IMAGE_UPLOAD_FAILED"
ERROR_CODE_IMAGE_DOWNLOAD_FAILED = "IMAGE_DOWNLOAD_FAILED"
ERROR_CODE_IMAGE_DELETE_FAILED = "IMAGE_DELETE_FAILED"

# Metadata / Album Repository Errors
ERROR_CODE_REPOSITORY = "REPOSITORY_ERROR"
ERROR_CODE_METADATA_CREATE_FAILED = "METADATA_CREATE_FAILED"
ERROR_CODE_METADATA_FETCH_FAILED = "METADATA_FETCH_FAILED"
ERROR_CODE_METADATA_UPDATE_FAILED = "METADATA_UPDATE_FAILED"
ERROR_CODE_METADATA_DELETE_FAILED = "METADATA_DELETE_FAILED"
ERROR_CODE_METADATA_LIST_FAILED = "METADATA_LIST_FAILED"
ERROR_CODE_METADATA_INVALID_FORMAT = "METADATA_INVALID_FORMAT"
ERROR_CODE_ALBUM_LOOKUP_FAILED = "ALBUM_LOOKUP_FAILED"
ERROR_CODE_METADATA_INVALID_REQUEST = "METADATA_INVALID_REQUEST"
ERROR_CODE_METADATA_UPDATE_CONFLICT = "METADATA_UPDATE_CONFLICT"

# Internal / Unexpected
ERROR_CODE_INTERNAL_ERROR = "INTERNAL_ERROR"


# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB in bytes
UPLOAD_FILE_FIELD = "image"
MAX_UPLOAD_FILES = 1


MIME_TYPE_EXTENSION_MAP: Final[dict[str, str]] = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}

ALLOWED_MIME_TYPES: Final[frozenset[str]] = frozenset(MIME_TYPE_EXTENSION_MAP.keys())


# ============================================================================
# Image Metadata Constraints
# ============================================================================

MAX_TAGS = 20
TAG_MAX_LENGTH = 50
PERSON_MAX_LENGTH = 100
COMMENT_MAX_LENGTH = 500

IMAGE_ID_PREFIX = "img_"
COMMENT_ID_PREFIX = "cmt_"

# Conditional favorite toggles retried when the flag changed between read and write
FAVORITE_TOGGLE_ATTEMPTS = 3
OBJECT_KEY_PREFIX = "images"

# Fields that may never be changed by an update patch
IMMUTABLE_IMAGE_FIELDS: Final[frozenset[str]] = frozenset(
    {"image_id", "album_id", "object_key", "created_at"}
)

# ============================================================================
# Object Store Fan-out / Timeouts
# ============================================================================

DEFAULT_DELETE_MAX_WORKERS = 8
DEFAULT_OBJECT_STORE_CONNECT_TIMEOUT = 5
DEFAULT_OBJECT_STORE_READ_TIMEOUT = 10
DEFAULT_OBJECT_STORE_MAX_ATTEMPTS = 2

# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,PUT,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization"
EXPOSE_HEADERS = "Content-Type,Content-Length"
DEFAULT_CONTENT_TYPE = "application/json"

# ============================================================================
# Observability
# ============================================================================

SERVICE_NAME = "photo-album-images"
METRICS_NAMESPACE = "PhotoAlbum"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_IMAGE_S3_BUCKET_NAME = "IMAGE_S3_BUCKET_NAME"
ENV_IMAGE_METADATA_TABLE_NAME = "IMAGE_METADATA_TABLE_NAME"
ENV_ALBUMS_TABLE_NAME = "ALBUMS_TABLE_NAME"
ENV_ENVIRONMENT = "ENVIRONMENT"
ENV_DELETE_MAX_WORKERS = "DELETE_MAX_WORKERS"
ENV_OBJECT_STORE_CONNECT_TIMEOUT = "OBJECT_STORE_CONNECT_TIMEOUT"
ENV_OBJECT_STORE_READ_TIMEOUT = "OBJECT_STORE_READ_TIMEOUT"
ENV_OBJECT_STORE_MAX_ATTEMPTS = "OBJECT_STORE_MAX_ATTEMPTS"

PRODUCTION_ENVIRONMENTS: Final[frozenset[str]] = frozenset({"prod", "production"})

# ============================================================================
# Helper Functions
# ============================================================================


def get_max_file_size_mb() -> int:
    """Get maximum file size in megabytes."""
    return MAX_FILE_SIZE // (1024 * 1024)


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0

    return f"{size:.1f} TB"
