"""S3-backed implementation of ObjectStore."""

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from core.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from core.models.errors import NotFoundError, ObjectStoreError
from core.repositories.object_store import ObjectStore
from core.utils.constants import (
    ERROR_CODE_IMAGE_DELETE_FAILED,
    ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
    ERROR_CODE_IMAGE_FILE_NOT_FOUND,
    ERROR_CODE_IMAGE_UPLOAD_FAILED,
    MIME_TYPE_EXTENSION_MAP,
    OBJECT_KEY_PREFIX,
)

logger = Logger(UTC=True)


class S3ObjectStore(ObjectStore):
    """Image storage implementation backed by Amazon S3."""

    def __init__(self, adapter: S3AdapterProtocol | None = None) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3: S3AdapterProtocol = adapter or S3Adapter()

    def put(
        self,
        *,
        album_id: str,
        image_id: str,
        file_data: bytes,
        content_type: str,
    ) -> str:
        """Upload image bytes to S3 and return the object key."""
        key = self.build_key(album_id=album_id, image_id=image_id, content_type=content_type)

        logger.debug(
            "Uploading image",
            extra={
                "image_id": image_id,
                "album_id": album_id,
                "key": key,
                "size": len(file_data),
            },
        )

        try:
            self._s3.put_object(
                key=key,
                body=file_data,
                content_type=content_type,
                metadata={
                    "image_id": image_id,
                    "album_id": album_id,
                },
            )
            logger.info("Image uploaded successfully", extra={"key": key})
            return key

        except ClientError as exc:
            logger.error("S3 upload failed", extra={"key": key})
            raise ObjectStoreError(
                message="Unable to upload image at this time",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                details={"image_id": image_id, "error": str(exc)},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error uploading image")
            raise ObjectStoreError(
                message="Unable to upload image at this time",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                details={"image_id": image_id, "error": str(exc)},
            ) from exc

    def fetch(self, *, key: str) -> tuple[bytes, str, int]:
        """Download image bytes directly from S3."""
        logger.debug("Downloading image", extra={"key": key})

        try:
            response = self._s3.get_object(key=key)
            body = response["Body"].read()
            content_type = response.get("ContentType", "application/octet-stream")
            content_length = response.get("ContentLength", len(body))

            logger.info(
                "Image downloaded successfully",
                extra={"key": key, "size": content_length},
            )

            return body, content_type, content_length

        except ClientError as exc:
            logger.error("S3 download failed", extra={"key": key})

            if exc.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                raise NotFoundError(
                    message="Image file not found",
                    error_code=ERROR_CODE_IMAGE_FILE_NOT_FOUND,
                    details={"key": key},
                ) from exc

            raise ObjectStoreError(
                message="Unable to download image at this time",
                error_code=ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
                details={"key": key, "error": str(exc)},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error downloading image")
            raise ObjectStoreError(
                message="Unable to download image at this time",
                error_code=ERROR_CODE_IMAGE_DOWNLOAD_FAILED,
                details={"key": key, "error": str(exc)},
            ) from exc

    def delete(self, *, key: str) -> None:
        """Delete an image object from S3."""
        logger.debug("Deleting image", extra={"key": key})

        try:
            self._s3.delete_object(key=key)
            logger.info("Image deleted successfully", extra={"key": key})

        except ClientError as exc:
            logger.error("S3 deletion failed", extra={"key": key})
            raise ObjectStoreError(
                message=f"Unable to delete object {key}: {exc}",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"key": key},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error deleting image")
            raise ObjectStoreError(
                message=f"Unable to delete object {key}: {exc}",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"key": key},
            ) from exc

    @staticmethod
    def build_key(*, album_id: str, image_id: str, content_type: str) -> str:
        """Object key for an image; unique because image ids are."""
        extension = MIME_TYPE_EXTENSION_MAP.get(content_type, "bin")
        return f"{OBJECT_KEY_PREFIX}/{album_id}/{image_id}.{extension}"
