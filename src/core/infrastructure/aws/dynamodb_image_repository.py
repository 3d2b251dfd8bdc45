"""DynamoDB-backed implementation of ImageRepository.

Table layout: partition key ``album_id``, sort key ``image_id``. Every
single-item operation therefore needs both ids, which is what keeps an image
from being reachable through a different album.
"""

from collections.abc import Iterable
from typing import Any

from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError
from pydantic import ValidationError as PydanticValidationError

from core.infrastructure.adapters.dynamodb_adapter import (
    DynamoDBAdapter,
    DynamoDBAdapterProtocol,
)
from core.models.errors import RepositoryError
from core.models.image import ImageRecord
from core.repositories.image_repository import ImageKey, ImageRepository, Patch
from core.utils.constants import (
    ENV_IMAGE_METADATA_TABLE_NAME,
    ERROR_CODE_METADATA_CREATE_FAILED,
    ERROR_CODE_METADATA_DELETE_FAILED,
    ERROR_CODE_METADATA_FETCH_FAILED,
    ERROR_CODE_METADATA_INVALID_FORMAT,
    ERROR_CODE_METADATA_INVALID_REQUEST,
    ERROR_CODE_METADATA_LIST_FAILED,
    ERROR_CODE_METADATA_UPDATE_FAILED,
    IMMUTABLE_IMAGE_FIELDS,
)

Item = dict[str, Any]

logger = Logger(UTC=True)


def _error_code(exc: ClientError) -> str | None:
    return exc.response.get("Error", {}).get("Code")


def _invalid_request(message: str) -> RepositoryError:
    return RepositoryError(message=message, error_code=ERROR_CODE_METADATA_INVALID_REQUEST)


class DynamoDBImageRepository(ImageRepository):
    """DynamoDB-backed image record storage with error handling.

    All boto3 errors are caught and translated into
    RepositoryError with stable error codes.
    """

    def __init__(self, adapter: DynamoDBAdapterProtocol | None = None) -> None:
        """Initialize with DynamoDB adapter."""
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter(
            table_env_var=ENV_IMAGE_METADATA_TABLE_NAME
        )

    def insert(self, *, record: ImageRecord) -> None:
        logger.debug(
            "Creating image record",
            extra={"image_id": record.image_id, "album_id": record.album_id},
        )

        try:
            self._db.put_item(
                item=record.to_item(),
                condition_expression="attribute_not_exists(image_id)",
            )
            logger.info(
                "Image record created",
                extra={"image_id": record.image_id, "album_id": record.album_id},
            )

        except ClientError as exc:
            logger.error(
                "DynamoDB put_item failed",
                extra={"image_id": record.image_id, "code": _error_code(exc)},
            )
            raise RepositoryError(
                message="Unable to save image metadata at this time",
                error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                details={"image_id": record.image_id, "error": str(exc)},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error creating image record")
            raise RepositoryError(
                message="Unable to save image metadata at this time",
                error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                details={"image_id": record.image_id, "error": str(exc)},
            ) from exc

    def find_by_album(self, *, album_id: str) -> list[ImageRecord]:
        logger.debug("Listing album images", extra={"album_id": album_id})

        try:
            items = self._query_all(KeyConditionExpression=Key("album_id").eq(album_id))

        except ClientError as exc:
            logger.error("DynamoDB query failed", extra={"album_id": album_id})
            raise RepositoryError(
                message="Unable to list images for this album",
                error_code=ERROR_CODE_METADATA_LIST_FAILED,
                details={"album_id": album_id, "error": str(exc)},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error listing images")
            raise RepositoryError(
                message="Unable to list images for this album",
                error_code=ERROR_CODE_METADATA_LIST_FAILED,
                details={"album_id": album_id, "error": str(exc)},
            ) from exc

        records = [self._to_record(item) for item in items]
        records.sort(key=lambda record: record.created_at, reverse=True)

        logger.info(
            "Album images listed",
            extra={"album_id": album_id, "count": len(records)},
        )
        return records

    def find_one(self, *, image_id: str, album_id: str) -> ImageRecord | None:
        logger.debug(
            "Fetching image record",
            extra={"image_id": image_id, "album_id": album_id},
        )

        try:
            response = self._db.get_item(key={"album_id": album_id, "image_id": image_id})

        except ClientError as exc:
            logger.error("DynamoDB get_item failed", extra={"image_id": image_id})
            raise RepositoryError(
                message="Unable to retrieve image metadata",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"image_id": image_id, "error": str(exc)},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error fetching image record")
            raise RepositoryError(
                message="Unable to retrieve image metadata",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"image_id": image_id, "error": str(exc)},
            ) from exc

        item = response.get("Item")
        if item is None:
            return None

        return self._to_record(item)

    def find_all(self) -> list[ImageRecord]:
        logger.debug("Scanning all image records")

        try:
            items = self._scan_all()

        except ClientError as exc:
            logger.error("DynamoDB scan failed")
            raise RepositoryError(
                message="Unable to scan image metadata",
                error_code=ERROR_CODE_METADATA_LIST_FAILED,
                details={"error": str(exc)},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error scanning image records")
            raise RepositoryError(
                message="Unable to scan image metadata",
                error_code=ERROR_CODE_METADATA_LIST_FAILED,
                details={"error": str(exc)},
            ) from exc

        return [self._to_record(item) for item in items]

    def update_one(
        self,
        *,
        image_id: str,
        album_id: str,
        set_fields: Patch | None = None,
        append_fields: Patch | None = None,
        expected_fields: Patch | None = None,
    ) -> ImageRecord | None:
        set_fields = set_fields or {}
        append_fields = append_fields or {}
        expected_fields = expected_fields or {}

        touched = set(set_fields) | set(append_fields)
        if not touched:
            raise _invalid_request("Update patch must not be empty")

        immutable = touched & IMMUTABLE_IMAGE_FIELDS
        if immutable:
            raise _invalid_request(f"Cannot modify immutable fields: {', '.join(sorted(immutable))}")

        names: dict[str, str] = {}
        values: dict[str, Any] = {}
        clauses: list[str] = []

        for index, (field, value) in enumerate(set_fields.items()):
            names[f"#s{index}"] = field
            values[f":s{index}"] = value
            clauses.append(f"#s{index} = :s{index}")

        if append_fields:
            values[":empty"] = []
        for index, (field, items) in enumerate(append_fields.items()):
            names[f"#a{index}"] = field
            values[f":a{index}"] = list(items)
            clauses.append(f"#a{index} = list_append(if_not_exists(#a{index}, :empty), :a{index})")

        conditions = ["attribute_exists(image_id)"]
        for index, (field, value) in enumerate(expected_fields.items()):
            names[f"#e{index}"] = field
            values[f":e{index}"] = value
            conditions.append(f"#e{index} = :e{index}")

        logger.debug(
            "Updating image record",
            extra={"image_id": image_id, "album_id": album_id, "fields": sorted(touched)},
        )

        try:
            response = self._db.update_item(
                key={"album_id": album_id, "image_id": image_id},
                UpdateExpression="SET " + ", ".join(clauses),
                ConditionExpression=" AND ".join(conditions),
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW",
            )

        except ClientError as exc:
            if _error_code(exc) == "ConditionalCheckFailedException":
                logger.info(
                    "Image record not found or changed before update",
                    extra={"image_id": image_id, "album_id": album_id},
                )
                return None

            logger.error("DynamoDB update_item failed", extra={"image_id": image_id})
            raise RepositoryError(
                message="Unable to update image metadata",
                error_code=ERROR_CODE_METADATA_UPDATE_FAILED,
                details={"image_id": image_id, "error": str(exc)},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error updating image record")
            raise RepositoryError(
                message="Unable to update image metadata",
                error_code=ERROR_CODE_METADATA_UPDATE_FAILED,
                details={"image_id": image_id, "error": str(exc)},
            ) from exc

        logger.info("Image record updated", extra={"image_id": image_id})
        return self._to_record(response.get("Attributes", {}))

    def delete_one(self, *, image_id: str, album_id: str) -> int:
        logger.debug(
            "Removing image record",
            extra={"image_id": image_id, "album_id": album_id},
        )

        try:
            deleted = self._delete_key(album_id=album_id, image_id=image_id)

        except ClientError as exc:
            logger.error("DynamoDB delete_item failed", extra={"image_id": image_id})
            raise RepositoryError(
                message="Unable to delete image metadata",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"image_id": image_id, "error": str(exc)},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error removing image record")
            raise RepositoryError(
                message="Unable to delete image metadata",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"image_id": image_id, "error": str(exc)},
            ) from exc

        logger.info("Image record removed", extra={"image_id": image_id, "count": deleted})
        return deleted

    def delete_many(
        self,
        *,
        album_id: str | None = None,
        keys: Iterable[ImageKey] | None = None,
    ) -> int:
        """Delete records one key at a time so ``ALL_OLD`` tells which ones existed.

        A failure part-way through reports the count already removed as
        ``deleted_before_failure`` in the error details.
        """
        if (album_id is None) == (keys is None):
            raise _invalid_request("delete_many requires exactly one of album_id or keys")

        targets: list[ImageKey] = []
        deleted = 0
        try:
            if album_id is not None:
                items = self._query_all(
                    KeyConditionExpression=Key("album_id").eq(album_id),
                    ProjectionExpression="album_id, image_id",
                )
                targets = [(item["album_id"], item["image_id"]) for item in items]
            else:
                targets = list(keys or [])

            for target_album_id, target_image_id in targets:
                deleted += self._delete_key(album_id=target_album_id, image_id=target_image_id)

        except ClientError as exc:
            logger.error("DynamoDB bulk delete failed", extra={"album_id": album_id, "deleted": deleted})
            raise RepositoryError(
                message="Unable to delete image metadata",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"album_id": album_id, "error": str(exc), "deleted_before_failure": deleted},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error during bulk delete")
            raise RepositoryError(
                message="Unable to delete image metadata",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"album_id": album_id, "error": str(exc), "deleted_before_failure": deleted},
            ) from exc

        logger.info(
            "Image records removed",
            extra={"album_id": album_id, "requested": len(targets), "count": deleted},
        )
        return deleted

    def _delete_key(self, *, album_id: str, image_id: str) -> int:
        response = self._db.delete_item(
            key={"album_id": album_id, "image_id": image_id},
            return_values="ALL_OLD",
        )
        return 1 if response.get("Attributes") else 0

    def _query_all(self, **query_kwargs: Any) -> list[Item]:
        items: list[Item] = []
        last_evaluated_key: dict[str, Any] | None = None

        while True:
            if last_evaluated_key:
                query_kwargs["ExclusiveStartKey"] = last_evaluated_key

            response = self._db.query(**query_kwargs)
            items.extend(response.get("Items", []))

            last_evaluated_key = response.get("LastEvaluatedKey")
            if not last_evaluated_key:
                return items

    def _scan_all(self) -> list[Item]:
        items: list[Item] = []
        scan_kwargs: dict[str, Any] = {}

        while True:
            response = self._db.scan(**scan_kwargs)
            items.extend(response.get("Items", []))

            last_evaluated_key = response.get("LastEvaluatedKey")
            if not last_evaluated_key:
                return items
            scan_kwargs["ExclusiveStartKey"] = last_evaluated_key

    @staticmethod
    def _to_record(item: Item) -> ImageRecord:
        try:
            return ImageRecord.from_item(item)
        except PydanticValidationError as exc:
            logger.error(
                "Invalid image record format",
                extra={"image_id": item.get("image_id"), "errors": exc.errors()},
            )
            raise RepositoryError(
                message="Invalid image metadata format",
                error_code=ERROR_CODE_METADATA_INVALID_FORMAT,
                details={"image_id": item.get("image_id")},
            ) from exc
