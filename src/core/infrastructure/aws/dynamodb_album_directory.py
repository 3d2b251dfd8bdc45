"""DynamoDB-backed album existence checks."""

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from core.infrastructure.adapters.dynamodb_adapter import (
    DynamoDBAdapter,
    DynamoDBAdapterProtocol,
)
from core.models.errors import RepositoryError
from core.repositories.album_directory import AlbumDirectory
from core.utils.constants import ENV_ALBUMS_TABLE_NAME, ERROR_CODE_ALBUM_LOOKUP_FAILED

logger = Logger(UTC=True)


class DynamoDBAlbumDirectory(AlbumDirectory):
    """Reads the albums table owned by the album service (key: ``album_id``)."""

    def __init__(self, adapter: DynamoDBAdapterProtocol | None = None) -> None:
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter(
            table_env_var=ENV_ALBUMS_TABLE_NAME
        )

    def exists(self, album_id: str) -> bool:
        try:
            response = self._db.get_item(key={"album_id": album_id}, projection="album_id")

        except ClientError as exc:
            logger.error("Album lookup failed", extra={"album_id": album_id})
            raise RepositoryError(
                message="Unable to verify album",
                error_code=ERROR_CODE_ALBUM_LOOKUP_FAILED,
                details={"album_id": album_id, "error": str(exc)},
            ) from exc

        except Exception as exc:
            logger.exception("Unexpected error looking up album")
            raise RepositoryError(
                message="Unable to verify album",
                error_code=ERROR_CODE_ALBUM_LOOKUP_FAILED,
                details={"album_id": album_id, "error": str(exc)},
            ) from exc

        return response.get("Item") is not None
