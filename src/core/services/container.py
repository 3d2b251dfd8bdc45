"""Process-scoped wiring of the lifecycle manager.

Store clients are created once per Lambda container on first use and reused
by every invocation that container serves.
"""

from functools import lru_cache

from core.infrastructure.aws.dynamodb_album_directory import DynamoDBAlbumDirectory
from core.infrastructure.aws.dynamodb_image_repository import DynamoDBImageRepository
from core.infrastructure.aws.s3_object_store import S3ObjectStore
from core.services.image_lifecycle import ImageLifecycleManager
from core.utils.constants import DEFAULT_DELETE_MAX_WORKERS, ENV_DELETE_MAX_WORKERS
from core.utils.environment import get_int_env


@lru_cache(maxsize=1)
def get_lifecycle_manager() -> ImageLifecycleManager:
    return ImageLifecycleManager(
        object_store=S3ObjectStore(),
        images=DynamoDBImageRepository(),
        albums=DynamoDBAlbumDirectory(),
        max_workers=get_int_env(ENV_DELETE_MAX_WORKERS, DEFAULT_DELETE_MAX_WORKERS),
    )
