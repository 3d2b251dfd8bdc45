import pytest

from core.infrastructure.aws.dynamodb_album_directory import DynamoDBAlbumDirectory
from core.infrastructure.aws.dynamodb_image_repository import DynamoDBImageRepository
from core.infrastructure.aws.s3_object_store import S3ObjectStore
from core.services.container import get_lifecycle_manager


class TestLifecycleManagerFactory:
    def test_wires_aws_collaborators(self, aws_mock):
        manager = get_lifecycle_manager()

        assert isinstance(manager.object_store, S3ObjectStore)
        assert isinstance(manager.images, DynamoDBImageRepository)
        assert isinstance(manager.albums, DynamoDBAlbumDirectory)

    def test_is_process_scoped(self, aws_mock):
        assert get_lifecycle_manager() is get_lifecycle_manager()

    def test_max_workers_from_env(self, aws_mock, monkeypatch):
        monkeypatch.setenv("DELETE_MAX_WORKERS", "3")

        assert get_lifecycle_manager().max_workers == 3

    def test_missing_table_name_fails_fast(self, aws_mock, monkeypatch):
        monkeypatch.delenv("IMAGE_METADATA_TABLE_NAME")

        with pytest.raises(RuntimeError, match="IMAGE_METADATA_TABLE_NAME"):
            get_lifecycle_manager()
