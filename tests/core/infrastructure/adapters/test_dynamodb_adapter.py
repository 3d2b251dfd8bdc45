import pytest
from botocore.exceptions import ClientError

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter
from core.utils.constants import ENV_ALBUMS_TABLE_NAME, ENV_IMAGE_METADATA_TABLE_NAME


class TestDynamoDBAdapter:
    def test_init_missing_table_env(self, monkeypatch):
        monkeypatch.delenv(ENV_IMAGE_METADATA_TABLE_NAME, raising=False)

        with pytest.raises(RuntimeError):
            DynamoDBAdapter(table_env_var=ENV_IMAGE_METADATA_TABLE_NAME)

    def test_put_and_get_item_success(self, dynamodb_table):
        adapter = DynamoDBAdapter(table_env_var=ENV_IMAGE_METADATA_TABLE_NAME)

        adapter.put_item(item={"album_id": "album_a", "image_id": "img_1", "image_name": "a.jpg"})

        response = adapter.get_item(key={"album_id": "album_a", "image_id": "img_1"})

        assert response["Item"]["image_name"] == "a.jpg"

    def test_get_item_with_projection(self, dynamodb_table):
        adapter = DynamoDBAdapter(table_env_var=ENV_IMAGE_METADATA_TABLE_NAME)
        adapter.put_item(item={"album_id": "album_a", "image_id": "img_1", "image_name": "a.jpg"})

        response = adapter.get_item(key={"album_id": "album_a", "image_id": "img_1"}, projection="image_id")

        assert response["Item"] == {"image_id": "img_1"}

    def test_put_item_with_condition_expression(self, dynamodb_table):
        adapter = DynamoDBAdapter(table_env_var=ENV_IMAGE_METADATA_TABLE_NAME)
        item = {"album_id": "album_a", "image_id": "img_cond"}

        adapter.put_item(item=item, condition_expression="attribute_not_exists(image_id)")

        with pytest.raises(ClientError):
            adapter.put_item(item=item, condition_expression="attribute_not_exists(image_id)")

    def test_delete_item_returns_old_values(self, dynamodb_table):
        adapter = DynamoDBAdapter(table_env_var=ENV_IMAGE_METADATA_TABLE_NAME)
        key = {"album_id": "album_a", "image_id": "img_del"}
        adapter.put_item(item=key)

        first = adapter.delete_item(key=key, return_values="ALL_OLD")
        second = adapter.delete_item(key=key, return_values="ALL_OLD")

        assert first["Attributes"]["image_id"] == "img_del"
        assert "Attributes" not in second

    def test_reads_table_named_by_env_var(self, albums_table):
        adapter = DynamoDBAdapter(table_env_var=ENV_ALBUMS_TABLE_NAME)
        adapter.put_item(item={"album_id": "album_a"})

        assert adapter.get_item(key={"album_id": "album_a"})["Item"] == {"album_id": "album_a"}
        assert adapter.table_name == "test-albums"
