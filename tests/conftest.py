"""
Pytest configuration and fixtures for the photo album image service tests.
Provides AWS mocking, DynamoDB and S3 fixtures, in-memory collaborators for
failure injection, and helpers for building API Gateway events.
"""

import base64
import json
import os
import threading
import uuid
from collections.abc import Callable, Iterable
from types import SimpleNamespace
from typing import Any

# Configuration must be in place before any handler module is imported
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SECURITY_TOKEN", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ.setdefault("IMAGE_S3_BUCKET_NAME", "test-image-bucket")
os.environ.setdefault("IMAGE_METADATA_TABLE_NAME", "test-image-metadata")
os.environ.setdefault("ALBUMS_TABLE_NAME", "test-albums")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "photo-album-images")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "PhotoAlbum")

import boto3  # noqa: E402
import pytest  # noqa: E402
from moto import mock_aws  # noqa: E402

from core.models.errors import NotFoundError, ObjectStoreError, RepositoryError  # noqa: E402
from core.models.image import ImageRecord, UploadedFile  # noqa: E402
from core.repositories.album_directory import AlbumDirectory  # noqa: E402
from core.repositories.image_repository import ImageKey, ImageRepository, Patch  # noqa: E402
from core.repositories.object_store import ObjectStore  # noqa: E402
from core.services.container import get_lifecycle_manager  # noqa: E402
from core.services.image_lifecycle import ImageLifecycleManager  # noqa: E402
from core.utils.constants import IMMUTABLE_IMAGE_FIELDS  # noqa: E402

# ============================================================================
# Environment
# ============================================================================


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch):
    """Each test starts with fresh process-scoped singletons and no endpoint override."""
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    get_lifecycle_manager.cache_clear()
    yield
    get_lifecycle_manager.cache_clear()


# ============================================================================
# AWS (moto)
# ============================================================================


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def dynamodb_resource(aws_mock):
    return boto3.resource("dynamodb", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def dynamodb_table(dynamodb_resource):
    """Image metadata table: partition key album_id, sort key image_id."""
    table = dynamodb_resource.create_table(
        TableName=os.getenv("IMAGE_METADATA_TABLE_NAME"),
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[
            {"AttributeName": "album_id", "KeyType": "HASH"},
            {"AttributeName": "image_id", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "album_id", "AttributeType": "S"},
            {"AttributeName": "image_id", "AttributeType": "S"},
        ],
    )
    table.wait_until_exists()
    return table


@pytest.fixture(scope="function")
def albums_table(dynamodb_resource):
    """Albums table owned by the album service (key: album_id)."""
    table = dynamodb_resource.create_table(
        TableName=os.getenv("ALBUMS_TABLE_NAME"),
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "album_id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "album_id", "AttributeType": "S"}],
    )
    table.wait_until_exists()
    return table


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    s3_client.create_bucket(Bucket=os.getenv("IMAGE_S3_BUCKET_NAME"))
    return s3_client


@pytest.fixture
def s3_get_object(s3_client) -> Callable[[str], bytes]:
    def _get(key: str) -> bytes:
        response = s3_client.get_object(Bucket=os.getenv("IMAGE_S3_BUCKET_NAME"), Key=key)
        return response["Body"].read()

    return _get


@pytest.fixture
def s3_object_keys(s3_client) -> Callable[[], list[str]]:
    def _keys() -> list[str]:
        response = s3_client.list_objects_v2(Bucket=os.getenv("IMAGE_S3_BUCKET_NAME"))
        return sorted(obj["Key"] for obj in response.get("Contents", []))

    return _keys


@pytest.fixture
def aws_stores(dynamodb_table, albums_table, s3_bucket):
    """All three AWS stores created inside one moto context."""
    return SimpleNamespace(images=dynamodb_table, albums=albums_table, s3=s3_bucket)


# ============================================================================
# Sample data
# ============================================================================


@pytest.fixture
def sample_png_bytes() -> bytes:
    """Sample binary image data (1x1 PNG)."""
    png_base64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
    return base64.b64decode(png_base64)


@pytest.fixture
def sample_jpeg_bytes() -> bytes:
    """Sample binary JPEG data (minimal JPEG markers)."""
    return b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00\xff\xd9"


@pytest.fixture
def make_upload() -> Callable[..., UploadedFile]:
    def _make(
        data: bytes = b"\xff\xd8\xff\xe0fake-jpeg\xff\xd9",
        *,
        filename: str = "cat.jpg",
        content_type: str = "image/jpeg",
        field_name: str = "image",
    ) -> UploadedFile:
        return UploadedFile(
            field_name=field_name,
            filename=filename,
            content_type=content_type,
            data=data,
        )

    return _make


@pytest.fixture
def make_record() -> Callable[..., ImageRecord]:
    def _make(album_id: str = "album_a", image_id: str | None = None, **overrides: Any) -> ImageRecord:
        image_id = image_id or f"img_{uuid.uuid4().hex}"
        data: dict[str, Any] = {
            "image_id": image_id,
            "album_id": album_id,
            "object_key": f"images/{album_id}/{image_id}.jpg",
            "image_name": "photo.jpg",
            "mime_type": "image/jpeg",
            "file_size": 100,
            "created_at": "2024-01-01T10:00:00+00:00",
        }
        data.update(overrides)
        return ImageRecord(**data)

    return _make


# ============================================================================
# In-memory collaborators
# ============================================================================


class FakeObjectStore(ObjectStore):
    """Dict-backed object store with per-key failure injection."""

    def __init__(self, call_log: list[tuple[str, str]]) -> None:
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.failing_delete_keys: set[str] = set()
        self.fail_put = False
        self.fail_fetch = False
        self.call_log = call_log
        self._lock = threading.Lock()

    def put(self, *, album_id: str, image_id: str, file_data: bytes, content_type: str) -> str:
        if self.fail_put:
            raise ObjectStoreError(message="Unable to upload image at this time")
        key = f"images/{album_id}/{image_id}.jpg"
        with self._lock:
            self.objects[key] = (file_data, content_type)
            self.call_log.append(("object.put", key))
        return key

    def fetch(self, *, key: str) -> tuple[bytes, str, int]:
        if self.fail_fetch:
            raise ObjectStoreError(message="Unable to download image at this time")
        if key not in self.objects:
            raise NotFoundError(message="Image file not found")
        data, content_type = self.objects[key]
        return data, content_type, len(data)

    def delete(self, *, key: str) -> None:
        with self._lock:
            self.call_log.append(("object.delete", key))
        if key in self.failing_delete_keys:
            raise ObjectStoreError(message=f"Unable to delete object {key}: simulated outage")
        with self._lock:
            self.objects.pop(key, None)


class InMemoryImageRepository(ImageRepository):
    """Dict-backed image repository keyed by (album_id, image_id)."""

    def __init__(self, call_log: list[tuple[str, str]]) -> None:
        self.records: dict[ImageKey, ImageRecord] = {}
        self.fail_insert = False
        self.fail_delete = False
        self.call_log = call_log

    def add(self, *records: ImageRecord) -> None:
        for record in records:
            self.records[record.key] = record

    def insert(self, *, record: ImageRecord) -> None:
        if self.fail_insert:
            raise RepositoryError(message="Unable to save image metadata at this time")
        self.records[record.key] = record
        self.call_log.append(("record.insert", record.image_id))

    def find_by_album(self, *, album_id: str) -> list[ImageRecord]:
        records = [record for record in self.records.values() if record.album_id == album_id]
        return sorted(records, key=lambda record: record.created_at, reverse=True)

    def find_one(self, *, image_id: str, album_id: str) -> ImageRecord | None:
        return self.records.get((album_id, image_id))

    def find_all(self) -> list[ImageRecord]:
        return list(self.records.values())

    def update_one(
        self,
        *,
        image_id: str,
        album_id: str,
        set_fields: Patch | None = None,
        append_fields: Patch | None = None,
        expected_fields: Patch | None = None,
    ) -> ImageRecord | None:
        touched = set(set_fields or {}) | set(append_fields or {})
        if touched & IMMUTABLE_IMAGE_FIELDS:
            raise RepositoryError(message="Cannot modify immutable fields")

        record = self.records.get((album_id, image_id))
        if record is None:
            return None
        if any(getattr(record, field) != value for field, value in (expected_fields or {}).items()):
            return None

        data = record.model_dump()
        data.update(set_fields or {})
        for field, items in (append_fields or {}).items():
            data[field] = list(data.get(field) or []) + list(items)

        updated = ImageRecord.model_validate(data)
        self.records[updated.key] = updated
        return updated

    def delete_one(self, *, image_id: str, album_id: str) -> int:
        if self.fail_delete:
            raise RepositoryError(message="Unable to delete image metadata")
        self.call_log.append(("record.delete", image_id))
        return 1 if self.records.pop((album_id, image_id), None) else 0

    def delete_many(self, *, album_id: str | None = None, keys: Iterable[ImageKey] | None = None) -> int:
        if self.fail_delete:
            raise RepositoryError(message="Unable to delete image metadata")
        if album_id is not None:
            targets = [key for key in self.records if key[0] == album_id]
        else:
            targets = list(keys or [])
        self.call_log.append(("record.delete_many", album_id or "keys"))
        return sum(1 for key in targets if self.records.pop(key, None) is not None)


class FakeAlbumDirectory(AlbumDirectory):
    """Set-backed album existence oracle that counts lookups."""

    def __init__(self, albums: Iterable[str] = ()) -> None:
        self.albums = set(albums)
        self.lookups: list[str] = []
        self.fail = False

    def exists(self, album_id: str) -> bool:
        self.lookups.append(album_id)
        if self.fail:
            raise RepositoryError(message="Unable to verify album")
        return album_id in self.albums


@pytest.fixture
def call_log() -> list[tuple[str, str]]:
    return []


@pytest.fixture
def object_store(call_log) -> FakeObjectStore:
    return FakeObjectStore(call_log)


@pytest.fixture
def image_repository(call_log) -> InMemoryImageRepository:
    return InMemoryImageRepository(call_log)


@pytest.fixture
def album_directory() -> FakeAlbumDirectory:
    return FakeAlbumDirectory(albums={"album_a", "album_b"})


@pytest.fixture
def lifecycle_manager(object_store, image_repository, album_directory) -> ImageLifecycleManager:
    return ImageLifecycleManager(
        object_store=object_store,
        images=image_repository,
        albums=album_directory,
        max_workers=4,
    )


# ============================================================================
# Lambda / API Gateway helpers
# ============================================================================


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )


@pytest.fixture
def build_multipart() -> Callable[..., tuple[bytes, str]]:
    """
    Build a multipart/form-data body.

    Usage:
        body, content_type = build_multipart(
            fields={"tags": '["cat"]'},
            files=[("image", "cat.jpg", "image/jpeg", b"...")],
        )
    """

    def _build(
        fields: dict[str, str] | None = None,
        files: list[tuple[str, str, str, bytes]] | None = None,
    ) -> tuple[bytes, str]:
        boundary = f"----TestBoundary{uuid.uuid4().hex}"
        chunks: list[bytes] = []

        for name, value in (fields or {}).items():
            chunks.append(
                f"--{boundary}\r\n"
                f'Content-Disposition: form-data; name="{name}"\r\n\r\n'
                f"{value}\r\n".encode("utf-8")
            )

        for name, filename, content_type, data in files or []:
            chunks.append(
                f"--{boundary}\r\n"
                f'Content-Disposition: form-data; name="{name}"; filename="{filename}"\r\n'
                f"Content-Type: {content_type}\r\n\r\n".encode("utf-8")
                + data
                + b"\r\n"
            )

        chunks.append(f"--{boundary}--\r\n".encode("utf-8"))
        return b"".join(chunks), f"multipart/form-data; boundary={boundary}"

    return _build


@pytest.fixture
def api_event() -> Callable[..., dict[str, Any]]:
    """Build an API Gateway proxy event."""

    def _event(
        method: str = "GET",
        *,
        path_params: dict[str, str] | None = None,
        body: Any = None,
        headers: dict[str, str] | None = None,
        principal_id: str | None = None,
        query_params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        event: dict[str, Any] = {
            "httpMethod": method,
            "path": "/albums",
            "pathParameters": path_params,
            "queryStringParameters": query_params,
            "headers": headers or {},
            "body": None,
            "isBase64Encoded": False,
            "requestContext": {},
        }

        if isinstance(body, bytes):
            event["body"] = base64.b64encode(body).decode("ascii")
            event["isBase64Encoded"] = True
        elif body is not None:
            event["body"] = json.dumps(body)
            event["headers"].setdefault("Content-Type", "application/json")

        if principal_id:
            event["requestContext"]["authorizer"] = {"principalId": principal_id}

        return event

    return _event


def parse_body(response: dict[str, Any]) -> dict[str, Any]:
    """Parse the JSON body of an API Gateway response."""
    body = response.get("body")
    if not body:
        return {}
    return json.loads(body)


@pytest.fixture
def response_body() -> Callable[[dict[str, Any]], dict[str, Any]]:
    return parse_body
