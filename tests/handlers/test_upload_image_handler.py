import json

import pytest

from core.utils.constants import MAX_FILE_SIZE
from handlers.upload_image.handler import handler


@pytest.fixture
def upload_event(api_event, build_multipart, sample_jpeg_bytes):
    def _event(album_id="album_a", fields=None, files=None):
        if files is None:
            files = [("image", "cat.jpg", "image/jpeg", sample_jpeg_bytes)]
        body, content_type = build_multipart(fields=fields, files=files)
        return api_event(
            "POST",
            path_params={"album_id": album_id},
            body=body,
            headers={"Content-Type": content_type},
        )

    return _event


class TestUploadHandler:
    def test_upload_success(self, aws_stores, lambda_context, upload_event, s3_get_object, sample_jpeg_bytes):
        response = handler(
            upload_event(fields={"tags": '["cat", "pet"]', "person": "Alice"}),
            lambda_context,
        )

        assert response["statusCode"] == 201
        body = json.loads(response["body"])

        assert body["success"] is True
        assert body["message"] == "Image uploaded successfully"
        image = body["image"]
        assert image["album_id"] == "album_a"
        assert image["image_name"] == "cat.jpg"
        assert image["tags"] == ["cat", "pet"]
        assert image["person"] == "Alice"
        assert image["favorite"] is False
        assert image["object_key"].startswith("images/album_a/")
        assert s3_get_object(image["object_key"]) == sample_jpeg_bytes

        stored = aws_stores.images.get_item(Key={"album_id": "album_a", "image_id": image["image_id"]})
        assert stored["Item"]["image_name"] == "cat.jpg"

    def test_empty_tags_and_person_fields_mean_absent(self, aws_stores, lambda_context, upload_event):
        response = handler(upload_event(fields={"tags": "", "person": ""}), lambda_context)

        assert response["statusCode"] == 201
        image = json.loads(response["body"])["image"]
        assert image["tags"] == []
        assert image["person"] is None

    def test_unsupported_type_touches_nothing(self, aws_stores, lambda_context, upload_event, s3_object_keys):
        response = handler(
            upload_event(files=[("image", "doc.pdf", "application/pdf", b"%PDF-1.4")]),
            lambda_context,
        )

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert body["success"] is False
        assert body["error"] == "UNSUPPORTED_MIME_TYPE"
        assert s3_object_keys() == []
        assert aws_stores.images.scan()["Items"] == []

    def test_file_too_large(self, aws_stores, lambda_context, upload_event):
        response = handler(
            upload_event(files=[("image", "big.jpg", "image/jpeg", b"x" * (MAX_FILE_SIZE + 1))]),
            lambda_context,
        )

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["message"] == "File size too large. Maximum size is 5MB."

    def test_missing_file(self, aws_stores, lambda_context, upload_event):
        response = handler(upload_event(files=[]), lambda_context)

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["error"] == "FILE_MISSING"

    def test_wrong_field_name(self, aws_stores, lambda_context, upload_event, sample_jpeg_bytes):
        response = handler(
            upload_event(files=[("photo", "cat.jpg", "image/jpeg", sample_jpeg_bytes)]),
            lambda_context,
        )

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["error"] == "UNEXPECTED_FILE_FIELD"

    def test_too_many_tags(self, aws_stores, lambda_context, upload_event):
        tags = json.dumps([f"tag{i}" for i in range(21)])

        response = handler(upload_event(fields={"tags": tags}), lambda_context)

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["message"] == "Maximum 20 tags allowed"

    def test_not_multipart(self, aws_stores, lambda_context, api_event):
        event = api_event("POST", path_params={"album_id": "album_a"}, body={"image": "nope"})

        response = handler(event, lambda_context)

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["error"] == "INVALID_MULTIPART"

    def test_object_store_outage_returns_bad_gateway(self, aws_stores, lambda_context, upload_event, monkeypatch):
        monkeypatch.setenv("IMAGE_S3_BUCKET_NAME", "bucket-that-does-not-exist")

        response = handler(upload_event(), lambda_context)

        assert response["statusCode"] == 502
        assert json.loads(response["body"])["error"] == "IMAGE_UPLOAD_FAILED"
        assert aws_stores.images.scan()["Items"] == []

    def test_options_preflight(self, lambda_context):
        response = handler({"httpMethod": "OPTIONS"}, lambda_context)

        assert response["statusCode"] == 204
