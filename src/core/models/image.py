"""Shared image record models."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, StrictBool, StrictInt, StrictStr

Item = dict[str, Any]


class Comment(BaseModel):
    """A single comment attached to an image."""

    comment_id: StrictStr = Field(..., description="Unique comment identifier")
    author_id: StrictStr = Field(..., description="Principal id of the comment author")
    text: StrictStr = Field(..., description="Comment body")
    created_at: StrictStr = Field(..., description="ISO-8601 creation timestamp (UTC)")


class ImageRecord(BaseModel):
    """Image metadata record persisted in the metadata repository."""

    image_id: StrictStr = Field(..., description="Unique image identifier")
    album_id: StrictStr = Field(..., description="Owning album identifier")
    object_key: StrictStr = Field(..., description="Object store key holding the image bytes")

    image_name: StrictStr = Field(..., description="Original image file name")
    mime_type: StrictStr = Field(..., description="MIME type of the image (e.g. image/jpeg)")
    file_size: StrictInt = Field(..., description="Image size in bytes")

    tags: list[StrictStr] = Field(default_factory=list, description="Ordered image tags")
    person: StrictStr | None = Field(None, description="Person shown in the image")
    favorite: StrictBool = Field(False, description="Whether the image is a favorite")
    comments: list[Comment] = Field(default_factory=list, description="Ordered comments")

    created_at: StrictStr = Field(..., description="ISO-8601 creation timestamp (UTC)")
    updated_at: StrictStr | None = Field(None, description="ISO-8601 last update timestamp (UTC)")

    @property
    def key(self) -> tuple[str, str]:
        """Compound (album_id, image_id) key."""
        return self.album_id, self.image_id

    def to_item(self) -> Item:
        """Serialize for storage."""
        return self.model_dump()

    @classmethod
    def from_item(cls, item: Item) -> "ImageRecord":
        """Build a record from a stored item.

        DynamoDB returns numbers as ``Decimal``; they are converted back to
        plain ints before strict validation.
        """
        data = dict(item)
        if isinstance(data.get("file_size"), Decimal):
            data["file_size"] = int(data["file_size"])
        data.setdefault("tags", [])
        data.setdefault("comments", [])
        if data["tags"] is None:
            data["tags"] = []
        if data["comments"] is None:
            data["comments"] = []
        return cls.model_validate(data)


class UploadedFile(BaseModel):
    """A file part received in an upload request."""

    field_name: StrictStr | None = Field(None, description="Form field the file was sent in")
    filename: StrictStr = Field(..., description="Client-side file name")
    content_type: StrictStr = Field(..., description="Declared MIME type")
    data: bytes = Field(..., description="Raw file bytes")

    @property
    def size(self) -> int:
        return len(self.data)


class DeleteResult(BaseModel):
    """Outcome of deleting a single image."""

    deleted: StrictBool
    image_id: StrictStr
    object_key: StrictStr
    storage_errors: list[StrictStr] = Field(default_factory=list)


class BulkDeleteResult(BaseModel):
    """Outcome of deleting every image of an album."""

    deleted_count: StrictInt
    errors: list[StrictStr] = Field(default_factory=list)


class ReconcileResult(BaseModel):
    """Outcome of an orphan reconciliation sweep."""

    cleaned_count: StrictInt
    errors: list[StrictStr] = Field(default_factory=list)
    scanned_count: StrictInt = 0
    orphaned_album_ids: list[StrictStr] = Field(default_factory=list)
