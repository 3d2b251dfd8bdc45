"""Pydantic models for image upload request/response."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from core.models.image import ImageRecord


class ImageUploadRequest(BaseModel):
    """Validation model for the upload path and form fields.

    ``tags`` and ``person`` are passed through untouched; their rules live in
    the shared validators so upload and metadata update agree.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    album_id: str = Field(..., min_length=1, description="Target album identifier")
    tags: Any = Field(None, description="JSON array of tags (form field)")
    person: str | None = Field(None, description="Person shown in the image")


class ImageUploadResponse(BaseModel):
    """Response model for successful image upload."""

    image: ImageRecord = Field(..., description="Created image record")
