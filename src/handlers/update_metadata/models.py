"""Pydantic models for image metadata updates."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from core.models.image import ImageRecord


class UpdateMetadataRequest(BaseModel):
    """Validation model for update metadata request.

    Only ``tags`` and ``person`` are writable; any other body field (for
    example ``album_id``) is ignored.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    album_id: str = Field(..., min_length=1, description="Owning album identifier")
    image_id: str = Field(..., min_length=1, description="Image to update")
    tags: Any = Field(None, description="Replacement tag list")
    person: Any = Field(None, description="Replacement person; empty string clears it")


class UpdateMetadataResponse(BaseModel):
    image: ImageRecord
