"""Pydantic models for delete image request/response."""

from pydantic import BaseModel, ConfigDict, Field


class DeleteImageRequest(BaseModel):
    """Validation model for delete image request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    album_id: str = Field(..., min_length=1, description="Owning album identifier")
    image_id: str = Field(..., min_length=1, description="Image ID to delete")


class DeleteImageResponse(BaseModel):
    """Response model for image deletion.

    The record is gone even when ``storage_errors`` is non-empty; those
    objects are left for the reconciliation sweep.
    """

    image_id: str = Field(..., description="Deleted image ID")
    object_key: str = Field(..., description="Object store key that was targeted")
    storage_errors: list[str] = Field(default_factory=list, description="Object store failures")
