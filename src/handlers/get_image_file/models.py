"""Pydantic models for image file download."""

from pydantic import BaseModel, ConfigDict, Field


class GetImageFileRequest(BaseModel):
    """Validation model for image file request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    album_id: str = Field(..., min_length=1, description="Owning album identifier")
    image_id: str = Field(..., min_length=1, description="Image to serve")
    download: bool = Field(False, description="Serve as attachment instead of inline")
