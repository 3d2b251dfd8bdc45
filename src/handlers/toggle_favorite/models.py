"""Pydantic models for favorite toggling."""

from pydantic import BaseModel, ConfigDict, Field

from core.models.image import ImageRecord


class ToggleFavoriteRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    album_id: str = Field(..., min_length=1, description="Owning album identifier")
    image_id: str = Field(..., min_length=1, description="Image to toggle")


class ToggleFavoriteResponse(BaseModel):
    favorite: bool = Field(..., description="Favorite state after the toggle")
    image: ImageRecord
