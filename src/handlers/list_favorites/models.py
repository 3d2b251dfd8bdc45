"""Pydantic models for favorite image listing."""

from pydantic import BaseModel, ConfigDict, Field

from core.models.image import ImageRecord


class ListFavoritesRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    album_id: str = Field(..., min_length=1, description="Album to list")


class ListFavoritesResponse(BaseModel):
    album_id: str
    images: list[ImageRecord]
    count: int
