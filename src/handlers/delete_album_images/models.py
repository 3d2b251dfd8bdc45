"""Pydantic models for the album-deleted cascade."""

from pydantic import BaseModel, ConfigDict, Field


class DeleteAlbumImagesRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    album_id: str = Field(..., min_length=1, description="Album whose images are removed")


class DeleteAlbumImagesResponse(BaseModel):
    """Outcome of the cascade.

    ``deleted_count`` is the number of records removed; ``errors`` lists
    objects that could not be deleted from the object store.
    """

    album_id: str
    deleted_count: int
    errors: list[str] = Field(default_factory=list)
