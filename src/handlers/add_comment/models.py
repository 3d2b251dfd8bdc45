"""Pydantic models for adding a comment to an image."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from core.models.image import Comment, ImageRecord


class AddCommentRequest(BaseModel):
    """Validation model for add comment request.

    ``text`` rules (non-blank, length) are applied by the lifecycle manager.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    album_id: str = Field(..., min_length=1, description="Owning album identifier")
    image_id: str = Field(..., min_length=1, description="Image to comment on")
    text: Any = Field(None, description="Comment body")


class AddCommentResponse(BaseModel):
    comment: Comment = Field(..., description="The comment that was appended")
    image: ImageRecord
