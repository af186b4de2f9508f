"""Pydantic models for delete image request/response."""

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from core.utils.constants import KEY_PATTERN


class DeleteImageRequest(BaseModel):
    """Validation model for delete image request."""

    model_config = ConfigDict(str_strip_whitespace=True)
    filename: str = Field(
        ...,
        min_length=1,
        pattern=KEY_PATTERN,
        description="Storage key of the image to delete",
    )


class DeleteImageResponse(BaseModel):
    """Response model for successful image deletion."""

    success: StrictBool = True
    filename: str = Field(..., description="Deleted storage key")
    deleted_at: str = Field(..., description="Deletion timestamp")
