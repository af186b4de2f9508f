"""Pydantic models for image upload response."""

from pydantic import BaseModel, Field, StrictBool, StrictInt, StrictStr


class ImageUploadResponse(BaseModel):
    """Response model for successful image upload."""

    success: StrictBool = True
    filename: StrictStr = Field(..., description="Generated storage key")
    url: StrictStr = Field(..., description="Relative URL serving the image")
    originalName: StrictStr = Field(..., description="Client-side filename")
    size: StrictInt = Field(..., description="Image size in bytes")
