from pydantic import BaseModel, ConfigDict, Field, StrictStr

from core.utils.constants import KEY_PATTERN


class GetImageRequest(BaseModel):
    """Validation model for serving a stored image."""

    model_config = ConfigDict(str_strip_whitespace=True)

    filename: StrictStr = Field(
        ...,
        min_length=1,
        pattern=KEY_PATTERN,
        description="Storage key of the image to serve",
    )
