"""Shared record and listing models."""

from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
)


class RecordMetadata(BaseModel):
    """Metadata persisted alongside every image payload.

    Direct uploads leave ``source`` unset; bot-originated records carry
    ``source="telegram"``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: StrictStr = Field(..., description="Original or synthesized display name")
    type: StrictStr = Field(..., description="MIME type of the image (e.g. image/png)")
    size: StrictInt = Field(..., ge=0, description="Payload size in bytes")
    upload_time: StrictStr = Field(
        ...,
        alias="uploadTime",
        min_length=1,
        description="ISO-8601 persist timestamp (UTC)",
    )
    source: Literal["telegram"] | None = Field(
        None,
        description="Provenance tag for non-direct uploads",
    )

    def to_storage(self) -> dict[str, Any]:
        """Serialize using wire names, omitting an unset source."""
        return self.model_dump(by_alias=True, exclude_none=True)


class StoredRecord(BaseModel):
    """Persisted value format: base64 payload plus metadata."""

    data: StrictStr = Field(..., description="Base64 encoded image payload")
    metadata: RecordMetadata


class Record(BaseModel):
    """Decoded record: raw payload bytes plus metadata."""

    payload: bytes
    metadata: RecordMetadata


class ImageSummary(BaseModel):
    """Gallery entry returned by the listing endpoint."""

    filename: StrictStr = Field(..., description="Storage key of the image")
    url: StrictStr = Field(..., description="Relative URL serving the image")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Stored metadata, passed through as persisted",
    )
    uploadTime: StrictStr | None = Field(
        None,
        description="ISO-8601 upload timestamp, if recorded",
    )


class ListImagesResponse(BaseModel):
    """Response for listing all images."""

    success: StrictBool = True
    count: StrictInt = Field(..., description="Number of images returned")
    images: list[ImageSummary] = Field(..., description="Images, newest first")
