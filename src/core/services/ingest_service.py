"""Shared persistence path for newly ingested images.

Both the direct upload endpoint and the Telegram webhook converge here:
the image is size-checked, assigned a key, encoded into a record and
written to the store. The store write is the final step, so a failure
never leaves a partial record behind.
"""

from aws_lambda_powertools import Logger
from pydantic import BaseModel

from core.codec import record_codec
from core.models.errors import FileTooLargeError, StorageFailureError
from core.models.record import Record, RecordMetadata
from core.repositories.kv_store import KeyValueStore
from core.utils.constants import (
    IMAGE_URL_PREFIX,
    MAX_FILE_SIZE,
    format_file_size,
    get_max_file_size_mb,
)
from core.utils.keys import generate_key
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)


class IngestResult(BaseModel):
    """Outcome of a successful ingestion."""

    key: str
    record: Record

    @property
    def url(self) -> str:
        return image_path(self.key)


def image_path(key: str) -> str:
    """Relative URL at which a stored image is served."""
    return f"{IMAGE_URL_PREFIX}{key}"


def ensure_within_size_limit(size: int) -> None:
    """Raise FileTooLargeError when ``size`` exceeds the upload ceiling."""
    if size > MAX_FILE_SIZE:
        raise FileTooLargeError(
            message=f"File size cannot exceed {get_max_file_size_mb()}MB",
            details={
                "size": format_file_size(size),
                "limit": format_file_size(MAX_FILE_SIZE),
            },
        )


class IngestService:
    """Application service persisting images as self-contained records."""

    def __init__(self, store: KeyValueStore) -> None:
        """Initialize the service with the store records are written to."""
        self.store = store

    def ingest(
        self,
        *,
        file_data: bytes,
        original_name: str,
        mime_type: str,
        extension_hint: str | None = None,
        source: str | None = None,
    ) -> IngestResult:
        """Encode and persist an image.

        Args:
            file_data: Raw image bytes
            original_name: Display name recorded in the metadata
            mime_type: MIME type recorded in the metadata
            extension_hint: Filename or path the key extension is derived
                from; defaults to ``original_name``
            source: Optional provenance tag

        Returns:
            The generated key and the persisted record

        Raises:
            FileTooLargeError: If the image exceeds the size ceiling
            StorageFailureError: If the store rejects the write
        """
        ensure_within_size_limit(len(file_data))

        key = generate_key(extension_hint if extension_hint is not None else original_name)
        metadata = RecordMetadata(
            name=original_name,
            type=mime_type,
            size=len(file_data),
            uploadTime=utc_now_iso(),
            source=source,
        )

        value = record_codec.encode(file_data, metadata)

        try:
            self.store.put(key, value)
        except StorageFailureError:
            logger.exception("Failed to persist record", extra={"key": key})
            raise
        except Exception as exc:
            logger.exception("Unexpected store error persisting record", extra={"key": key})
            raise StorageFailureError(
                message=str(exc),
                details={"key": key},
            ) from exc

        logger.info(
            "Image ingested",
            extra={
                "key": key,
                "size": metadata.size,
                "mime_type": mime_type,
                "source": source or "upload",
            },
        )
        return IngestResult(key=key, record=Record(payload=file_data, metadata=metadata))
