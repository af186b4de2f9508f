"""
Business logic for serving stored images.
"""

from aws_lambda_powertools import Logger

from core.codec import record_codec
from core.models.errors import NotFoundError
from core.models.record import Record
from core.repositories.kv_store import KeyValueStore

logger = Logger(UTC=True)


class GetService:
    """Application service reading a single record back from the store."""

    def __init__(self, store: KeyValueStore) -> None:
        """Initialize get service with the record store."""
        self.store = store

    def get_image(self, filename: str) -> Record:
        """Fetch and decode the record stored under ``filename``.

        Raises:
            NotFoundError: If no record exists for the key
            DecodeError: If the stored value is unreadable
            StorageFailureError: If the store rejects the read
        """
        value = self.store.get(filename)

        if value is None:
            logger.info("Image not found", extra={"image_key": filename})
            raise NotFoundError(
                message=f"Image not found: {filename}",
                details={"filename": filename},
            )

        record = record_codec.decode(value)

        logger.debug(
            "Image fetched",
            extra={"image_key": filename, "size": len(record.payload)},
        )
        return record
