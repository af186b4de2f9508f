"""Business logic for deleting a stored image."""

from aws_lambda_powertools import Logger

from core.repositories.kv_store import KeyValueStore
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)


class DeleteService:
    """Removes a single record from the store."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def delete_image(self, filename: str) -> str:
        """Delete the record stored under ``filename``.

        Returns:
            Deletion timestamp

        Raises:
            StorageFailureError: If the store rejects the deletion
        """
        self.store.delete(filename)
        logger.info("Image deleted", extra={"image_key": filename})
        return utc_now_iso()
