"""
Business logic for building the image gallery.

Every key in the store is read back and decoded. Reads run in fixed-size
batches: the keys of one batch are fetched in parallel, and the next batch
starts only after every read of the current one has settled. This bounds
concurrent store connections and in-flight payload memory.
"""

from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from aws_lambda_powertools import Logger

from core.codec import record_codec
from core.models.errors import ListError
from core.models.record import ImageSummary
from core.repositories.kv_store import KeyValueStore
from core.services.ingest_service import image_path
from core.utils.constants import LIST_BATCH_SIZE
from core.utils.time import iso_to_epoch

logger = Logger(UTC=True)


def key_name(entry: Any) -> str | None:
    """Extract the key from a store enumeration entry.

    Stores return either plain strings or entries exposing the key as
    ``key`` or ``name`` (attribute or mapping item).
    """
    if isinstance(entry, str):
        return entry

    if isinstance(entry, Mapping):
        value = entry.get("key") or entry.get("name")
    else:
        value = getattr(entry, "key", None) or getattr(entry, "name", None)

    return value if isinstance(value, str) and value else None


def batched(items: Sequence[Any], size: int) -> list[Sequence[Any]]:
    """Split ``items`` into consecutive slices of at most ``size`` elements."""
    return [items[i : i + size] for i in range(0, len(items), size)]


class ListService:
    """Application service responsible for listing stored images.

    This service coordinates:
    - Enumerating keys from the store
    - Reading and decoding records in bounded parallel batches
    - Sorting the surviving summaries newest first
    """

    def __init__(self, store: KeyValueStore, *, batch_size: int = LIST_BATCH_SIZE) -> None:
        """Initialize list service with the record store."""
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        self.store = store
        self.batch_size = batch_size

    def list_all(self) -> list[ImageSummary]:
        """Return a summary of every readable image, newest first.

        Raises:
            ListError: If the key enumeration itself fails
        """
        try:
            entries = list(self.store.list_keys())
        except Exception as exc:
            logger.exception("Failed to enumerate store keys")
            raise ListError(
                message=str(exc),
                details={"cause": type(exc).__name__},
            ) from exc

        summaries: list[ImageSummary] = []
        batches = batched(entries, self.batch_size)

        with ThreadPoolExecutor(max_workers=self.batch_size) as executor:
            for batch in batches:
                # list() joins every read of the batch before the next starts
                results = list(executor.map(self._read_summary, batch))
                summaries.extend(item for item in results if item is not None)

        summaries.sort(key=lambda item: iso_to_epoch(item.uploadTime), reverse=True)

        logger.info(
            "Images listed successfully",
            extra={
                "keys": len(entries),
                "batches": len(batches),
                "count": len(summaries),
            },
        )
        return summaries

    def _read_summary(self, entry: Any) -> ImageSummary | None:
        """Fetch and decode one record; any failure yields ``None``."""
        key = key_name(entry)
        if key is None:
            logger.warning("Skipping store entry without a key", extra={"entry": repr(entry)})
            return None

        try:
            value = self.store.get(key)
            if value is None:
                return None

            metadata = record_codec.decode_metadata(value)
            upload_time = metadata.get("uploadTime")

            return ImageSummary(
                filename=key,
                url=image_path(key),
                metadata=metadata,
                uploadTime=upload_time if isinstance(upload_time, str) and upload_time else None,
            )
        except Exception as exc:
            logger.warning(
                "Failed to read record",
                extra={"key": key, "error": str(exc), "error_type": type(exc).__name__},
            )
            return None
