"""Business logic for direct image uploads.

Validates the multipart ``image`` field and hands the bytes to the shared
ingestion service. Every validation step runs before any store I/O.
"""

from aws_lambda_powertools import Logger

from core.models.errors import MissingFileError, UnsupportedTypeError
from core.repositories.kv_store import KeyValueStore
from core.services.ingest_service import (
    IngestResult,
    IngestService,
    ensure_within_size_limit,
)
from core.utils.constants import ALLOWED_MIME_TYPES, UPLOAD_FIELD_NAME
from core.utils.multipart import FormPart

logger = Logger(UTC=True)


class UploadService:
    """Application service responsible for direct uploads.

    This service orchestrates:
    - Presence, type and size validation of the uploaded file
    - Persisting the image through the ingestion service
    """

    def __init__(self, store: KeyValueStore) -> None:
        """Initialize the upload service with the record store."""
        self.ingest = IngestService(store)

    @staticmethod
    def validate_file(fields: dict[str, FormPart]) -> FormPart:
        """Return the uploaded image part or raise a validation error.

        Checks, in order: the field is present, its type is allowed, its
        size is within the ceiling.

        Raises:
            MissingFileError: If no file was sent in the ``image`` field
            UnsupportedTypeError: If the declared type is not allowed
            FileTooLargeError: If the file exceeds the size ceiling
        """
        part = fields.get(UPLOAD_FIELD_NAME)

        if part is None or not part.is_file or part.size == 0:
            raise MissingFileError(
                message="Please upload an image file",
                details={"field": UPLOAD_FIELD_NAME},
            )

        if part.content_type not in ALLOWED_MIME_TYPES:
            logger.warning(
                "Unsupported MIME type",
                extra={"mime_type": part.content_type},
            )
            raise UnsupportedTypeError(
                message="Only JPG, PNG, GIF and WebP images are supported",
                details={"mime_type": part.content_type},
            )

        ensure_within_size_limit(part.size)

        return part

    def upload_image(self, fields: dict[str, FormPart]) -> tuple[FormPart, IngestResult]:
        """Validate and persist an uploaded image.

        Returns:
            The validated form part and the ingestion result

        Raises:
            ValidationError: If the upload is invalid
            StorageFailureError: If the store rejects the write
        """
        part = self.validate_file(fields)
        original_name = part.filename or ""

        logger.debug(
            "Starting image upload",
            extra={"original_name": original_name, "size": part.size},
        )

        result = self.ingest.ingest(
            file_data=part.data,
            original_name=original_name,
            mime_type=part.content_type,
        )
        return part, result
