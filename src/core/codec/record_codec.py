"""Serialization of image records to and from the store's value format.

A stored value is a JSON document::

    {"data": "<base64>", "metadata": {"name", "type", "size", "uploadTime", "source"?}}

All functions here are pure transformations.
"""

import base64
import binascii
import json
from typing import Any

from aws_lambda_powertools import Logger
from pydantic import ValidationError as PydanticValidationError

from core.models.errors import DecodeError
from core.models.record import Record, RecordMetadata, StoredRecord
from core.utils.constants import ENCODE_CHUNK_SIZE
from core.utils.validators import sanitize_validation_errors

logger = Logger(UTC=True)


def encode_payload(raw: bytes, *, chunk_size: int = ENCODE_CHUNK_SIZE) -> str:
    """Base64-encode ``raw`` segment by segment.

    ``chunk_size`` must be a multiple of 3 so every segment except the last
    encodes without padding and the pieces join into one valid string.
    """
    if chunk_size <= 0 or chunk_size % 3:
        raise ValueError("chunk_size must be a positive multiple of 3")

    view = memoryview(raw)
    segments = [
        base64.b64encode(view[offset : offset + chunk_size]).decode("ascii")
        for offset in range(0, len(view), chunk_size)
    ]
    return "".join(segments)


def encode(raw: bytes, metadata: RecordMetadata) -> str:
    """Serialize image bytes and metadata into a storable value."""
    document = {
        "data": encode_payload(raw),
        "metadata": metadata.to_storage(),
    }
    return json.dumps(document, separators=(",", ":"))


def _load_document(value: str | bytes) -> dict[str, Any]:
    try:
        document = json.loads(value)
    except (TypeError, ValueError) as exc:
        raise DecodeError(
            message="Stored value is not valid JSON",
            details={"reason": str(exc)},
        ) from exc

    if not isinstance(document, dict):
        raise DecodeError(
            message="Stored value is not a JSON object",
            details={"type": type(document).__name__},
        )

    return document


def decode(value: str | bytes) -> Record:
    """Parse a stored value into a :class:`Record`.

    Raises:
        DecodeError: If the JSON is malformed, required fields are missing,
            or the payload is not valid base64.
    """
    document = _load_document(value)

    try:
        stored = StoredRecord.model_validate(document)
    except PydanticValidationError as exc:
        raise DecodeError(
            message="Stored record has an invalid shape",
            details={"errors": sanitize_validation_errors(exc.errors())},
        ) from exc

    try:
        payload = base64.b64decode(stored.data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(
            message="Stored payload is not valid base64",
        ) from exc

    if len(payload) != stored.metadata.size:
        logger.warning(
            "Stored size does not match payload length",
            extra={"size": stored.metadata.size, "payload_length": len(payload)},
        )

    return Record(payload=payload, metadata=stored.metadata)


def decode_metadata(value: str | bytes) -> dict[str, Any]:
    """Extract only the metadata of a stored value, leniently.

    Used by listing, which never touches the payload: absent or non-object
    metadata yields an empty mapping instead of an error.

    Raises:
        DecodeError: If the value is not a JSON object.
    """
    document = _load_document(value)
    metadata = document.get("metadata")
    return metadata if isinstance(metadata, dict) else {}
