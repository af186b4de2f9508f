"""multipart/form-data parsing for API Gateway request bodies."""

from aws_lambda_powertools import Logger
from pydantic import BaseModel, Field
from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

from core.models.errors import ValidationError
from core.utils.constants import ERROR_CODE_INVALID_MULTIPART

logger = Logger(UTC=True)


class FormPart(BaseModel):
    """A single field of a multipart form."""

    name: str = Field(..., description="Form field name")
    filename: str | None = Field(None, description="Client-side filename, for file fields")
    content_type: str = Field("", description="Declared part Content-Type")
    data: bytes = Field(b"", description="Raw part content")

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_file(self) -> bool:
        return self.filename is not None


class _PartCollector:
    """Accumulates parser callbacks into FormPart objects."""

    def __init__(self) -> None:
        self.parts: list[FormPart] = []
        self._headers: dict[bytes, bytes] = {}
        self._header_field = bytearray()
        self._header_value = bytearray()
        self._data = bytearray()

    def on_part_begin(self) -> None:
        self._headers = {}
        self._data = bytearray()

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        self._headers[bytes(self._header_field).lower()] = bytes(self._header_value)
        self._header_field = bytearray()
        self._header_value = bytearray()

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        self._data += data[start:end]

    def on_part_end(self) -> None:
        _, options = parse_options_header(self._headers.get(b"content-disposition", b""))
        name = options.get(b"name")
        if name is None:
            logger.debug("Skipping form part without a name")
            return

        filename = options.get(b"filename")
        content_type, _ = parse_options_header(self._headers.get(b"content-type", b""))

        self.parts.append(
            FormPart(
                name=name.decode("utf-8", errors="replace"),
                filename=filename.decode("utf-8", errors="replace") if filename is not None else None,
                content_type=content_type.decode("latin-1").lower(),
                data=bytes(self._data),
            )
        )

    def callbacks(self) -> dict[str, object]:
        return {
            "on_part_begin": self.on_part_begin,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
        }


def parse_multipart_form(body: bytes, content_type: str | None) -> dict[str, FormPart]:
    """Parse a multipart/form-data body into its fields.

    When a field name repeats, the first occurrence wins.

    Raises:
        ValidationError: If the body is not a well-formed multipart form
    """
    mime, options = parse_options_header(content_type or "")
    boundary = options.get(b"boundary")

    if mime != b"multipart/form-data" or not boundary:
        raise ValidationError(
            message="Invalid request: expected multipart/form-data",
            error_code=ERROR_CODE_INVALID_MULTIPART,
            details={"content_type": content_type},
        )

    collector = _PartCollector()
    parser = MultipartParser(boundary, collector.callbacks())

    try:
        parser.write(body)
        parser.finalize()
    except MultipartParseError as exc:
        logger.warning("Malformed multipart body", extra={"error": str(exc)})
        raise ValidationError(
            message="Invalid multipart form body",
            error_code=ERROR_CODE_INVALID_MULTIPART,
        ) from exc

    fields: dict[str, FormPart] = {}
    for part in collector.parts:
        fields.setdefault(part.name, part)

    return fields
