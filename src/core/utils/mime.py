from collections.abc import Mapping

MAGIC_BYTES: Mapping[bytes, str] = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
}


def detect_mime_type(file_data: bytes) -> str:
    for signature, mime in MAGIC_BYTES.items():
        if file_data.startswith(signature):
            return mime

    if file_data[:4] == b"RIFF" and file_data[8:12] == b"WEBP":
        return "image/webp"

    raise ValueError("Unsupported or unknown file type")


def infer_image_mime_type(file_data: bytes, declared: str | None, default: str) -> str:
    """Pick a MIME type for remotely fetched image bytes.

    A declared ``image/*`` type wins; otherwise the content is sniffed,
    and ``default`` is used when neither is conclusive.
    """
    if declared:
        declared = declared.split(";", 1)[0].strip().lower()
        if declared.startswith("image/"):
            return declared

    try:
        return detect_mime_type(file_data)
    except ValueError:
        return default
