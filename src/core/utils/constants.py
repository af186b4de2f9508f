"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_MISSING_FILE = "MISSING_FILE"
ERROR_CODE_UNSUPPORTED_MIME_TYPE = "UNSUPPORTED_MIME_TYPE"
ERROR_CODE_FILE_SIZE_EXCEEDED = "FILE_SIZE_EXCEEDED"
ERROR_CODE_INVALID_MULTIPART = "INVALID_MULTIPART"

# Auth Errors
ERROR_CODE_UNAUTHORIZED = "UNAUTHORIZED"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"

# Storage Errors
ERROR_CODE_STORAGE_FAILURE = "STORAGE_FAILURE"
ERROR_CODE_RECORD_DECODE_FAILED = "RECORD_DECODE_FAILED"
ERROR_CODE_LIST_FAILED = "LIST_FAILED"

# Telegram Errors
ERROR_CODE_REMOTE_FETCH_FAILED = "REMOTE_FETCH_FAILED"


# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 25 * 1024 * 1024  # 25MB in bytes

UPLOAD_FIELD_NAME = "image"

ALLOWED_MIME_TYPES: Final[frozenset[str]] = frozenset(
    {
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/jpg",
    }
)

DEFAULT_MIME_TYPE = "image/jpeg"


# ============================================================================
# Record Storage
# ============================================================================

# Multiple of 3 so base64 segments concatenate without inner padding
ENCODE_CHUNK_SIZE: Final[int] = 0x8000 - (0x8000 % 3)

KEY_RANDOM_LENGTH: Final[int] = 8
KEY_ALPHABET: Final[str] = "0123456789abcdefghijklmnopqrstuvwxyz"
DEFAULT_EXTENSION: Final[str] = "jpg"
MAX_EXTENSION_LENGTH: Final[int] = 4

IMAGE_URL_PREFIX = "/i/"

# Keys accepted on read/delete paths; generated keys are a subset
KEY_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9._-]{0,127}$"

SOURCE_TELEGRAM = "telegram"


# ============================================================================
# Listing
# ============================================================================

LIST_BATCH_SIZE: Final[int] = 5


# ============================================================================
# Telegram
# ============================================================================

TELEGRAM_API_BASE_URL = "https://api.telegram.org"
TELEGRAM_SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"
TELEGRAM_PHOTO_NAME = "photo.jpg"
TELEGRAM_REQUEST_TIMEOUT = 30
TELEGRAM_WEBHOOK_PATH = "/telegram-webhook"
TELEGRAM_ALLOWED_UPDATES = ("message",)


# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization"
DEFAULT_CONTENT_TYPE = "application/json"
IMAGE_CACHE_CONTROL = "public, max-age=31536000, immutable"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_IMAGES_BUCKET_NAME = "IMAGES_BUCKET_NAME"
ENV_TG_BOT_TOKEN = "TG_BOT_TOKEN"
ENV_TG_SECRET_TOKEN = "TG_SECRET_TOKEN"
ENV_TELEGRAM_API_BASE_URL = "TELEGRAM_API_BASE_URL"
ENV_API_KEY = "API_KEY"

# ============================================================================
# Helper Functions
# ============================================================================


def get_max_file_size_mb() -> int:
    """Get maximum file size in megabytes."""
    return MAX_FILE_SIZE // (1024 * 1024)


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0

    return f"{size:.1f} TB"
