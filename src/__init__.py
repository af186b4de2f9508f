"""Image Hosting Service Package."""

__version__ = "1.0.0"
__description__ = (
    "Serverless image hosting on a key-value store with direct upload "
    "and Telegram bot ingestion"
)

__all__ = ["handlers", "core"]
