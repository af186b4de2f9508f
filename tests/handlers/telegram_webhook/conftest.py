from typing import Any
from unittest.mock import MagicMock

import pytest

from core.infrastructure.telegram.telegram_client import DownloadedFile, TelegramClient


@pytest.fixture
def telegram_client() -> MagicMock:
    """Bot API client double serving one JPEG photo."""
    client = MagicMock(spec=TelegramClient)
    client.get_file_path.return_value = "photos/file_7.jpg"
    client.download_file.return_value = DownloadedFile(
        content=b"\xff\xd8\xff\xe0jpeg-bytes",
        content_type="image/jpeg",
    )
    return client


@pytest.fixture
def photo_message() -> dict[str, Any]:
    return {
        "message_id": 11,
        "chat": {"id": 4242, "type": "private"},
        "date": 1700000000,
        "photo": [
            {"file_id": "SMALL", "file_unique_id": "s", "width": 90, "height": 90},
            {"file_id": "LARGE", "file_unique_id": "l", "width": 1280, "height": 1280},
        ],
    }
