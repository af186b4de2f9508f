"""Chat notifications for the Telegram ingestion path.

Notifications are best effort: a failed send is logged and never changes
the outcome reported to Telegram.
"""

from aws_lambda_powertools import Logger

from core.infrastructure.telegram.telegram_client import TelegramClient
from core.utils.constants import get_max_file_size_mb

logger = Logger(UTC=True)

MESSAGE_FILE_INFO_FAILED = "❌ Failed to get image info"
MESSAGE_DOWNLOAD_FAILED = "❌ Failed to download image"
MESSAGE_TOO_LARGE = f"❌ Image too large (>{get_max_file_size_mb()}MB)"
MESSAGE_STORAGE_FAILED = "❌ Storage failed: {reason}"


def format_success_message(image_url: str) -> str:
    """Build the Markdown reply listing the link and embed snippets.

    Each snippet sits in inline code so Telegram copies it on tap.
    """
    return (
        "✅ *Upload successful!*\n\n"
        "🔗 *Direct link*\n"
        f"`{image_url}`\n\n"
        "📝 *Markdown*\n"
        f"`![]({image_url})`\n\n"
        "🌐 *HTML*\n"
        f'`<img src="{image_url}" />`\n\n'
        "🤖 *BBCode*\n"
        f"`[img]{image_url}[/img]`"
    )


def format_storage_failure(reason: str) -> str:
    # Backticks would break the Markdown parse mode
    return MESSAGE_STORAGE_FAILED.format(reason=reason.replace("`", "'"))


class ChatNotifier:
    """Sends ingestion outcomes back to the originating chat."""

    def __init__(self, client: TelegramClient) -> None:
        self.client = client

    def notify(self, chat_id: int, text: str, *, reply_to: int | None = None) -> bool:
        """Send ``text`` to the chat; returns whether the send succeeded."""
        try:
            self.client.send_message(chat_id, text, reply_to_message_id=reply_to)
        except Exception as exc:
            logger.warning(
                "Failed to send Telegram notification",
                extra={"chat_id": chat_id, "error": str(exc)},
            )
            return False

        return True
