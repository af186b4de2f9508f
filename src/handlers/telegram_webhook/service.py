"""
Business logic for ingesting images sent to the Telegram bot.

Every per-message failure (Bot API, download, size, store) ends in a chat
notice rather than an exception, because the caller is Telegram's webhook
dispatcher and an error status would only trigger redelivery.
"""

from aws_lambda_powertools import Logger

from core.infrastructure.telegram.telegram_client import TelegramClient
from core.models.errors import FileTooLargeError, RemoteFetchError, StorageFailureError
from core.repositories.kv_store import KeyValueStore
from core.services.ingest_service import (
    IngestResult,
    IngestService,
    ensure_within_size_limit,
)
from core.utils.constants import DEFAULT_MIME_TYPE, SOURCE_TELEGRAM, TELEGRAM_PHOTO_NAME
from core.utils.keys import resolve_extension
from core.utils.mime import infer_image_mime_type

from .models import ImageSource, Message
from .notifier import (
    MESSAGE_DOWNLOAD_FAILED,
    MESSAGE_FILE_INFO_FAILED,
    MESSAGE_TOO_LARGE,
    ChatNotifier,
    format_storage_failure,
    format_success_message,
)

logger = Logger(UTC=True)


def select_image(message: Message) -> ImageSource | None:
    """Pick the file to ingest from a message.

    Photos arrive as a list of sizes, smallest first; the last one is the
    largest. Images sent as files are accepted when their declared type is
    ``image/*``. Anything else is ignored.
    """
    if message.photo:
        best = message.photo[-1]
        return ImageSource(file_id=best.file_id, name=TELEGRAM_PHOTO_NAME)

    document = message.document
    if document and document.mime_type and document.mime_type.startswith("image/"):
        return ImageSource(file_id=document.file_id, name=document.file_name or "image")

    return None


class TelegramIngestService:
    """Application service turning bot messages into stored images."""

    def __init__(
        self,
        store: KeyValueStore,
        client: TelegramClient,
        notifier: ChatNotifier | None = None,
    ) -> None:
        self.ingest = IngestService(store)
        self.client = client
        self.notifier = notifier or ChatNotifier(client)

    def handle_message(self, message: Message, *, base_url: str) -> IngestResult | None:
        """Ingest the image carried by ``message``, if any.

        Args:
            message: The inbound Telegram message
            base_url: public base URL of the API, used to build the image link

        Returns:
            The ingestion result, or ``None`` when nothing was stored
        """
        source = select_image(message)
        if source is None:
            logger.debug("Ignoring message without an image", extra={"message_id": message.message_id})
            return None

        return self._process(source, message, base_url=base_url)

    def _process(self, source: ImageSource, message: Message, *, base_url: str) -> IngestResult | None:
        chat_id = message.chat.id
        reply_to = message.message_id

        logger.info(
            "Processing Telegram image",
            extra={"chat_id": chat_id, "file_id": source.file_id, "display_name": source.name},
        )

        try:
            file_path = self.client.get_file_path(source.file_id)
        except RemoteFetchError as exc:
            logger.warning("Telegram getFile failed", extra={"error": exc.message})
            self.notifier.notify(chat_id, MESSAGE_FILE_INFO_FAILED, reply_to=reply_to)
            return None

        try:
            downloaded = self.client.download_file(file_path)
            if not downloaded.content:
                raise RemoteFetchError(
                    message="Telegram returned an empty file",
                    details={"file_path": file_path},
                )
        except RemoteFetchError as exc:
            logger.warning("Telegram download failed", extra={"error": exc.message})
            self.notifier.notify(chat_id, MESSAGE_DOWNLOAD_FAILED, reply_to=reply_to)
            return None

        try:
            ensure_within_size_limit(len(downloaded.content))
        except FileTooLargeError as exc:
            logger.warning("Telegram image too large", extra=exc.details)
            self.notifier.notify(chat_id, MESSAGE_TOO_LARGE, reply_to=reply_to)
            return None

        extension = resolve_extension(file_path)
        mime_type = infer_image_mime_type(
            downloaded.content,
            downloaded.content_type,
            DEFAULT_MIME_TYPE,
        )

        try:
            result = self.ingest.ingest(
                file_data=downloaded.content,
                original_name=f"tg_{source.file_id}.{extension}",
                mime_type=mime_type,
                extension_hint=file_path,
                source=SOURCE_TELEGRAM,
            )
        except StorageFailureError as exc:
            self.notifier.notify(chat_id, format_storage_failure(exc.message), reply_to=reply_to)
            return None

        image_url = f"{base_url.rstrip('/')}{result.url}"
        self.notifier.notify(chat_id, format_success_message(image_url), reply_to=reply_to)

        return result
