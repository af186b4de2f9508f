"""Minimal Telegram Bot API client (getFile, file download, sendMessage, webhook setup)."""

import os
from typing import Any

from aws_lambda_powertools import Logger
from pydantic import BaseModel
import requests

from core.models.errors import RemoteFetchError
from core.utils.constants import (
    ENV_TELEGRAM_API_BASE_URL,
    TELEGRAM_ALLOWED_UPDATES,
    TELEGRAM_API_BASE_URL,
    TELEGRAM_REQUEST_TIMEOUT,
)

logger = Logger(UTC=True)


class DownloadedFile(BaseModel):
    """Bytes fetched from the Telegram file endpoint."""

    content: bytes
    content_type: str | None = None


class TelegramClient:
    """Talks to the Bot API on behalf of one bot token.

    Every failure is raised as RemoteFetchError with the bot token
    scrubbed from the message.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str | None = None,
        session: requests.Session | None = None,
        timeout: float = TELEGRAM_REQUEST_TIMEOUT,
    ) -> None:
        if not token:
            raise ValueError("Telegram bot token must not be empty")

        self._token = token
        self._base_url = (
            base_url or os.getenv(ENV_TELEGRAM_API_BASE_URL) or TELEGRAM_API_BASE_URL
        ).rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout

    def _redact(self, text: str) -> str:
        return text.replace(self._token, "<token>")

    def _method_url(self, method: str) -> str:
        return f"{self._base_url}/bot{self._token}/{method}"

    def file_url(self, file_path: str) -> str:
        """Download URL for a file path returned by getFile."""
        return f"{self._base_url}/file/bot{self._token}/{file_path.lstrip('/')}"

    def _call(self, method: str, *, params: dict[str, Any] | None = None, payload: dict[str, Any] | None = None) -> Any:
        """Invoke a Bot API method and return its ``result``."""
        try:
            if payload is not None:
                response = self._session.post(
                    self._method_url(method),
                    json=payload,
                    timeout=self._timeout,
                )
            else:
                response = self._session.get(
                    self._method_url(method),
                    params=params,
                    timeout=self._timeout,
                )
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise RemoteFetchError(
                message=self._redact(f"Telegram {method} request failed: {exc}"),
                details={"method": method},
            ) from exc

        if not isinstance(body, dict) or not body.get("ok"):
            description = body.get("description") if isinstance(body, dict) else None
            raise RemoteFetchError(
                message=f"Telegram {method} returned an error: {description or 'unknown error'}",
                details={"method": method, "status": response.status_code},
            )

        return body.get("result")

    def get_file_path(self, file_id: str) -> str:
        """Resolve a file identifier to its downloadable path."""
        result = self._call("getFile", params={"file_id": file_id})
        file_path = result.get("file_path") if isinstance(result, dict) else None

        if not file_path:
            raise RemoteFetchError(
                message="Telegram getFile returned no file path",
                details={"file_id": file_id},
            )

        return str(file_path)

    def download_file(self, file_path: str) -> DownloadedFile:
        """Fetch the bytes of a file resolved through getFile."""
        try:
            response = self._session.get(self.file_url(file_path), timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise RemoteFetchError(
                message=self._redact(f"Telegram file download failed: {exc}"),
                details={"file_path": file_path},
            ) from exc

        return DownloadedFile(
            content=response.content,
            content_type=response.headers.get("Content-Type"),
        )

    def send_message(
        self,
        chat_id: int | str,
        text: str,
        *,
        reply_to_message_id: int | None = None,
        parse_mode: str = "Markdown",
    ) -> None:
        """Send a text message to a chat."""
        payload: dict[str, Any] = {
            "chat_id": chat_id,
            "text": text,
            "parse_mode": parse_mode,
            "disable_web_page_preview": True,
        }
        if reply_to_message_id is not None:
            payload["reply_to_message_id"] = reply_to_message_id

        self._call("sendMessage", payload=payload)
        logger.debug("Telegram message sent", extra={"chat_id": chat_id})

    def set_webhook(self, url: str, *, secret_token: str | None = None) -> None:
        """Point the bot's updates at ``url``, optionally with a shared secret."""
        payload: dict[str, Any] = {
            "url": url,
            "allowed_updates": list(TELEGRAM_ALLOWED_UPDATES),
        }
        if secret_token:
            payload["secret_token"] = secret_token

        self._call("setWebhook", payload=payload)
        logger.info("Telegram webhook registered", extra={"url": url})

    def delete_webhook(self) -> None:
        self._call("deleteWebhook", payload={})
        logger.info("Telegram webhook removed")
