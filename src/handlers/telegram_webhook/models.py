"""Pydantic models for the subset of Telegram updates the webhook reads."""

from pydantic import BaseModel, ConfigDict, Field


class TelegramModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class PhotoSize(TelegramModel):
    file_id: str
    file_unique_id: str | None = None
    width: int | None = None
    height: int | None = None
    file_size: int | None = None


class Document(TelegramModel):
    file_id: str
    file_name: str | None = None
    mime_type: str | None = None
    file_size: int | None = None


class Chat(TelegramModel):
    id: int


class Message(TelegramModel):
    message_id: int
    chat: Chat
    photo: list[PhotoSize] = Field(default_factory=list)
    document: Document | None = None


class TelegramUpdate(TelegramModel):
    """Inbound webhook payload; only ``message`` updates are acted on."""

    update_id: int
    message: Message | None = None


class ImageSource(BaseModel):
    """The Telegram file chosen for ingestion from a message."""

    file_id: str
    name: str
