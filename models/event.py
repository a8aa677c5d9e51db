"""
models/event.py
---------------
Domain model for inbound webhook events.
Only the fields the router looks at are kept.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class PhotoSize:
    """
    One size variant of an uploaded photo.

    Attributes:
        file_id: Remote identifier used to resolve and download the file.
        file_unique_id: Stable id across bots (may be absent).
        width: Pixel width reported by Telegram.
        height: Pixel height reported by Telegram.
        file_size: Size in bytes reported by Telegram.
    """
    file_id: str
    file_unique_id: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    file_size: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PhotoSize":
        return cls(
            file_id=data["file_id"],
            file_unique_id=data.get("file_unique_id"),
            width=data.get("width"),
            height=data.get("height"),
            file_size=data.get("file_size"),
        )


@dataclass(frozen=True)
class InboundMessage:
    """
    The message payload of an event.

    Attributes:
        chat_id: Telegram chat the reply goes to.
        text: Message text, if any.
        photo: Size variants ordered smallest to largest. Never an empty list.
        caption: Caption attached to a photo, if any.
    """
    chat_id: int
    text: Optional[str] = None
    photo: Optional[list[PhotoSize]] = None
    caption: Optional[str] = None

    @property
    def largest_photo(self) -> Optional[PhotoSize]:
        """The last (largest) size variant, or None for text messages."""
        return self.photo[-1] if self.photo else None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InboundMessage":
        photos = [PhotoSize.from_dict(p) for p in data.get("photo") or []]
        return cls(
            chat_id=int(data["chat"]["id"]),
            text=data.get("text"),
            photo=photos or None,
            caption=data.get("caption"),
        )


@dataclass(frozen=True)
class InboundEvent:
    """A single webhook delivery. ``message`` is None for non-message updates."""
    message: Optional[InboundMessage] = None

    @classmethod
    def from_dict(cls, body: Optional[dict[str, Any]]) -> "InboundEvent":
        body = body or {}
        payload = body.get("message")
        message = InboundMessage.from_dict(payload) if payload else None
        return cls(message=message)
