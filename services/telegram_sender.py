"""
services/telegram_sender.py
---------------------------
Thin wrapper over the outbound Telegram calls used by the bot,
plus the one standardized path for reporting errors to the user.
"""

from typing import BinaryIO, Optional, Union

from telegram import Bot

from utils.logger import get_logger

logger = get_logger(__name__)

PhotoSource = Union[str, BinaryIO]


def describe_error(error: BaseException) -> str:
    """Prefer a structured ``message`` attribute, fall back to ``str()``."""
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(error)


class TelegramSender:
    """Forwards send operations to the Telegram Bot API."""

    def __init__(self, bot: Bot):
        self.bot = bot

    async def send_message(self, chat_id: int, text: str) -> None:
        await self.bot.send_message(chat_id=chat_id, text=text)

    async def send_photo(
        self, chat_id: int, photo: PhotoSource, caption: Optional[str] = None
    ) -> None:
        """
        Send a photo to a chat.

        Args:
            chat_id: Target chat.
            photo: A remote URL or an open binary stream.
            caption: Optional caption shown under the photo.
        """
        await self.bot.send_photo(chat_id=chat_id, photo=photo, caption=caption)

    async def send_error_message(
        self, chat_id: int, operation: str, error: BaseException
    ) -> None:
        """
        Log ``error`` and tell the user that ``operation`` failed.

        Args:
            chat_id: Target chat.
            operation: Phrase completing "Sorry, I couldn't ...",
                e.g. "generate the image".
            error: The caught exception.
        """
        logger.error(f"Error {operation}: {error!r}")
        await self.send_message(
            chat_id,
            f"❌ Sorry, I couldn't {operation}. Error: {describe_error(error)}",
        )
