"""
services/progress_indicator.py
------------------------------
Animated status message shown while a slow operation runs.

One handle per operation: start() sends the first frame and launches a
background task that edits the message every ``interval`` seconds;
stop() cancels the task and marks the message complete. Use track() to
get the start/stop pairing for free.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from telegram import Bot

from config import PROGRESS_INTERVAL_SECONDS
from utils.logger import get_logger

logger = get_logger(__name__)

LOADING_ICONS = ["🌑", "🌒", "🌓", "🌔", "🌕", "🌖", "🌗", "🌘"]
DONE_ICON = "✅"


class ProgressHandle:
    """
    Ownership token for one live animated message.

    Running until stop() is called; stop() is effective once, later calls
    are no-ops.
    """

    def __init__(self, bot: Bot, chat_id: int, message_id: int, text: str,
                 interval: float):
        self.bot = bot
        self.chat_id = chat_id
        self.message_id = message_id
        self.text = text
        self.interval = interval
        self.icon_index = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None

    def _launch(self) -> None:
        self._task = asyncio.create_task(self._animate())

    async def _animate(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self.icon_index = (self.icon_index + 1) % len(LOADING_ICONS)
            try:
                await self.bot.edit_message_text(
                    chat_id=self.chat_id,
                    message_id=self.message_id,
                    text=f"{self.text} {LOADING_ICONS[self.icon_index]}",
                )
            except Exception as e:
                logger.warning(f"Error updating progress message: {e}")

    async def stop(self) -> None:
        """Cancel the animation and replace the glyph with a completion mark."""
        task, self._task = self._task, None
        if task is None:
            logger.debug(f"Progress message {self.message_id} already stopped")
            return

        task.cancel()
        caller_cancelled = False
        try:
            await task
        except asyncio.CancelledError:
            # Only the animation's own cancellation is absorbed here.
            current = asyncio.current_task()
            caller_cancelled = current is not None and current.cancelling() > 0

        try:
            await self.bot.edit_message_text(
                chat_id=self.chat_id,
                message_id=self.message_id,
                text=f"{self.text} {DONE_ICON}",
            )
        except Exception as e:
            logger.warning(f"Error finalizing progress message: {e}")

        if caller_cancelled:
            raise asyncio.CancelledError()


class ProgressIndicator:
    """Creates ProgressHandles bound to a bot."""

    def __init__(self, bot: Bot, interval: float = PROGRESS_INTERVAL_SECONDS):
        self.bot = bot
        self.interval = interval

    async def start(self, chat_id: int, text: str) -> ProgressHandle:
        """Send the first frame and start animating it."""
        message = await self.bot.send_message(
            chat_id=chat_id, text=f"{text} {LOADING_ICONS[0]}"
        )
        handle = ProgressHandle(self.bot, chat_id, message.message_id, text,
                                self.interval)
        handle._launch()
        return handle

    @asynccontextmanager
    async def track(self, chat_id: int, text: str) -> AsyncIterator[ProgressHandle]:
        """
        Run the enclosed block under a progress message.

        The handle is stopped on every exit path, including exceptions,
        before control leaves the block.
        """
        handle = await self.start(chat_id, text)
        try:
            yield handle
        finally:
            await handle.stop()
