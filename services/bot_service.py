"""
services/bot_service.py
-----------------------
Dispatches inbound events to the command handlers.

Responsibilities:
    - Parse the webhook body and ignore events without a message.
    - Classify the message (see command_router) and run its handler.
    - Wrap slow handlers in a progress indicator and a temp file arena.
    - Route every failure through TelegramSender.send_error_message.
"""

import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from telegram import Bot

from ai.openai_images import GeneratedImage, ImageGenerator
from config import DALLE3_MODEL, EDIT_MODEL, IMAGE1_MODEL, IMAGE_SIZE, IMAGE_TEMP_DIR
from models.command import Command, ParsedCommand
from models.event import InboundEvent, InboundMessage
from services.command_router import DALLE3_PREFIX, IMAGE1_PREFIX, classify
from services.image_pipeline import ImagePipeline
from services.progress_indicator import ProgressIndicator
from services.telegram_sender import TelegramSender
from utils.errors import RemoteAPIError
from utils.logger import get_logger
from utils.temp_files import TempFileArena

logger = get_logger(__name__)

TEST_REPLY = "Test OK"
TIME_PREFIX = "Current time: "
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

Handler = Callable[[InboundMessage, ParsedCommand], Awaitable[None]]


class BotService:
    """Routes each inbound event to exactly one command handler."""

    def __init__(
        self,
        bot: Bot,
        generator: ImageGenerator,
        sender: Optional[TelegramSender] = None,
        indicator: Optional[ProgressIndicator] = None,
        pipeline: Optional[ImagePipeline] = None,
        temp_dir: str = IMAGE_TEMP_DIR,
    ):
        self.bot = bot
        self.generator = generator
        self.sender = sender or TelegramSender(bot)
        self.indicator = indicator or ProgressIndicator(bot)
        self.pipeline = pipeline or ImagePipeline(bot, temp_dir=temp_dir)
        self.temp_dir = Path(temp_dir)
        self._handlers: dict[Command, Handler] = {
            Command.PHOTO_EDIT: self._handle_photo_edit,
            Command.IMAGE1: self._handle_image1,
            Command.DALLE3: self._handle_dalle3,
            Command.TEST: self._handle_test,
            Command.TIME: self._handle_time,
            Command.UNRECOGNIZED: self._handle_unrecognized,
        }

    async def handle(self, body: Optional[dict[str, Any]]) -> None:
        """
        Handle one webhook body. Never raises.

        Args:
            body: Decoded JSON of a Telegram update.
        """
        try:
            event = InboundEvent.from_dict(body)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Ignoring malformed update: {e!r}")
            return

        message = event.message
        if message is None:
            logger.debug("Update carries no message, ignoring.")
            return

        parsed = classify(message)
        logger.info(f"Chat {message.chat_id}: dispatching {parsed.command.value}")
        try:
            await self._handlers[parsed.command](message, parsed)
        except Exception as e:
            await self._report(message.chat_id, "handle your message", e)

    # ── Simple replies ───────────────────────────────────

    async def _handle_test(self, message: InboundMessage, parsed: ParsedCommand) -> None:
        await self.sender.send_message(message.chat_id, TEST_REPLY)

    async def _handle_time(self, message: InboundMessage, parsed: ParsedCommand) -> None:
        now = datetime.now().strftime(TIME_FORMAT)
        await self.sender.send_message(message.chat_id, TIME_PREFIX + now)

    async def _handle_unrecognized(self, message: InboundMessage,
                                   parsed: ParsedCommand) -> None:
        text = parsed.argument or "your message"
        await self.sender.send_message(
            message.chat_id, f'⚠️ Sorry, "{text}" is not a recognized command.'
        )

    # ── Generation ───────────────────────────────────────

    async def _handle_image1(self, message: InboundMessage, parsed: ParsedCommand) -> None:
        await self._generate(
            message.chat_id,
            prompt=parsed.argument,
            command=IMAGE1_PREFIX,
            model=IMAGE1_MODEL,
            status=f'🎨 Generating image using image-1 with prompt: "{parsed.argument}"',
            caption=f'Here\'s your image-1 image for: "{parsed.argument}"',
        )

    async def _handle_dalle3(self, message: InboundMessage, parsed: ParsedCommand) -> None:
        await self._generate(
            message.chat_id,
            prompt=parsed.argument,
            command=DALLE3_PREFIX,
            model=DALLE3_MODEL,
            status=f'🖼️ Generating image using dalle-3 with prompt: "{parsed.argument}"',
            caption=f'Here\'s your dalle3 image for: "{parsed.argument}"',
        )

    async def _generate(self, chat_id: int, *, prompt: Optional[str], command: str,
                        model: str, status: str, caption: str) -> None:
        if not prompt:
            await self.sender.send_message(
                chat_id, f"⚠️ Please provide a prompt after {command}"
            )
            return

        with TempFileArena() as arena:
            try:
                async with self.indicator.track(chat_id, status):
                    result = await self.generator.generate(
                        model=model, prompt=prompt, n=1, size=IMAGE_SIZE
                    )
                output = arena.register(self.temp_dir / f"{uuid.uuid4().hex}.png")
                await self._deliver(chat_id, result, caption, output)
            except Exception as e:
                await self._report(chat_id, "generate the image", e)

    async def _handle_photo_edit(self, message: InboundMessage,
                                 parsed: ParsedCommand) -> None:
        chat_id = message.chat_id
        caption = parsed.argument
        file_id = message.largest_photo.file_id

        with TempFileArena() as arena:
            try:
                async with self.indicator.track(
                    chat_id, "📸 Received your photo. Creating a variation..."
                ):
                    image = await self.pipeline.prepare(message.photo, arena)
                    result = await self.generator.edit(
                        image=image, model=EDIT_MODEL, prompt=caption, n=1
                    )
                output = arena.register(self.temp_dir / f"{file_id}_output.png")
                await self._deliver(chat_id, result, f'prompt: "{caption}"', output)
            except Exception as e:
                await self._report(chat_id, "create a variation of your image", e)

    async def _deliver(self, chat_id: int, result: GeneratedImage, caption: str,
                       output: Path) -> None:
        """Send an inline result from ``output`` or forward a URL result."""
        if result.b64_json:
            output.write_bytes(result.decode())
            with output.open("rb") as stream:
                await self.sender.send_photo(chat_id, stream, caption)
        elif result.url:
            await self.sender.send_photo(chat_id, result.url, caption)
        else:
            raise RemoteAPIError("No image data received from OpenAI")

    async def _report(self, chat_id: int, operation: str, error: Exception) -> None:
        try:
            await self.sender.send_error_message(chat_id, operation, error)
        except Exception as send_error:
            logger.error(f"Could not report failure to chat {chat_id}: {send_error!r}")
