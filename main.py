"""
main.py
-------
Local entry point for the image relay bot.

Responsibilities:
    - Validate the required secrets.
    - Configure and start the Telegram bot in polling mode, routing every
      message through the same BotService the webhook entry uses.
"""

from telegram import BotCommand
from telegram.ext import (
    Application,
    MessageHandler,
    filters,
)

from ai.openai_images import ImageGenerator
from config import require_secrets
from handlers.message_handler import BOT_SERVICE_KEY, handle_update
from services.bot_service import BotService
from utils.logger import get_logger

logger = get_logger(__name__)


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    commands = [
        BotCommand("image1", "🎨 Generate an image with gpt-image-1"),
        BotCommand("dalle3", "🖼️ Generate an image with DALL·E 3"),
        BotCommand("time", "🕒 Show the current server time"),
        BotCommand("test", "✅ Check the bot is alive"),
    ]
    await application.bot.set_my_commands(commands)
    logger.info("Bot commands menu registered successfully.")


def build_application(token: str, api_key: str) -> Application:
    """Build the polling application with one catch-all message handler."""
    app = Application.builder().token(token).post_init(set_bot_commands).build()
    app.bot_data[BOT_SERVICE_KEY] = BotService(app.bot, ImageGenerator(api_key))
    app.add_handler(MessageHandler(filters.ALL, handle_update))
    return app


def main() -> None:
    """Initialize and run the bot."""
    token, api_key = require_secrets()

    logger.info("Starting Telegram bot...")
    app = build_application(token, api_key)

    logger.info("🚀 Image relay bot is running! Press Ctrl+C to stop.")
    app.run_polling(drop_pending_updates=True, allowed_updates=["message"])
    logger.info("Image relay bot stopped.")


if __name__ == "__main__":
    main()
