"""
handlers/message_handler.py
---------------------------
Polling-mode entry: forwards every message update to the BotService
stored in ``application.bot_data``.
"""

from telegram import Update
from telegram.ext import ContextTypes

from utils.logger import get_logger

logger = get_logger(__name__)

BOT_SERVICE_KEY = "bot_service"


async def handle_update(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Hand the raw update payload to the shared router."""
    bot_service = context.bot_data.get(BOT_SERVICE_KEY)
    if bot_service is None:
        logger.error("BotService not configured; dropping update.")
        return
    await bot_service.handle(update.to_dict())
