"""
handlers/webhook_handler.py
---------------------------
Per-invocation webhook contract for a hosting wrapper (e.g. a cloud
function): takes the decoded request body, processes it, and always
acknowledges with "OK" whatever happened inside.
"""

from typing import Any, Optional

from telegram import Bot

from ai.openai_images import ImageGenerator
from config import require_secrets
from services.bot_service import BotService
from utils.errors import ConfigurationError
from utils.logger import get_logger

logger = get_logger(__name__)

ACK = "OK"


async def process_webhook(body: Optional[dict[str, Any]]) -> str:
    """
    Handle one webhook delivery.

    Args:
        body: Decoded JSON of the Telegram update.

    Returns:
        The acknowledgement string returned to the platform.
    """
    if not isinstance(body, dict) or not body.get("message"):
        logger.debug("Update carries no message, acknowledging without a reply.")
        return ACK

    try:
        token, api_key = require_secrets()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e.message}")
        return ACK

    try:
        async with Bot(token=token) as bot:
            service = BotService(bot, ImageGenerator(api_key))
            await service.handle(body)
    except Exception:
        logger.exception("Unexpected error while processing webhook")
    return ACK
