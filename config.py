"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
"""

import os
import tempfile

from dotenv import load_dotenv

from utils.errors import ConfigurationError

load_dotenv()


# ── Telegram ──────────────────────────────────────────────
TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")

# ── OpenAI Images ─────────────────────────────────────────
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")

IMAGE1_MODEL: str = "gpt-image-1"
DALLE3_MODEL: str = "dall-e-3"
EDIT_MODEL: str = "gpt-image-1"
IMAGE_SIZE: str = "1024x1024"

# ── Progress indicator ────────────────────────────────────
PROGRESS_INTERVAL_SECONDS: float = float(os.getenv("PROGRESS_INTERVAL_SECONDS", "2"))

# ── Photo edit pipeline ───────────────────────────────────
MAX_IMAGE_DIMENSION: int = 1024
JPEG_QUALITY: int = 80
MAX_UPLOAD_BYTES: int = 4 * 1024 * 1024
IMAGE_TEMP_DIR: str = os.getenv("IMAGE_TEMP_DIR", "") or tempfile.gettempdir()

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


def require_secrets() -> tuple[str, str]:
    """
    Return the Telegram token and OpenAI key for one invocation.

    Values are re-read from the environment so a hosting wrapper that
    injects secrets after import is still honoured.

    Raises:
        ConfigurationError: If either secret is missing.
    """
    token = os.getenv("TELEGRAM_BOT_TOKEN", TELEGRAM_BOT_TOKEN)
    api_key = os.getenv("OPENAI_API_KEY", OPENAI_API_KEY)

    missing = [
        name
        for name, value in (("TELEGRAM_BOT_TOKEN", token), ("OPENAI_API_KEY", api_key))
        if not value
    ]
    if missing:
        raise ConfigurationError(
            f"{', '.join(missing)} environment variable is not set"
        )
    return token, api_key
