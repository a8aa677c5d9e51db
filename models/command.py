"""
models/command.py
-----------------
Commands recognised by the bot. Derived from each message, never stored.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Command(str, Enum):
    """Every branch the router can take."""
    PHOTO_EDIT = "photo_edit"
    IMAGE1 = "image1"
    DALLE3 = "dalle3"
    TEST = "test"
    TIME = "time"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class ParsedCommand:
    """
    A classified message.

    Attributes:
        command: Which handler the message goes to.
        argument: Trimmed prompt for prefix commands, the caption for photo
            edits, the original text for unrecognized input.
    """
    command: Command
    argument: Optional[str] = None
