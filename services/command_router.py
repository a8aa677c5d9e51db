"""
services/command_router.py
--------------------------
Classifies an inbound message into a Command.

Routes are an ordered list of (predicate, parser) pairs; the first
predicate that matches wins. Kept free of any Telegram SDK types so the
priority order can be tested on plain messages.
"""

from typing import Callable

from models.command import Command, ParsedCommand
from models.event import InboundMessage

IMAGE1_PREFIX = "/image1"
DALLE3_PREFIX = "/dalle3"
TEST_COMMAND = "/test"
TIME_COMMAND = "/time"

Predicate = Callable[[InboundMessage], bool]
Parser = Callable[[InboundMessage], ParsedCommand]


def _has_photo_and_caption(message: InboundMessage) -> bool:
    return bool(message.photo) and bool(message.caption)


def _starts_with(prefix: str) -> Predicate:
    return lambda message: bool(message.text) and message.text.startswith(prefix)


def _equals(literal: str) -> Predicate:
    return lambda message: message.text == literal


def _prompt_after(prefix: str, command: Command) -> Parser:
    return lambda message: ParsedCommand(command, message.text[len(prefix):].strip())


ROUTES: list[tuple[Predicate, Parser]] = [
    (_has_photo_and_caption, lambda m: ParsedCommand(Command.PHOTO_EDIT, m.caption)),
    (_starts_with(IMAGE1_PREFIX), _prompt_after(IMAGE1_PREFIX, Command.IMAGE1)),
    (_starts_with(DALLE3_PREFIX), _prompt_after(DALLE3_PREFIX, Command.DALLE3)),
    (_equals(TEST_COMMAND), lambda m: ParsedCommand(Command.TEST)),
    (_equals(TIME_COMMAND), lambda m: ParsedCommand(Command.TIME)),
]


def classify(message: InboundMessage) -> ParsedCommand:
    """
    Map a message to the first matching route.

    Args:
        message: The parsed message payload.

    Returns:
        The matching ParsedCommand, or UNRECOGNIZED carrying the raw text.
    """
    for predicate, parser in ROUTES:
        if predicate(message):
            return parser(message)
    return ParsedCommand(Command.UNRECOGNIZED, message.text)
