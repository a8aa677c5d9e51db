"""
utils/errors.py
---------------
Error taxonomy shared by the pipeline, the generation client and the
entry points. Every error carries a user-presentable ``message``.
"""


class BotError(Exception):
    """Base class for failures that end up in a user-visible error reply."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(BotError):
    """A required secret is missing. Fatal for the current invocation."""


class ResolutionError(BotError):
    """Telegram returned no downloadable path for a file id."""


class DownloadError(BotError):
    """The remote file could not be fetched."""


class PayloadTooLargeError(BotError):
    """The prepared image exceeds the upload ceiling."""


class RemoteAPIError(BotError):
    """The generation API returned no data or a malformed response."""
