"""Shared fakes for the Telegram bot API."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest


class FakeBot:
    """Records outbound Bot API calls in order."""

    def __init__(self):
        self.calls: list[tuple[str, dict]] = []
        self.send_message = AsyncMock(side_effect=self._record("send_message"))
        self.edit_message_text = AsyncMock(side_effect=self._record("edit_message_text"))
        self.send_photo = AsyncMock(side_effect=self._record("send_photo"))
        self.get_file = AsyncMock()

    def _record(self, name: str):
        async def _call(*args, **kwargs):
            self.calls.append((name, kwargs))
            return SimpleNamespace(message_id=4242)

        return _call

    def texts(self, name: str) -> list[str]:
        return [kwargs["text"] for call, kwargs in self.calls if call == name]


@pytest.fixture
def fake_bot() -> FakeBot:
    return FakeBot()
