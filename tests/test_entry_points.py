"""Tests for the webhook contract and the polling handler."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

import config
from handlers import webhook_handler
from handlers.message_handler import BOT_SERVICE_KEY, handle_update


class _FakeBotContext:
    instances: list["_FakeBotContext"] = []

    def __init__(self, token):
        self.token = token
        _FakeBotContext.instances.append(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


@pytest.fixture
def secrets(monkeypatch):
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123456:test-token")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    _FakeBotContext.instances = []
    monkeypatch.setattr(webhook_handler, "Bot", _FakeBotContext)
    monkeypatch.setattr(webhook_handler, "ImageGenerator", MagicMock())


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["TELEGRAM_BOT_TOKEN", "OPENAI_API_KEY"])
async def test_missing_secret_still_acknowledges(monkeypatch, secrets, missing):
    monkeypatch.delenv(missing)
    monkeypatch.setattr(config, missing, "")
    bot_service = MagicMock()
    monkeypatch.setattr(webhook_handler, "BotService", bot_service)

    assert await webhook_handler.process_webhook({"message": {"chat": {"id": 1}, "text": "/test"}}) == "OK"
    assert _FakeBotContext.instances == []
    bot_service.assert_not_called()


def test_require_secrets_names_missing_variables(monkeypatch):
    monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setattr(config, "TELEGRAM_BOT_TOKEN", "")
    monkeypatch.setattr(config, "OPENAI_API_KEY", "")

    with pytest.raises(config.ConfigurationError, match="TELEGRAM_BOT_TOKEN, OPENAI_API_KEY"):
        config.require_secrets()


@pytest.mark.asyncio
async def test_webhook_hands_body_to_bot_service(monkeypatch, secrets):
    service = SimpleNamespace(handle=AsyncMock())
    monkeypatch.setattr(webhook_handler, "BotService", MagicMock(return_value=service))
    body = {"message": {"chat": {"id": 1}, "text": "/image1"}}

    assert await webhook_handler.process_webhook(body) == "OK"

    service.handle.assert_awaited_once_with(body)
    assert _FakeBotContext.instances[0].token == "123456:test-token"


@pytest.mark.asyncio
async def test_webhook_acknowledges_unexpected_fault(monkeypatch, secrets):
    service = SimpleNamespace(handle=AsyncMock(side_effect=RuntimeError("boom")))
    monkeypatch.setattr(webhook_handler, "BotService", MagicMock(return_value=service))
    body = {"message": {"chat": {"id": 1}, "text": "/test"}}

    assert await webhook_handler.process_webhook(body) == "OK"
    service.handle.assert_awaited_once_with(body)


@pytest.mark.asyncio
async def test_polling_handler_forwards_update_payload():
    service = SimpleNamespace(handle=AsyncMock())
    payload = {"update_id": 1, "message": {"chat": {"id": 3}, "text": "/time"}}
    update = SimpleNamespace(to_dict=lambda: payload)
    context = SimpleNamespace(bot_data={BOT_SERVICE_KEY: service})

    await handle_update(update, context)

    service.handle.assert_awaited_once_with(payload)


@pytest.mark.asyncio
async def test_polling_handler_without_service_drops_update():
    update = SimpleNamespace(to_dict=MagicMock())

    await handle_update(update, SimpleNamespace(bot_data={}))

    update.to_dict.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, None, {"update_id": 1}, {"update_id": 2, "edited_message": {}}])
async def test_webhook_without_message_never_builds_a_bot(monkeypatch, secrets, body):
    bot_service = MagicMock()
    monkeypatch.setattr(webhook_handler, "BotService", bot_service)

    assert await webhook_handler.process_webhook(body) == "OK"

    assert _FakeBotContext.instances == []
    bot_service.assert_not_called()
