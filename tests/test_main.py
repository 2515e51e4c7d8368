from unittest.mock import AsyncMock, Mock, patch

import pytest

from ocrguard import main
from ocrguard.moderation.message_batch_manager import MessageBatchManager


def test_build_intents_enables_content_and_members():
    intents = main.build_intents()
    assert intents.message_content is True
    assert intents.members is True
    assert intents.guilds is True
    assert intents.messages is True


def test_load_environment_requires_token(monkeypatch):
    monkeypatch.delenv("DISCORD_BOT_TOKEN", raising=False)
    with patch("ocrguard.main.load_dotenv"):
        with pytest.raises(SystemExit) as exc:
            main.load_environment()
    assert exc.value.code == 1


def test_load_environment_returns_token(monkeypatch):
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "token")
    with patch("ocrguard.main.load_dotenv"):
        assert main.load_environment() == "token"


def test_attach_moderation_wires_listener():
    bot = Mock()
    analyzer = Mock()
    config = Mock(
        batch_delay_ms=1234,
        should_delete=True,
        should_punish=True,
        timeout_duration="7d",
        triggers_before_action=1,
        log_channel_id=None,
    )

    batch_manager = main.attach_moderation(bot, analyzer, config)

    assert isinstance(batch_manager, MessageBatchManager)
    assert batch_manager._delay_seconds == pytest.approx(1.234)
    bot.add_cog.assert_called_once()


@pytest.mark.asyncio
async def test_shutdown_runtime_stops_everything():
    bot = Mock()
    bot.is_closed.return_value = False
    bot.close = AsyncMock()
    batch_manager = Mock(shutdown=AsyncMock())
    lifecycle = Mock(shutdown=AsyncMock())

    await main.shutdown_runtime(bot, batch_manager, lifecycle)

    batch_manager.shutdown.assert_awaited_once()
    lifecycle.shutdown.assert_awaited_once()
    bot.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_async_main_aborts_when_ocr_unavailable():
    lifecycle = Mock(initialize=AsyncMock(return_value=False), shutdown=AsyncMock())

    with patch("ocrguard.main.load_environment", return_value="token"), patch(
        "ocrguard.main.create_message_analyzer"
    ), patch("ocrguard.main.OCREngineLifecycle", return_value=lifecycle), patch(
        "ocrguard.main.create_bot"
    ) as create_bot:
        assert await main.async_main() == 1

    create_bot.assert_not_called()
    lifecycle.shutdown.assert_awaited_once()


def test_resolve_base_dir_honours_env(monkeypatch, tmp_path):
    monkeypatch.setenv("OCRGUARD_HOME", str(tmp_path))
    assert main.resolve_base_dir() == tmp_path.resolve()


def test_resolve_base_dir_defaults_to_project_root(monkeypatch):
    monkeypatch.delenv("OCRGUARD_HOME", raising=False)
    assert (main.resolve_base_dir() / "src" / "ocrguard").is_dir()
