import datetime
from unittest.mock import AsyncMock, MagicMock, Mock, patch

import discord
import pytest

from ocrguard.datatypes.action_datatypes import ViolationContext
from ocrguard.datatypes.discord_datatypes import ChannelID, UserID
from ocrguard.datatypes.scan_datatypes import BannedWordMatch, ScanResult
from ocrguard.moderation.scam_action_executor import TIMEOUT_REASON, ScamActionExecutor
from ocrguard.util.discord_utils import MAX_TIMEOUT


def make_message(message_id: int) -> Mock:
    message = Mock()
    message.id = message_id
    message.delete = AsyncMock()
    message.author.id = 1001
    message.author.mention = "<@1001>"
    message.author.display_avatar.url = "https://cdn.discordapp.com/avatars/1001/a.png"
    message.channel.mention = "<#55>"
    return message


def make_violation(member=None, count: int = 2) -> ViolationContext:
    batch = tuple(make_message(i) for i in range(count))
    result = ScanResult.from_matches([BannedWordMatch("https://e.com/a.png", "free gift")])
    return ViolationContext(
        author_id=UserID(1001),
        trigger_message=batch[0],
        batch=batch,
        result=result,
        member=member,
    )


def make_member() -> Mock:
    member = Mock()
    member.id = 1001
    member.timeout = AsyncMock()
    return member


def http_error(status: int = 500) -> discord.HTTPException:
    return discord.HTTPException(Mock(status=status, reason="error"), "failed")


@pytest.fixture
def moderatable():
    with patch("ocrguard.util.discord_utils.can_moderate_member", return_value=True) as check:
        yield check


@pytest.mark.asyncio
async def test_execute_deletes_batch_and_times_out(moderatable):
    member = make_member()
    violation = make_violation(member, count=3)
    executor = ScamActionExecutor(Mock(), timeout_duration=datetime.timedelta(days=7))

    report = await executor.execute(violation)

    for message in violation.batch:
        message.delete.assert_awaited_once()
    assert report.deleted_count == 3
    assert report.deleted_status == "Yes"
    assert report.trigger_count == 1
    assert report.batch_size == 3
    assert report.punish_status == "Yes (for 7 days)"
    until = member.timeout.await_args.args[0]
    assert until - discord.utils.utcnow() > datetime.timedelta(days=6)
    assert member.timeout.await_args.kwargs["reason"] == TIMEOUT_REASON


@pytest.mark.asyncio
async def test_threshold_delays_timeout(moderatable):
    member = make_member()
    executor = ScamActionExecutor(Mock(), triggers_before_action=2)

    first = await executor.execute(make_violation(member))
    assert first.punish_status == "Pending (1/2)"
    member.timeout.assert_not_awaited()

    second = await executor.execute(make_violation(member))
    assert second.trigger_count == 2
    assert second.punish_status.startswith("Yes")
    member.timeout.assert_awaited_once()


@pytest.mark.asyncio
async def test_config_can_disable_delete_and_punish(moderatable):
    member = make_member()
    violation = make_violation(member)
    executor = ScamActionExecutor(Mock(), should_delete=False, should_punish=False)

    report = await executor.execute(violation)

    for message in violation.batch:
        message.delete.assert_not_awaited()
    member.timeout.assert_not_awaited()
    assert report.deleted_status == "No (Config)"
    assert report.punish_status == "No (Config)"
    assert report.trigger_count == 1


@pytest.mark.asyncio
async def test_partial_delete_is_reported(moderatable):
    executor = ScamActionExecutor(Mock(), should_punish=False)

    with patch("ocrguard.util.discord_utils.safe_delete_message", new=AsyncMock(side_effect=[True, False])):
        report = await executor.execute(make_violation(count=2))

    assert report.deleted_count == 1
    assert report.deleted_status == "Partial"


@pytest.mark.asyncio
async def test_failed_delete_is_reported():
    executor = ScamActionExecutor(Mock(), should_punish=False)

    with patch("ocrguard.util.discord_utils.safe_delete_message", new=AsyncMock(return_value=False)):
        report = await executor.execute(make_violation(count=2))

    assert report.deleted_status == "No (Error)"


@pytest.mark.asyncio
async def test_missing_member_cannot_be_punished():
    executor = ScamActionExecutor(Mock())
    report = await executor.execute(make_violation(member=None))
    assert report.punish_status == "No (Cannot Moderate)"


@pytest.mark.asyncio
async def test_unmoderatable_member_is_not_timed_out():
    member = make_member()
    executor = ScamActionExecutor(Mock())

    with patch("ocrguard.util.discord_utils.can_moderate_member", return_value=False):
        report = await executor.execute(make_violation(member))

    member.timeout.assert_not_awaited()
    assert report.punish_status == "No (Cannot Moderate)"


@pytest.mark.asyncio
async def test_timeout_failure_is_reported(moderatable):
    member = make_member()
    member.timeout.side_effect = http_error(403)
    executor = ScamActionExecutor(Mock())

    report = await executor.execute(make_violation(member))

    assert report.punish_status == "No (Error)"


@pytest.mark.asyncio
async def test_audit_embed_sent_to_log_channel(moderatable):
    channel = MagicMock(spec=discord.TextChannel)
    channel.send = AsyncMock()
    bot = Mock()
    bot.get_channel.return_value = channel
    executor = ScamActionExecutor(bot, log_channel_id=ChannelID(777))

    await executor.execute(make_violation(make_member()))

    bot.get_channel.assert_called_once_with(777)
    embed = channel.send.await_args.kwargs["embed"]
    assert embed.title == "Detected Mass OCR Scam Activity"


@pytest.mark.asyncio
async def test_log_channel_fetched_when_not_cached(moderatable):
    channel = MagicMock(spec=discord.Thread)
    channel.send = AsyncMock()
    bot = Mock()
    bot.get_channel.return_value = None
    bot.fetch_channel = AsyncMock(return_value=channel)
    executor = ScamActionExecutor(bot, log_channel_id=ChannelID(777))

    await executor.execute(make_violation(make_member()))

    bot.fetch_channel.assert_awaited_once_with(777)
    channel.send.assert_awaited_once()


@pytest.mark.asyncio
async def test_log_channel_errors_do_not_raise(moderatable):
    bot = Mock()
    bot.get_channel.return_value = None
    bot.fetch_channel = AsyncMock(side_effect=http_error(404))
    executor = ScamActionExecutor(bot, log_channel_id=ChannelID(777))

    report = await executor.execute(make_violation(make_member()))

    assert report.deleted_status == "Yes"


@pytest.mark.asyncio
async def test_no_log_channel_configured(moderatable):
    bot = Mock()
    executor = ScamActionExecutor(bot)
    await executor.execute(make_violation(make_member()))
    bot.get_channel.assert_not_called()


def test_timeout_is_clamped_to_discord_maximum():
    executor = ScamActionExecutor(Mock(), timeout_duration=datetime.timedelta(days=60))
    assert executor.timeout_duration == MAX_TIMEOUT


def test_from_config_parses_duration():
    config = Mock(
        should_delete=True,
        should_punish=False,
        timeout_duration="12h",
        triggers_before_action=3,
        log_channel_id=ChannelID(9),
    )
    executor = ScamActionExecutor.from_config(Mock(), config)

    assert executor.timeout_duration == datetime.timedelta(hours=12)
    assert executor.should_punish is False
    assert executor.triggers_before_action == 3
    assert executor.log_channel_id == 9


def test_from_config_invalid_duration_falls_back():
    config = Mock(
        should_delete=True,
        should_punish=True,
        timeout_duration="forever",
        triggers_before_action=1,
        log_channel_id=None,
    )
    executor = ScamActionExecutor.from_config(Mock(), config)
    assert executor.timeout_duration == datetime.timedelta(days=7)
