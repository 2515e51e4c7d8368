"""
Carry out the moderation response to a detected scam batch.

For each violation: bump the author's trigger count, delete every message in
the batch, time the author out once they reach the trigger threshold, and
post an audit embed to the log channel.
"""

from __future__ import annotations

import datetime
from typing import List

import discord

from ocrguard.configuration.app_configuration import AppConfig
from ocrguard.datatypes.action_datatypes import ActionReport, ViolationContext
from ocrguard.datatypes.discord_datatypes import ChannelID
from ocrguard.moderation.trigger_counter import TriggerCounter
from ocrguard.ui.action_embed import create_scam_activity_embed
from ocrguard.util import discord_utils
from ocrguard.util.logger import get_logger

logger = get_logger("scam_action_executor")

TIMEOUT_REASON = "OCRGuard: scam image detected"


class ScamActionExecutor:
    """Applies delete / timeout / audit-log actions for violations handed over by the batch manager."""

    def __init__(
        self,
        bot: discord.Bot,
        *,
        should_delete: bool = True,
        should_punish: bool = True,
        timeout_duration: datetime.timedelta = datetime.timedelta(days=7),
        triggers_before_action: int = 1,
        log_channel_id: ChannelID | None = None,
        trigger_counter: TriggerCounter | None = None,
    ) -> None:
        self._bot = bot
        self.should_delete = should_delete
        self.should_punish = should_punish
        self.timeout_duration = min(timeout_duration, discord_utils.MAX_TIMEOUT)
        self.triggers_before_action = max(1, triggers_before_action)
        self.log_channel_id = log_channel_id
        self.trigger_counter = trigger_counter if trigger_counter is not None else TriggerCounter()

    @classmethod
    def from_config(cls, bot: discord.Bot, config: AppConfig) -> "ScamActionExecutor":
        try:
            timeout_duration = discord_utils.parse_duration(config.timeout_duration)
        except ValueError:
            logger.error("[ACTION] Invalid timeout_duration %r; using 7d", config.timeout_duration)
            timeout_duration = datetime.timedelta(days=7)

        return cls(
            bot,
            should_delete=config.should_delete,
            should_punish=config.should_punish,
            timeout_duration=timeout_duration,
            triggers_before_action=config.triggers_before_action,
            log_channel_id=config.log_channel_id,
        )

    async def execute(self, violation: ViolationContext) -> ActionReport:
        """Handle one violation and return what was done."""
        trigger_count = self.trigger_counter.increment(violation.author_id)
        report = ActionReport(trigger_count=trigger_count, batch_size=len(violation.batch))

        if self.should_delete:
            await self._delete_batch(violation.batch, report)

        if self.should_punish:
            report.punish_status = await self._punish(violation.member, trigger_count)

        logger.info(
            "[ACTION] User %s: trigger %d, deleted %d/%d, punished: %s",
            violation.author_id,
            trigger_count,
            report.deleted_count,
            report.batch_size,
            report.punish_status,
        )
        await self._log_action(violation, report)
        return report

    async def _delete_batch(self, messages: tuple[discord.Message, ...], report: ActionReport) -> None:
        deleted: List[bool] = [await discord_utils.safe_delete_message(message) for message in messages]
        report.deleted_count = sum(deleted)
        if report.deleted_count == len(messages):
            report.deleted_status = "Yes"
        elif report.deleted_count:
            report.deleted_status = "Partial"
        else:
            report.deleted_status = "No (Error)"

    async def _punish(self, member: discord.Member | None, trigger_count: int) -> str:
        if member is None or not discord_utils.can_moderate_member(member):
            logger.warning("[ACTION] Cannot punish member %s", getattr(member, "id", None))
            return "No (Cannot Moderate)"

        if trigger_count < self.triggers_before_action:
            return f"Pending ({trigger_count}/{self.triggers_before_action})"

        until = discord.utils.utcnow() + self.timeout_duration
        try:
            await member.timeout(until, reason=TIMEOUT_REASON)
        except discord.HTTPException as exc:
            logger.error("[ACTION] Failed to timeout user %s: %s", member.id, exc)
            return "No (Error)"

        return f"Yes (for {discord_utils.format_duration(int(self.timeout_duration.total_seconds()))})"

    async def _get_log_channel(self) -> discord.TextChannel | discord.Thread | None:
        if self.log_channel_id is None:
            return None

        channel_id = self.log_channel_id.to_int()
        channel = self._bot.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self._bot.fetch_channel(channel_id)
            except discord.HTTPException as exc:
                logger.error("[ACTION] Failed to fetch log channel %s: %s", channel_id, exc)
                return None

        if not isinstance(channel, (discord.TextChannel, discord.Thread)):
            logger.warning("[ACTION] Log channel %s is not a text channel", channel_id)
            return None
        return channel

    async def _log_action(self, violation: ViolationContext, report: ActionReport) -> None:
        channel = await self._get_log_channel()
        if channel is None:
            return

        embed = create_scam_activity_embed(violation.trigger_message, violation.result, report)
        try:
            await channel.send(embed=embed)
        except discord.HTTPException as exc:
            logger.error("[ACTION] Failed to send audit embed: %s", exc)
