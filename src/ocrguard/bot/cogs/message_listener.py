"""Message listener Cog for OCRGuard.

Filters incoming messages by channel and author and feeds the rest to the
per-author batching system.
"""

import discord
from discord.ext import commands

from ocrguard.configuration.app_configuration import AppConfig
from ocrguard.datatypes.discord_datatypes import ChannelID, UserID
from ocrguard.moderation.message_batch_manager import MessageBatchManager
from ocrguard.util import discord_utils
from ocrguard.util.logger import get_logger

logger = get_logger("message_listener_cog")


class MessageListenerCog(commands.Cog):
    """Cog responsible for routing new messages into the batch manager."""

    def __init__(self, discord_bot_instance, batch_manager: MessageBatchManager, config: AppConfig):
        """
        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        batch_manager:
            Per-author batching scheduler receiving accepted messages.
        config:
            Application configuration supplying channel and author filters.
        """
        self.bot = discord_bot_instance
        self.batch_manager = batch_manager
        self.config = config
        logger.info("Message listener cog loaded")

    def _is_channel_allowed(self, channel_id: ChannelID) -> bool:
        if self.config.is_whitelist:
            return channel_id in self.config.allowed_channels
        return channel_id not in self.config.disallowed_channels

    def should_process_message(self, message: discord.Message) -> bool:
        """
        Decide whether a message should be queued for scanning.

        Own messages and DMs are ignored, then the channel whitelist or
        blacklist applies. When ``scan_everything`` is off, bot authors and
        members the bot cannot moderate are skipped too.
        """
        if self.bot.user is not None and message.author.id == self.bot.user.id:
            return False

        if message.guild is None:
            return False

        if not self._is_channel_allowed(ChannelID.from_channel(message.channel)):
            logger.debug("Skipping message %s - channel %s filtered", message.id, message.channel.id)
            return False

        if not self.config.scan_everything:
            if message.author.bot:
                logger.debug("Skipping message %s - author is a bot", message.id)
                return False
            if isinstance(message.author, discord.Member) and not discord_utils.can_moderate_member(message.author):
                logger.debug("Skipping message %s - author not moderatable", message.id)
                return False

        return True

    @commands.Cog.listener(name='on_ready')
    async def on_ready(self):
        if self.bot.user:
            logger.info("Bot connected as %s (ID: %s)", self.bot.user, self.bot.user.id)
        else:
            logger.warning("Bot partially connected, but user information not yet available.")

    @commands.Cog.listener(name='on_message')
    async def on_message(self, message: discord.Message):
        """Queue eligible messages with the batch manager."""
        if not self.should_process_message(message):
            return

        try:
            await self.batch_manager.enqueue(UserID.from_user(message.author), message)
        except Exception as e:
            logger.error("Error adding message %s to batch: %s", message.id, e, exc_info=True)


def setup(discord_bot_instance, batch_manager: MessageBatchManager, config: AppConfig):
    """
    Register the MessageListenerCog with the bot.

    Returns
    -------
    MessageListenerCog
        The registered cog.
    """
    cog = MessageListenerCog(discord_bot_instance, batch_manager, config)
    discord_bot_instance.add_cog(cog)
    return cog
