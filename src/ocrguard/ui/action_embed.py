"""
Embed creation for the audit log channel.
"""

import datetime

import discord

from ocrguard.datatypes.action_datatypes import ActionReport
from ocrguard.datatypes.scan_datatypes import ScanResult

EMBED_TITLE = "Detected Mass OCR Scam Activity"
MAX_DESCRIPTION_LENGTH = 4096


def create_scam_activity_embed(message: discord.Message, result: ScanResult, report: ActionReport) -> discord.Embed:
    """
    Build the audit embed for a handled violation.

    Args:
        message: The message whose images matched.
        result: Scan verdict with the matched words and image URLs.
        report: What the executor did about it.

    Returns:
        discord.Embed: Red embed listing words, URLs, and the action summary.
    """
    author = message.author
    description = (
        f"Triggered OCR with words:\n{', '.join(result.words)}\n\n"
        f"**URLs:**\n" + "\n".join(result.image_urls)
    )

    embed = discord.Embed(
        title=EMBED_TITLE,
        description=description[:MAX_DESCRIPTION_LENGTH],
        color=discord.Color.red(),
        timestamp=datetime.datetime.now(datetime.timezone.utc),
    )
    embed.set_author(name=f"{author} ({author.id})", icon_url=author.display_avatar.url)

    embed.add_field(name="User", value=author.mention, inline=True)
    embed.add_field(name="Channel", value=getattr(message.channel, "mention", str(message.channel)), inline=True)
    embed.add_field(name="Messages in Batch", value=str(report.batch_size), inline=True)
    embed.add_field(name="Deleted Messages", value=f"{report.deleted_count} ({report.deleted_status})", inline=True)
    embed.add_field(name="Punished", value=report.punish_status, inline=True)
    embed.add_field(name="Times Triggered", value=str(report.trigger_count), inline=True)
    return embed
