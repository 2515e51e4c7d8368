"""
discord_utils.py
================

Low-level Discord helpers for OCRGuard: member resolution, permission checks,
message deletion, and duration parsing/formatting. Nothing here keeps state.
"""

import datetime
import re

import discord

from ocrguard.util.logger import get_logger

logger = get_logger("discord_utils")

# Discord refuses timeouts longer than 28 days
MAX_TIMEOUT = datetime.timedelta(days=28)

_DURATION_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h|d|w)?\s*$", re.IGNORECASE)
_DURATION_UNITS = {
    "ms": datetime.timedelta(milliseconds=1),
    "s": datetime.timedelta(seconds=1),
    "m": datetime.timedelta(minutes=1),
    "h": datetime.timedelta(hours=1),
    "d": datetime.timedelta(days=1),
    "w": datetime.timedelta(weeks=1),
}


def parse_duration(value: str) -> datetime.timedelta:
    """
    Parse a short duration string such as ``30s``, ``10m``, ``12h``, ``7d`` or ``1w``.

    A bare number is read as milliseconds.

    Raises:
        ValueError: If the string is not a valid duration.
    """
    match = _DURATION_PATTERN.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return float(amount) * _DURATION_UNITS[(unit or "ms").lower()]


def format_duration(seconds: int) -> str:
    """
    Convert a duration in seconds to a human-readable string.

    Args:
        seconds (int): Duration in seconds.

    Returns:
        str: Human-readable duration string.
    """
    if seconds < 60:
        return f"{seconds} secs"
    elif seconds < 3600:
        mins = seconds // 60
        return f"{mins} mins"
    elif seconds < 86400:
        hours = seconds // 3600
        return f"{hours} hour{'s' if hours != 1 else ''}"
    else:
        days = seconds // 86400
        return f"{days} day{'s' if days != 1 else ''}"


async def resolve_member(message: discord.Message) -> discord.Member | None:
    """
    Return the guild member behind a message's author, fetching it if needed.

    Fetch failures are logged and yield None so callers can continue with
    reduced context.
    """
    if isinstance(message.author, discord.Member):
        return message.author

    guild = message.guild
    if guild is None:
        return None

    member = guild.get_member(message.author.id)
    if member is not None:
        return member

    try:
        return await guild.fetch_member(message.author.id)
    except discord.HTTPException as exc:
        logger.debug("Failed to fetch member %s: %s", message.author.id, exc)
    except Exception as exc:
        logger.warning("Error fetching member %s: %s", message.author.id, exc)
    return None


def can_moderate_member(member: discord.Member) -> bool:
    """
    Check whether the bot is able to time out ``member``.

    Requires the bot to hold ``moderate_members`` and rank above the member;
    the guild owner and administrators can never be timed out.
    """
    guild = member.guild
    me = getattr(guild, "me", None)
    if me is None or member.id == me.id:
        return False
    if member.id == guild.owner_id:
        return False
    if member.guild_permissions.administrator:
        return False
    if not me.guild_permissions.moderate_members:
        return False
    return member.top_role < me.top_role


async def safe_delete_message(message: discord.Message) -> bool:
    """
    Attempt to delete a Discord message, suppressing recoverable errors.

    Args:
        message (discord.Message): The message to delete.

    Returns:
        bool: True if deletion succeeded, False otherwise.
    """
    try:
        await message.delete()
        return True
    except discord.NotFound:
        return False
    except discord.Forbidden:
        logger.warning("No permission to delete message %s", message.id)
    except Exception as exc:
        logger.error("Error deleting message %s: %s", message.id, exc)
    return False
