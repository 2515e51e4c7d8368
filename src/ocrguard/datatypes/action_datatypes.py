"""
Data handed from the batch manager to the action executor, and the report it produces.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import discord

from ocrguard.datatypes.discord_datatypes import UserID
from ocrguard.datatypes.scan_datatypes import ScanResult


@dataclass(frozen=True, slots=True)
class ViolationContext:
    """A detected scam within one author's batch.

    Attributes:
        author_id: Author whose batch matched.
        trigger_message: The first message in the batch whose images matched.
        batch: Every message of the detached batch, in arrival order.
        result: Scan verdict for ``trigger_message``.
        member: Resolved guild member, or None when it could not be fetched.
    """
    author_id: UserID
    trigger_message: discord.Message
    batch: Tuple[discord.Message, ...]
    result: ScanResult
    member: discord.Member | None = None


@dataclass(slots=True)
class ActionReport:
    """Outcome of handling one violation, also rendered into the audit embed."""
    trigger_count: int
    batch_size: int
    deleted_count: int = 0
    deleted_status: str = "No (Config)"
    punish_status: str = "No (Config)"
