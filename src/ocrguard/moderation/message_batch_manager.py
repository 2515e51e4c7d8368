"""
MessageBatchManager: per-author debounce of messages before OCR scanning.

A scammer often posts the same scam over several rapid messages. Instead of
scanning each one as it arrives, messages are queued per author and the
queue is scanned once the author has been quiet for ``delay_ms``. The first
message that matches ends the scan and the whole batch is handed to the
violation handler, which deletes all of it.

Usage:
    manager = MessageBatchManager(analyzer.analyze_message, executor.execute, delay_ms=2000)
    await manager.enqueue(UserID.from_user(message.author), message)
    await manager.shutdown()
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Set

import discord

from ocrguard.datatypes.action_datatypes import ViolationContext
from ocrguard.datatypes.discord_datatypes import UserID
from ocrguard.datatypes.scan_datatypes import ScanResult
from ocrguard.util import discord_utils
from ocrguard.util.logger import get_logger
from ocrguard.util.media_extractor import has_scannable_content

logger = get_logger("message_batch_manager")

DEFAULT_DELAY_MS = 2000

# Scans one message, normally MessageAnalyzer.analyze_message
MessageScanner = Callable[[discord.Message], Awaitable[ScanResult]]
# Receives the violation, normally ScamActionExecutor.execute
ViolationHandler = Callable[[ViolationContext], Awaitable[Any]]


class MessageBatchManager:
    """
    Owns the pending batch and the debounce timer of every author.

    At most one timer exists per author: each new message cancels the
    author's pending timer and starts a fresh one. When a timer fires the
    batch is detached before any I/O, so messages arriving meanwhile start a
    new independent batch. Detached batches always run to completion.

    Attributes:
        _batches: Pending messages per author, in arrival order.
        _timers: Pending (not yet fired) timer task per author.
        _in_flight: Timer tasks that fired and are scanning a detached batch.
    """

    def __init__(
        self,
        scanner: MessageScanner,
        on_violation: ViolationHandler,
        delay_ms: int = DEFAULT_DELAY_MS,
    ) -> None:
        self._scanner = scanner
        self._on_violation = on_violation
        self._delay_seconds = max(0, delay_ms) / 1000
        self._batches: Dict[UserID, List[discord.Message]] = {}
        self._timers: Dict[UserID, asyncio.Task[None]] = {}
        self._in_flight: Set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def enqueue(self, author_id: UserID, message: discord.Message) -> None:
        """
        Queue a message for its author and restart the author's timer.

        Args:
            author_id: Author of the message.
            message: The Discord message to queue.
        """
        author_id = UserID(author_id)
        batch = self._batches.setdefault(author_id, [])
        batch.append(message)
        logger.debug("[BATCH] Queued message %s from %s (%d in queue)", message.id, author_id, len(batch))

        previous = self._timers.pop(author_id, None)
        if previous is not None and not previous.done():
            previous.cancel()
        self._timers[author_id] = asyncio.create_task(
            self._batch_timer_task(author_id), name=f"ocrguard-batch-{author_id}"
        )

    def pending_count(self, author_id: UserID) -> int:
        return len(self._batches.get(UserID(author_id), []))

    def has_pending_timer(self, author_id: UserID) -> bool:
        timer = self._timers.get(UserID(author_id))
        return timer is not None and not timer.done()

    async def shutdown(self) -> None:
        """Drop pending batches and wait for detached batches to finish."""
        timers = list(self._timers.values())
        for timer in timers:
            timer.cancel()
        if timers:
            await asyncio.gather(*timers, return_exceptions=True)
        self._timers.clear()
        self._batches.clear()

        if self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)
        logger.info("[BATCH] MessageBatchManager shutdown complete")

    # ------------------------------------------------------------------
    # Timer and batch processing
    # ------------------------------------------------------------------

    def _detach(self, author_id: UserID) -> List[discord.Message]:
        """Remove and return the author's batch and forget its timer."""
        current = asyncio.current_task()
        if self._timers.get(author_id) is current:
            del self._timers[author_id]
        return self._batches.pop(author_id, [])

    async def _batch_timer_task(self, author_id: UserID) -> None:
        await asyncio.sleep(self._delay_seconds)

        # Nothing below may await before the batch is detached.
        messages = self._detach(author_id)
        if not messages:
            return

        current = asyncio.current_task()
        if current is not None:
            self._in_flight.add(current)
        try:
            await self._process_batch(author_id, messages)
        except Exception:
            logger.exception("[BATCH] Exception while processing batch for %s", author_id)
        finally:
            if current is not None:
                self._in_flight.discard(current)

    async def _process_batch(self, author_id: UserID, messages: List[discord.Message]) -> ViolationContext | None:
        """
        Scan a detached batch in arrival order, stopping at the first match.

        Returns:
            The violation handed to the handler, or None for a clean batch.
        """
        logger.debug("[BATCH] Processing %d message(s) for %s", len(messages), author_id)

        for message in messages:
            if not has_scannable_content(message):
                continue

            try:
                member = await discord_utils.resolve_member(message)
            except Exception as exc:
                logger.warning("[BATCH] Member lookup failed for message %s: %s", message.id, exc)
                member = None

            try:
                result = await self._scanner(message)
            except Exception:
                logger.exception("[BATCH] Scanner failed for message %s", message.id)
                continue

            if not result.matched:
                continue

            violation = ViolationContext(
                author_id=author_id,
                trigger_message=message,
                batch=tuple(messages),
                result=result,
                member=member,
            )
            logger.info(
                "[BATCH] Scam detected in message %s from %s (batch of %d)",
                message.id,
                author_id,
                len(messages),
            )
            try:
                await self._on_violation(violation)
            except Exception:
                logger.exception("[BATCH] Violation handler failed for message %s", message.id)
            return violation

        logger.debug("[BATCH] Batch for %s is clean", author_id)
        return None
