"""
Tiered, cached text recognition for message images.

Every image first goes through the fast local engine. Only when all of them
come back clean and the message carries exactly four images (the shape of a
known split-screenshot scam) is the first image sent to the accurate remote
engine, if one is configured. Engine failures are absorbed here: a failing
scan is a clean scan, so a broken engine can cause a missed scam but never a
false positive or a crash of the caller.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import discord

from ocrguard.datatypes.scan_datatypes import BannedWordMatch, BannedWordSet, ScanResult
from ocrguard.ocr.base import OCREngine
from ocrguard.ocr.scan_cache import ScanCache
from ocrguard.util import media_extractor
from ocrguard.util.logger import get_logger

logger = get_logger("message_analyzer")

ESCALATION_IMAGE_COUNT = 4


class MessageAnalyzer:
    """
    Run OCR engines over image URLs and match the text against banned words.

    Attributes:
        fast_engine: Local engine used on every image.
        remote_engine: Optional accurate engine used for escalation.
        cache: Verdict cache shared by both engines.
    """

    def __init__(
        self,
        banned_words: Iterable[str],
        fast_engine: OCREngine,
        remote_engine: OCREngine | None = None,
        cache: ScanCache | None = None,
        probe_timeout: float = media_extractor.DEFAULT_PROBE_TIMEOUT,
    ) -> None:
        self.banned_words = banned_words if isinstance(banned_words, BannedWordSet) else BannedWordSet(banned_words)
        self.fast_engine = fast_engine
        self.remote_engine = remote_engine
        self.cache = cache if cache is not None else ScanCache()
        self._probe_timeout = probe_timeout

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Initialize both engines. Errors from the fast engine propagate."""
        await self.fast_engine.initialize()
        if self.remote_engine is not None:
            await self.remote_engine.initialize()

    async def shutdown(self) -> None:
        """Shut engines down and drop cached verdicts."""
        try:
            await self.fast_engine.shutdown()
        finally:
            if self.remote_engine is not None:
                await self.remote_engine.shutdown()
            self.cache.clear()

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    async def analyze_message(self, message: discord.Message) -> ScanResult:
        """Extract the message's image URLs and scan them."""
        image_urls = await media_extractor.extract_image_urls(message, self._probe_timeout)
        if not image_urls:
            return ScanResult.clean()

        result = await self.scan(image_urls)
        if result.matched:
            logger.info("[OCR] Banned words %s found in message %s", result.words, message.id)
        else:
            logger.debug("[OCR] No banned words found in message %s", message.id)
        return result

    async def scan(self, image_urls: Sequence[str]) -> ScanResult:
        """
        Scan images in order and return the first matching verdict.

        Args:
            image_urls: Image URLs in message order.

        Returns:
            The first matching ``ScanResult``, the remote engine's verdict on
            the first image when escalation applies, otherwise a clean result.
        """
        for url in image_urls:
            result = await self.scan_with_engine(self.fast_engine, url)
            if result.matched:
                logger.debug("[%s] Match on %s", self.fast_engine.name, url)
                return result

        if self.should_escalate(image_urls):
            first_image = image_urls[0]
            logger.debug("[FALLBACK] Using %s for first image: %s", self.remote_engine.name, first_image)
            return await self.scan_with_engine(self.remote_engine, first_image)

        return ScanResult.clean()

    def should_escalate(self, image_urls: Sequence[str]) -> bool:
        """True when exactly four images are present and a remote engine is configured."""
        return self.remote_engine is not None and len(image_urls) == ESCALATION_IMAGE_COUNT

    async def scan_with_engine(self, engine: OCREngine, image_url: str) -> ScanResult:
        """
        Scan one image with one engine, going through the cache.

        Failures are logged and returned as an uncached clean verdict.
        """
        cached = self.cache.get(engine.name, image_url)
        if cached is not None:
            logger.debug("[OCR] Cache hit for %s:%s (matched=%s)", engine.name, image_url, cached.matched)
            return cached

        try:
            ocr = await engine.recognize(image_url)
        except Exception as exc:
            logger.warning("[%s] Scan failed for %s: %s", engine.name, image_url, exc)
            return ScanResult.clean()

        result = ScanResult.from_matches(
            BannedWordMatch(image_url=image_url, word=word) for word in self.banned_words.find_in(ocr.text)
        )
        self.cache.put(engine.name, image_url, result)
        return result
