"""Per-engine cache of scan verdicts keyed by normalised image URL."""

from __future__ import annotations

from typing import Dict, Tuple

from ocrguard.datatypes.image_datatypes import ImageURL
from ocrguard.datatypes.scan_datatypes import ScanResult

MAX_CACHE_ENTRIES = 1000

CacheKey = Tuple[str, str]


class ScanCache:
    """
    Maps ``(engine name, normalised image URL)`` to the verdict for that image.

    Clean verdicts are cached as well as matches. There is no TTL and no LRU:
    when an insert would find the cache at ``max_entries`` it is cleared
    entirely first. A clear can only cause a re-scan, never a wrong verdict.
    """

    def __init__(self, max_entries: int = MAX_CACHE_ENTRIES) -> None:
        self._max_entries = max_entries
        self._entries: Dict[CacheKey, ScanResult] = {}

    @staticmethod
    def make_key(engine_name: str, image_url: str | ImageURL) -> CacheKey:
        return engine_name, ImageURL(image_url).normalized()

    def get(self, engine_name: str, image_url: str | ImageURL) -> ScanResult | None:
        return self._entries.get(self.make_key(engine_name, image_url))

    def put(self, engine_name: str, image_url: str | ImageURL, result: ScanResult) -> None:
        if len(self._entries) >= self._max_entries:
            self._entries.clear()
        self._entries[self.make_key(engine_name, image_url)] = result

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
