"""
Data structures produced and consumed by the recognition pipeline.

``OCRResult`` is what an engine returns for one image, ``ScanResult`` is the
pipeline's verdict for one or more images, and ``BannedWordSet`` holds the
substrings a verdict is computed against.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Tuple


@dataclass(frozen=True, slots=True)
class OCRResult:
    """Text recognised in a single image.

    Attributes:
        text: Raw recognised text.
        confidence: Engine-specific confidence (0-100), when the engine reports one.
    """
    text: str
    confidence: float | None = None


@dataclass(frozen=True, slots=True)
class BannedWordMatch:
    """A banned word found in the text of a specific image."""
    image_url: str
    word: str


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Verdict of scanning one or more images.

    Attributes:
        matched: True if any banned word was found.
        matches: Every (image, word) pair found, in banned word order.
    """
    matched: bool
    matches: Tuple[BannedWordMatch, ...] = field(default_factory=tuple)

    @classmethod
    def clean(cls) -> "ScanResult":
        return cls(matched=False)

    @classmethod
    def from_matches(cls, matches: Iterable[BannedWordMatch]) -> "ScanResult":
        found = tuple(matches)
        return cls(matched=bool(found), matches=found)

    @property
    def words(self) -> List[str]:
        """Unique matched words in first-seen order."""
        return list(dict.fromkeys(match.word for match in self.matches))

    @property
    def image_urls(self) -> List[str]:
        """Unique image URLs that produced a match, in first-seen order."""
        return list(dict.fromkeys(match.image_url for match in self.matches))


class BannedWordSet:
    """Immutable, case-insensitive collection of banned substrings.

    Words are lower-cased and stripped once at construction; blanks and
    duplicates are dropped while the configured order is kept.
    """

    __slots__ = ("_words",)

    def __init__(self, words: Iterable[str]) -> None:
        cleaned = (str(word).strip().lower() for word in words)
        self._words: Tuple[str, ...] = tuple(dict.fromkeys(word for word in cleaned if word))

    def find_in(self, text: str) -> List[str]:
        """Return every banned word contained in ``text`` (case-insensitive)."""
        haystack = text.lower()
        return [word for word in self._words if word in haystack]

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and word.strip().lower() in self._words

    def __repr__(self) -> str:
        return f"BannedWordSet({list(self._words)!r})"
