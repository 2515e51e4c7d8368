"""Common interface for the two OCR engines."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ocrguard.datatypes.scan_datatypes import OCRResult


class OCREngineError(RuntimeError):
    """Raised by an engine that cannot produce text for an image."""


class OCREngine(ABC):
    """
    An engine turns an image URL into recognised text.

    Only two implementations exist: the local :class:`TesseractEngine` used as
    the fast first pass and the remote :class:`RemoteVisionEngine` used for
    escalation. ``name`` is part of the scan cache key, so it must be unique
    per engine.
    """

    name: str = "engine"

    async def initialize(self) -> None:
        """Prepare the engine. Called once at process start."""

    async def shutdown(self) -> None:
        """Release engine resources. Called once at process stop."""

    @abstractmethod
    async def recognize(self, image_url: str) -> OCRResult:
        """Return the text found in the image at ``image_url``.

        Raises:
            Exception: Any failure; the analyzer treats it as a clean image.
        """
