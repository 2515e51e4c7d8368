"""Fast local OCR engine backed by the tesseract binary through pytesseract."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Tuple

import pytesseract
from PIL import Image

from ocrguard.datatypes.scan_datatypes import OCRResult
from ocrguard.ocr.base import OCREngine, OCREngineError
from ocrguard.util.image_utils import decode_image, download_image
from ocrguard.util.logger import get_logger

logger = get_logger("tesseract_engine")


def _text_and_confidence(data: Dict[str, List[Any]]) -> Tuple[str, float | None]:
    """Rebuild line-broken text and the mean word confidence from ``image_to_data`` output."""
    lines: Dict[Tuple[int, int, int], List[str]] = {}
    confidences: List[float] = []

    for idx, word in enumerate(data.get("text", [])):
        word = (word or "").strip()
        if not word:
            continue
        key = (data["block_num"][idx], data["par_num"][idx], data["line_num"][idx])
        lines.setdefault(key, []).append(word)
        try:
            conf = float(data["conf"][idx])
        except (TypeError, ValueError):
            continue
        if conf >= 0:
            confidences.append(conf)

    text = "\n".join(" ".join(words) for words in lines.values())
    confidence = sum(confidences) / len(confidences) if confidences else None
    return text, confidence


class TesseractEngine(OCREngine):
    """Runs tesseract on the downloaded image in a worker thread."""

    name = "Tesseract"

    def __init__(self, lang: str = "eng", download_timeout: float = 10) -> None:
        self._lang = lang
        self._download_timeout = download_timeout
        self._ready = False

    @property
    def ready(self) -> bool:
        return self._ready

    async def initialize(self) -> None:
        """Verify the tesseract binary is installed.

        Raises:
            OCREngineError: If tesseract cannot be found or executed.
        """
        try:
            version = await asyncio.to_thread(pytesseract.get_tesseract_version)
        except (pytesseract.TesseractNotFoundError, OSError) as exc:
            raise OCREngineError(f"tesseract is not available: {exc}") from exc
        self._ready = True
        logger.info("[TESSERACT] Engine ready (tesseract %s, lang=%s)", version, self._lang)

    async def shutdown(self) -> None:
        self._ready = False

    def _recognize_image(self, image: Image.Image) -> OCRResult:
        data = pytesseract.image_to_data(image, lang=self._lang, output_type=pytesseract.Output.DICT)
        text, confidence = _text_and_confidence(data)
        return OCRResult(text=text, confidence=confidence)

    async def recognize(self, image_url: str) -> OCRResult:
        if not self._ready:
            raise OCREngineError("Tesseract engine not initialized")

        downloaded = await asyncio.to_thread(download_image, image_url, self._download_timeout)
        image = await asyncio.to_thread(decode_image, downloaded.content)
        return await asyncio.to_thread(self._recognize_image, image)
