"""
Accurate remote OCR engine using a vision model behind an OpenAI-compatible API.

The default endpoint is Google Gemini's OpenAI compatibility layer, but any
server speaking the chat completions protocol with image inputs works.
"""

from __future__ import annotations

import asyncio

from openai import AsyncOpenAI

from ocrguard.datatypes.scan_datatypes import OCRResult
from ocrguard.ocr.base import OCREngine
from ocrguard.util.image_utils import download_image
from ocrguard.util.logger import get_logger

logger = get_logger("remote_engine")

EXTRACTION_PROMPT = "Extract all text from this image. Only return the text found in the image, nothing else."


class RemoteVisionEngine(OCREngine):
    """Sends the image inline (base64 ``data:`` URL) and asks the model for its text."""

    name = "RemoteVision"

    def __init__(
        self,
        api_key: str,
        model_name: str,
        base_url: str | None = None,
        download_timeout: float = 10,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._client = client or AsyncOpenAI(api_key=api_key, base_url=base_url)
        self._model_name = model_name
        self._download_timeout = download_timeout
        logger.info("[REMOTE OCR] Initialized with base_url=%s, model=%s", base_url, model_name)

    @property
    def model_name(self) -> str:
        return self._model_name

    async def shutdown(self) -> None:
        await self._client.close()

    async def recognize(self, image_url: str) -> OCRResult:
        downloaded = await asyncio.to_thread(download_image, image_url, self._download_timeout)

        response = await self._client.chat.completions.create(
            model=self._model_name,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "image_url", "image_url": {"url": downloaded.to_data_url()}},
                        {"type": "text", "text": EXTRACTION_PROMPT},
                    ],
                }
            ],
        )

        if not response.choices:
            return OCRResult(text="")
        return OCRResult(text=response.choices[0].message.content or "")
