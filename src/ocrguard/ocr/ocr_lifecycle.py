"""Build the OCR engines from configuration and manage their start/stop."""
from __future__ import annotations

from ocrguard.configuration.app_configuration import AppConfig
from ocrguard.ocr.message_analyzer import MessageAnalyzer
from ocrguard.ocr.remote_engine import RemoteVisionEngine
from ocrguard.ocr.tesseract_engine import TesseractEngine
from ocrguard.util.logger import get_logger

logger = get_logger("ocr_lifecycle")


def create_message_analyzer(config: AppConfig) -> MessageAnalyzer:
    """Construct the analyzer with the fast engine and, when configured, the remote engine."""
    settings = config.ocr_settings
    fast_engine = TesseractEngine(lang=settings.tesseract_lang, download_timeout=settings.download_timeout)

    remote_engine = None
    if settings.remote_configured:
        remote_engine = RemoteVisionEngine(
            api_key=settings.remote_api_key,
            model_name=settings.remote_model_name,
            base_url=settings.remote_base_url,
            download_timeout=settings.download_timeout,
        )
    elif not settings.remote_enabled:
        logger.info("[OCR LIFECYCLE] Remote OCR disabled in config; escalation off.")
    else:
        logger.info("[OCR LIFECYCLE] Remote OCR API key not set; escalation off.")

    banned_words = config.banned_words
    logger.debug("[OCR LIFECYCLE] Banned words: %s", ", ".join(banned_words))
    return MessageAnalyzer(
        banned_words,
        fast_engine=fast_engine,
        remote_engine=remote_engine,
        probe_timeout=settings.download_timeout,
    )


class OCREngineLifecycle:
    """Manage initialization and shutdown of the analyzer's engines."""

    def __init__(self, analyzer: MessageAnalyzer) -> None:
        self._analyzer = analyzer
        self.available = False
        self.init_error: str | None = None

    @property
    def analyzer(self) -> MessageAnalyzer:
        return self._analyzer

    async def initialize(self) -> bool:
        """Initialize the engines, recording the error instead of raising.

        Returns:
            True if the fast engine is ready. A False return must abort startup.
        """
        logger.info("[OCR LIFECYCLE] Initializing OCR engines…")
        try:
            await self._analyzer.initialize()
        except Exception as exc:
            self.available = False
            self.init_error = str(exc)
            logger.critical("[OCR LIFECYCLE] OCR initialization failed: %s", exc)
            return False

        self.available = True
        self.init_error = None
        escalation = self._analyzer.remote_engine.name if self._analyzer.remote_engine else "disabled"
        logger.info("[OCR LIFECYCLE] OCR ready (fast=%s, escalation=%s)", self._analyzer.fast_engine.name, escalation)
        return True

    async def shutdown(self) -> None:
        """Shut down the engines and release held resources."""
        logger.info("[OCR LIFECYCLE] Shutting down OCR engines…")
        try:
            await self._analyzer.shutdown()
        except Exception as exc:
            logger.warning("[OCR LIFECYCLE] Shutdown raised: %s", exc, exc_info=True)
        self.available = False
