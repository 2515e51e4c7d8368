import os
from typing import Any, Dict

DEFAULT_REMOTE_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_REMOTE_MODEL = "gemini-2.5-flash-lite"
DEFAULT_API_KEY_ENV = "REMOTE_OCR_API_KEY"
LEGACY_API_KEY_ENV = "GEMINI_API_KEY"


class OCRSettings:
    """Helper exposing typed accessors for the ``ocr`` configuration section.

    The section looks like::

        ocr:
          tesseract_lang: eng
          download_timeout: 10
          remote:
            enabled: true
            base_url: https://...
            model_name: gemini-2.5-flash-lite
            api_key_env: REMOTE_OCR_API_KEY

    The remote API key itself is never stored in the YAML file; it is read
    from the environment variable named by ``remote.api_key_env``.
    """

    def __init__(self, data: Dict[str, Any] | None = None) -> None:
        self.data: Dict[str, Any] = data or {}

    @property
    def tesseract_lang(self) -> str:
        return str(self.data.get("tesseract_lang") or "eng")

    @property
    def download_timeout(self) -> float:
        return float(self.data.get("download_timeout", 10))

    @property
    def remote(self) -> Dict[str, Any]:
        remote = self.data.get("remote", {})
        return remote if isinstance(remote, dict) else {}

    @property
    def remote_enabled(self) -> bool:
        return bool(self.remote.get("enabled", True))

    @property
    def remote_base_url(self) -> str:
        return str(self.remote.get("base_url") or DEFAULT_REMOTE_BASE_URL)

    @property
    def remote_model_name(self) -> str:
        return str(self.remote.get("model_name") or DEFAULT_REMOTE_MODEL)

    @property
    def remote_api_key(self) -> str | None:
        """Return the remote API key from the environment, or None when unset."""
        env_name = str(self.remote.get("api_key_env") or DEFAULT_API_KEY_ENV)
        return os.getenv(env_name) or os.getenv(LEGACY_API_KEY_ENV) or None

    @property
    def remote_configured(self) -> bool:
        """True when the accurate backend may be used for escalation."""
        return self.remote_enabled and self.remote_api_key is not None
