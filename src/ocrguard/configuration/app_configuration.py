from __future__ import annotations
from pathlib import Path
import fcntl
from typing import Any, Dict, List
import yaml

from ocrguard.configuration.ocr_settings import OCRSettings
from ocrguard.datatypes.discord_datatypes import ChannelID
from ocrguard.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()

DEFAULT_BANNED_WORDS = [
    "crypto casino",
    "special promo code",
    "withdrawl successful",
    "free gift",
]
DEFAULT_BATCH_DELAY_MS = 2000
DEFAULT_TIMEOUT_DURATION = "7d"


def _as_id_list(value: Any) -> List[ChannelID]:
    """Coerce a YAML list (or comma separated string) of snowflakes into ChannelIDs."""
    if value is None:
        return []
    if isinstance(value, (str, int)):
        value = str(value).split(",")
    ids: List[ChannelID] = []
    for item in value:
        text = str(item).strip()
        if not text:
            continue
        try:
            ids.append(ChannelID(text))
        except ValueError:
            logger.warning("[APP CONFIGURATION] Ignoring invalid channel id %r", item)
    return ids


class AppConfig:
    """File-lock based accessor around the YAML-based application configuration.

    The class caches contents of ``./config/app_config.yml``, exposes dictionary-like
    access helpers, and resolves OCR-specific settings through :class:`OCRSettings`.
    Uses fcntl file locks for safe concurrent access across processes.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                data = yaml.safe_load(f)
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
                if not isinstance(data, dict):
                    logger.error("[APP CONFIGURATION] Config %s is not a mapping.", self.config_path)
                    return {}
                return data
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
        return {}

    def _section(self, key: str) -> Dict[str, Any]:
        value = self._data.get(key, {})
        return value if isinstance(value, dict) else {}

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping.

        Returns the raw mapping that was loaded (an empty dict on error).
        """
        self._data = self.load_from_disk()
        return self._data

    @property
    def data(self) -> Dict[str, Any]:
        """Return the current cached configuration mapping (do not mutate)."""
        return self._data

    # --------------------------
    # Scanner
    # --------------------------
    @property
    def banned_words(self) -> List[str]:
        """Return the configured banned words, falling back to the built-in list."""
        value = self._data.get("banned_words")
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, list):
            return list(DEFAULT_BANNED_WORDS)
        return [str(word).strip() for word in value if str(word).strip()]

    @property
    def batch_delay_ms(self) -> int:
        """Quiet period after an author's latest message before their batch is scanned."""
        return int(self._section("batching").get("delay_ms", DEFAULT_BATCH_DELAY_MS))

    @property
    def ocr_settings(self) -> OCRSettings:
        return OCRSettings(self._section("ocr"))

    # --------------------------
    # Channel filtering
    # --------------------------
    @property
    def is_whitelist(self) -> bool:
        return bool(self._section("channels").get("is_whitelist", False))

    @property
    def allowed_channels(self) -> List[ChannelID]:
        return _as_id_list(self._section("channels").get("allowed"))

    @property
    def disallowed_channels(self) -> List[ChannelID]:
        return _as_id_list(self._section("channels").get("disallowed"))

    # --------------------------
    # Moderation
    # --------------------------
    @property
    def should_delete(self) -> bool:
        return bool(self._section("moderation").get("should_delete", True))

    @property
    def should_punish(self) -> bool:
        return bool(self._section("moderation").get("should_punish", True))

    @property
    def timeout_duration(self) -> str:
        """Raw timeout duration string such as ``7d``; see ``discord_utils.parse_duration``."""
        return str(self._section("moderation").get("timeout_duration") or DEFAULT_TIMEOUT_DURATION)

    @property
    def triggers_before_action(self) -> int:
        return max(1, int(self._section("moderation").get("triggers_before_action", 1)))

    @property
    def scan_everything(self) -> bool:
        return bool(self._section("moderation").get("scan_everything", True))

    @property
    def log_channel_id(self) -> ChannelID | None:
        value = self._section("moderation").get("log_channel_id")
        ids = _as_id_list(value)
        return ids[0] if ids else None


# Shared application-wide configuration instance
app_config = AppConfig(CONFIG_PATH)
