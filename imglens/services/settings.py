"""
Settings management for img-lens.

Reads processing defaults from an INI file. A missing file means defaults;
an invalid value falls back to its default with a warning.
"""

from configparser import ConfigParser, Error as ConfigParserError
from pathlib import Path
from typing import Optional, Union

from ..core import ChannelFlags, InvalidParameterError
from ..lens import AUTO_THREADS, resolve_thread_count
from ..utils.logging import get_logger

logger = get_logger(__name__)


class Settings:
    """Processing defaults loaded from settings.ini."""

    # Default settings file location (current working directory)
    SETTINGS_FILE = Path("imglens.ini")

    # Sections and keys
    SECTION = "processing"
    LOGGING_SECTION = "logging"
    KEY_THREADS = "threads"
    KEY_BLUR_RADIUS = "blur_radius"
    KEY_GAUSSIAN_SIGMA = "gaussian_sigma"
    KEY_KUWAHARA_RADIUS = "kuwahara_radius"
    KEY_CANNY_RADIUS = "canny_radius"
    KEY_CANNY_SIGMA = "canny_sigma"
    KEY_CANNY_LOW = "canny_low_threshold"
    KEY_CANNY_HIGH = "canny_high_threshold"
    KEY_CHANNELS = "channels"
    KEY_LEVEL = "level"

    DEFAULTS = {
        KEY_THREADS: AUTO_THREADS,
        KEY_BLUR_RADIUS: "2",
        KEY_GAUSSIAN_SIGMA: "3.0",
        KEY_KUWAHARA_RADIUS: "5",
        KEY_CANNY_RADIUS: "2",
        KEY_CANNY_SIGMA: "2.0",
        KEY_CANNY_LOW: "10.0",
        KEY_CANNY_HIGH: "20.0",
        KEY_CHANNELS: "RGB",
    }

    def __init__(self, path: Optional[Union[str, Path]] = None):
        """Initialize settings from file, or defaults if it does not exist."""
        self.path = Path(path) if path is not None else self.SETTINGS_FILE
        self.config = ConfigParser()
        self._load()

    def _load(self) -> None:
        """Load settings from file over the built-in defaults."""
        self.config.read_dict({self.SECTION: self.DEFAULTS, self.LOGGING_SECTION: {}})
        if self.path.exists():
            try:
                self.config.read(self.path)
            except ConfigParserError as e:
                logger.warning("Ignoring unreadable settings file %s: %s", self.path, e)
                self.config = ConfigParser()
                self.config.read_dict({self.SECTION: self.DEFAULTS, self.LOGGING_SECTION: {}})
            else:
                logger.debug("Loaded settings from %s", self.path)

    def save(self) -> None:
        """Save settings to file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            self.config.write(f)

    def set(self, key: str, value, section: str = SECTION) -> None:
        if not self.config.has_section(section):
            self.config.add_section(section)
        self.config.set(section, key, str(value))

    # ------------------------------------------------------------------
    # Typed getters
    # ------------------------------------------------------------------

    def _fallback(self, key: str, raw: str, reason: str):
        logger.warning(
            "Invalid %s = %r in %s (%s); using default %s",
            key, raw, self.path, reason, self.DEFAULTS[key],
        )
        return self.DEFAULTS[key]

    def _get_int(self, key: str, minimum: int = 0) -> int:
        raw = self.config.get(self.SECTION, key)
        try:
            value = int(raw)
        except ValueError:
            return int(self._fallback(key, raw, "not an integer"))
        if value < minimum:
            return int(self._fallback(key, raw, f"must be >= {minimum}"))
        return value

    def _get_float(self, key: str, minimum: float = 0.0, exclusive: bool = False) -> float:
        raw = self.config.get(self.SECTION, key)
        try:
            value = float(raw)
        except ValueError:
            return float(self._fallback(key, raw, "not a number"))
        if value != value or value < minimum or (exclusive and value == minimum):
            return float(self._fallback(key, raw, "out of range"))
        return value

    def get_threads(self) -> Union[int, str]:
        """Worker count: "auto" or a positive integer."""
        raw = self.config.get(self.SECTION, self.KEY_THREADS).strip()
        try:
            resolve_thread_count(raw)
        except InvalidParameterError as e:
            return self._fallback(self.KEY_THREADS, raw, str(e))
        return raw.lower() if raw.lower() == AUTO_THREADS else int(raw)

    def get_blur_radius(self) -> int:
        return self._get_int(self.KEY_BLUR_RADIUS)

    def get_gaussian_sigma(self) -> float:
        return self._get_float(self.KEY_GAUSSIAN_SIGMA, exclusive=True)

    def get_kuwahara_radius(self) -> int:
        return self._get_int(self.KEY_KUWAHARA_RADIUS)

    def get_canny_radius(self) -> int:
        return self._get_int(self.KEY_CANNY_RADIUS)

    def get_canny_sigma(self) -> float:
        return self._get_float(self.KEY_CANNY_SIGMA, exclusive=True)

    def get_canny_thresholds(self) -> tuple[float, float]:
        """(low, high); both fall back to defaults if low > high."""
        low = self._get_float(self.KEY_CANNY_LOW)
        high = self._get_float(self.KEY_CANNY_HIGH)
        if low > high:
            logger.warning(
                "Canny low threshold %s exceeds high threshold %s in %s; using defaults",
                low, high, self.path,
            )
            return float(self.DEFAULTS[self.KEY_CANNY_LOW]), float(self.DEFAULTS[self.KEY_CANNY_HIGH])
        return low, high

    def get_channels(self) -> ChannelFlags:
        raw = self.config.get(self.SECTION, self.KEY_CHANNELS)
        try:
            return ChannelFlags.parse(raw)
        except InvalidParameterError as e:
            return ChannelFlags.parse(self._fallback(self.KEY_CHANNELS, raw, str(e)))

    def get_log_level(self) -> Optional[str]:
        """Configured log level name, if any."""
        value = self.config.get(self.LOGGING_SECTION, self.KEY_LEVEL, fallback="").strip()
        return value or None
