"""Configuration management for Dayslot."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DAYSLOT_HOME = Path(os.environ.get("DAYSLOT_HOME", Path.home() / "dayslot"))
CONFIG_FILE = DAYSLOT_HOME / "config" / "dayslot.conf"
DATA_DIR = DAYSLOT_HOME / "data"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class Config:
    """Dayslot configuration."""

    data_dir: str = ""
    timezone: str = "America/Toronto"
    calendar_sync: bool = False
    google_config_folder: str = ""
    google_calendar_id: str = "primary"
    google_client_secret_file: str = ""

    @property
    def data_path(self) -> Path:
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return DATA_DIR

    @property
    def google_folder_path(self) -> Path:
        if self.google_config_folder:
            return Path(self.google_config_folder).expanduser()
        return DAYSLOT_HOME / "config" / "google"


def _unquote(value: str) -> str:
    """Strip surrounding quotes, or an inline comment on unquoted values."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def parse_config(text: str) -> Config:
    """Parse key=value config text. Unknown keys are ignored."""
    config = Config()

    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "data_dir":
                config.data_dir = value
            case "timezone":
                config.timezone = value
            case "calendar_sync":
                if value.lower() in _TRUE:
                    config.calendar_sync = True
                elif value.lower() in _FALSE:
                    config.calendar_sync = False
                else:
                    logger.warning(f"Ignoring CALENDAR_SYNC={value!r}: expected true or false")
            case "google_config_folder":
                config.google_config_folder = value
            case "google_calendar_id":
                config.google_calendar_id = value or "primary"
            case "google_client_secret_file":
                config.google_client_secret_file = value

    return config


def load_config() -> Config:
    """Load configuration from dayslot.conf file."""
    if not CONFIG_FILE.exists():
        return Config()
    return parse_config(CONFIG_FILE.read_text())
