"""
Configuration for the markdown-pdf command line tool.

Values are layered, lowest priority first: built-in defaults, a TOML config
file, MARKDOWN_PDF_* environment variables, then command line arguments.
"""

import os
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigurationError
from .models import DEFAULT_PAGE_FORMAT, PageMargins

CONFIG_FILE_NAME = "markdown-pdf.toml"
ENV_PREFIX = "MARKDOWN_PDF_"

DEFAULTS: Dict[str, Any] = {
    "format": DEFAULT_PAGE_FORMAT,
    "margins": "1in 0.75in",
    "styles": None,
    "gh_style": True,
    "default_style": True,
    "emoji": True,
    "max_workers": 4,
}

MARGIN_PATTERN = re.compile(r'^(-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)\s*(cm|in|mm|pt|px)?$')

# Inches per unit
UNIT_INCHES = {"in": 1.0, "cm": 1 / 2.54, "mm": 1 / 25.4, "pt": 1 / 72, "px": 1 / 96}

MAX_MARGIN_INCHES = 3


def validate_margin(margin_str: str) -> str:
    """Validate and normalize a single margin value."""
    match = MARGIN_PATTERN.match(margin_str.strip())
    if not match:
        raise ConfigurationError(f"Invalid margin format: '{margin_str}'. Use format like '1in', '2.5cm', '10mm', etc.")

    value_str, unit = match.groups()
    value = float(value_str)

    # Set default unit to 'in' if not specified
    if not unit:
        unit = 'in'

    value_inches = value * UNIT_INCHES[unit]
    if value_inches < 0:
        raise ConfigurationError(f"Margin cannot be negative: '{margin_str}'. Minimum value is 0.")
    elif value_inches > MAX_MARGIN_INCHES:
        raise ConfigurationError(f"Margin too large: '{margin_str}'. Maximum value is 3 inches (7.62cm).")

    return f"{value:g}{unit}"


def parse_margins(margins: str) -> PageMargins:
    """Expand a CSS-style margin shorthand (1, 2 or 4 values) into per-edge margins."""
    parts = margins.split()

    if len(parts) == 1:
        margin = validate_margin(parts[0])
        return PageMargins(top=margin, right=margin, bottom=margin, left=margin)
    elif len(parts) == 2:
        vertical = validate_margin(parts[0])
        horizontal = validate_margin(parts[1])
        return PageMargins(top=vertical, right=horizontal, bottom=vertical, left=horizontal)
    elif len(parts) == 4:
        top, right, bottom, left = (validate_margin(part) for part in parts)
        return PageMargins(top=top, right=right, bottom=bottom, left=left)
    else:
        raise ConfigurationError(f"Invalid margin format: '{margins}'. Use 1, 2, or 4 values.")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _read_toml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


class Config:
    """Resolved settings. ``cli_config`` holds only the options given on the command line."""

    def __init__(self, cli_config: Optional[Dict[str, Any]] = None, config_path: Optional[str] = None,
                 environ: Optional[Dict[str, str]] = None):
        self.cli_config = {key: value for key, value in (cli_config or {}).items() if value is not None}
        self.environ = os.environ if environ is None else environ

        explicit = config_path is not None
        self.config_path = Path(config_path) if explicit else Path.cwd() / CONFIG_FILE_NAME
        if explicit and not self.config_path.exists():
            raise ConfigurationError(f"Config file not found: {self.config_path}")
        try:
            self.file_config = _read_toml(self.config_path)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid config file {self.config_path}: {e}") from e

    def _env(self, key: str) -> Optional[str]:
        return self.environ.get(ENV_PREFIX + key.upper())

    def get(self, key: str) -> Any:
        """Look a key up through CLI, environment, config file and defaults, in that order."""
        if key in self.cli_config:
            return self.cli_config[key]
        env_value = self._env(key)
        if env_value is not None:
            if isinstance(DEFAULTS.get(key), bool):
                return _parse_bool(env_value)
            if isinstance(DEFAULTS.get(key), int):
                try:
                    return int(env_value)
                except ValueError as e:
                    raise ConfigurationError(f"Invalid value for {ENV_PREFIX}{key.upper()}: {env_value!r}") from e
            return env_value
        if key in self.file_config:
            return self.file_config[key]
        return DEFAULTS.get(key)

    def get_page_format(self) -> str:
        return str(self.get("format"))

    def get_margins(self) -> PageMargins:
        return parse_margins(str(self.get("margins")))

    def get_styles(self) -> Optional[str]:
        return self.get("styles")

    def get_gh_style(self) -> bool:
        return bool(self.get("gh_style"))

    def get_default_style(self) -> bool:
        return bool(self.get("default_style"))

    def get_convert_emoji(self) -> bool:
        return bool(self.get("emoji"))

    def get_max_workers(self) -> int:
        workers = int(self.get("max_workers"))
        if workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1, got {workers}")
        return workers
