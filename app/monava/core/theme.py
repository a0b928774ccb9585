"""Console styles for monava output.

Every style name used in Rich markup or table styling is a field of
:class:`ThemeColors`. A ``[colors]`` table in ~/.config/monava/theme.toml
replaces any subset of the default colors.
"""

import logging
import re
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from monava.core.paths import get_theme_path

logger = logging.getLogger(__name__)

HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}")

# Styles rendered in bold on top of their color
BOLD_STYLES = frozenset({"error", "package_name", "bold_header"})


class ThemeColors(BaseModel):
    """Colors for monava's tables and messages, as #RGB or #RRGGBB."""

    model_config = ConfigDict(extra="forbid")

    # Table chrome
    header: str = "#69B9A1"
    border: str = "#29526d"
    muted: str = "#b2bec3"

    # Packages and dependencies
    package_name: str = "#69B9A1"
    package_path: str = "#b2bec3"
    ecosystem: str = "#0e8ac8"
    dependency_runtime: str = "#c1ff62"
    dependency_dev: str = "#faf870"

    # Messages
    info: str = "#0ec1c8"
    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"

    @field_validator("*", mode="before")
    @classmethod
    def check_hex_color(cls, value: object, info: Any) -> str:
        if not isinstance(value, str) or not HEX_COLOR.fullmatch(value.strip()):
            msg = f"{info.field_name}: expected a #RGB or #RRGGBB color, got {value!r}"
            raise ValueError(msg)
        return value.strip()


def load_theme(path: Path | None = None) -> ThemeColors:
    """Read color overrides from the theme file.

    A missing file, unreadable TOML or any invalid color leaves every color
    at its default; problems other than a missing file are logged.
    """
    theme_path = path or get_theme_path()
    try:
        with open(theme_path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return ThemeColors()
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", theme_path, e)
        return ThemeColors()

    overrides = data.get("colors", {})
    if not isinstance(overrides, dict):
        logger.warning("Ignoring theme file %s: 'colors' is not a table", theme_path)
        return ThemeColors()

    try:
        colors = ThemeColors.model_validate(overrides)
    except ValidationError as e:
        logger.warning("Ignoring theme file %s: %s", theme_path, e)
        return ThemeColors()

    logger.debug("Loaded %d color override(s) from %s", len(overrides), theme_path)
    return colors


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme, one style per color plus ``bold_header``."""
    if colors is None:
        colors = load_theme()

    palette: dict[str, str] = colors.model_dump()
    palette["bold_header"] = colors.header
    return Theme(
        {
            name: f"bold {color}" if name in BOLD_STYLES else color
            for name, color in palette.items()
        }
    )


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Return the Rich theme, loading it on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme
