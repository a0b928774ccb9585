"""Configuration model and I/O for monava.

Configuration is stored in ~/.config/monava/config.toml. Every section is
optional; missing values fall back to the defaults below.

Example config.toml::

    debug = false

    [cache]
    enabled = true
    ttl = 300

    [detection]
    max_depth = 3

    [scan]
    max_matches = 1000
    exclude_dirs = ["node_modules", ".git", "target"]
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from monava.core.glob import DEFAULT_SKIP_DIRS, MAX_SCAN_DEPTH, GlobLimits
from monava.core.paths import get_config_path

logger = logging.getLogger(__name__)

# Values above these only earn a warning
_STALE_TTL_WARNING = 3600
_DEEP_DETECTION_WARNING = 10


class CacheSettings(BaseModel):
    """Cache section of the configuration.

    Attributes:
        enabled: Whether detection and enumeration results are cached.
        ttl: Default time-to-live in seconds.
        max_entries: Optional size ceiling (oldest-written entries evicted).
        sweep_interval: Minimum seconds between expiry sweeps.
    """

    model_config = ConfigDict(extra="forbid")

    enabled: Annotated[bool, Field(description="Enable result caching")] = True
    ttl: Annotated[int, Field(ge=1, le=86400, description="Default TTL in seconds")] = 300
    max_entries: Annotated[
        int | None,
        Field(ge=1, description="Maximum number of cached entries (None = unbounded)"),
    ] = None
    sweep_interval: Annotated[
        int,
        Field(ge=1, description="Seconds between expired-entry sweeps"),
    ] = 60


class DetectionSettings(BaseModel):
    """Detection section of the configuration.

    Attributes:
        max_depth: Number of directories tested walking upward from the
            starting directory.
    """

    model_config = ConfigDict(extra="forbid")

    max_depth: Annotated[int, Field(ge=1, description="Upward walk depth")] = 3


class ScanSettings(BaseModel):
    """Glob expansion section of the configuration.

    Attributes:
        max_matches: Result ceiling per pattern.
        max_depth: Directory depth ceiling per pattern.
        include_hidden: Whether wildcards enter dot-directories.
        exclude_dirs: Directory names wildcards never descend into.
    """

    model_config = ConfigDict(extra="forbid")

    max_matches: Annotated[int, Field(ge=1, description="Matches per pattern")] = 1000
    max_depth: Annotated[
        int,
        Field(ge=0, le=MAX_SCAN_DEPTH, description="Directory depth per pattern"),
    ] = 10
    include_hidden: Annotated[bool, Field(description="Descend into dot-directories")] = False
    exclude_dirs: Annotated[
        list[str],
        Field(description="Directory names skipped by wildcards"),
    ] = list(DEFAULT_SKIP_DIRS)

    def to_limits(self) -> GlobLimits:
        """Convert to the limits consumed by the pattern matcher."""
        return GlobLimits(
            max_matches=self.max_matches,
            max_depth=self.max_depth,
            include_hidden=self.include_hidden,
            skip_dirs=tuple(self.exclude_dirs),
        )


class MonavaConfig(BaseModel):
    """Top-level monava configuration."""

    model_config = ConfigDict(extra="forbid")

    debug: Annotated[bool, Field(description="Enable debug logging")] = False
    cache: CacheSettings = Field(default_factory=CacheSettings)
    detection: DetectionSettings = Field(default_factory=DetectionSettings)
    scan: ScanSettings = Field(default_factory=ScanSettings)

    @model_validator(mode="after")
    def _warn_on_costly_values(self) -> "MonavaConfig":
        if self.cache.ttl > _STALE_TTL_WARNING:
            logger.warning("cache.ttl > 1 hour may cause stale data issues")
        if self.detection.max_depth > _DEEP_DETECTION_WARNING:
            logger.warning("detection.max_depth > 10 may impact performance")
        return self


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> MonavaConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default path.

    Returns:
        Validated MonavaConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return MonavaConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> MonavaConfig:
    """Load configuration, falling back to defaults when no file exists.

    Raises:
        ConfigError: If a config file exists but is invalid.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        logger.debug("No config file found; using defaults")
        return MonavaConfig()


def save_config(config: MonavaConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The configuration to save.
        path: Path to save the config. If None, uses the default path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def _config_to_dict(config: MonavaConfig) -> dict[str, Any]:
    """Convert config to a TOML-serializable dictionary.

    TOML has no null, so unset optional values are omitted.
    """
    return config.model_dump(exclude_none=True)
