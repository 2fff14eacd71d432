"""Engine configuration.

Configuration is small: the year cap bounding a next-time search and the
log level used by the command-line front-end. Values come from defaults,
``CRONKIT_*`` environment variables, or a TOML file.

Usage:
    >>> from cronkit.config import EngineConfig, set_config
    >>>
    >>> config = EngineConfig.from_env()          # CRONKIT_SEARCH_YEAR_CAP=4000
    >>> set_config(config)
    >>>
    >>> config = EngineConfig.from_file("cronkit.toml")
"""

from __future__ import annotations

import logging
import os
import threading
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

from cronkit.exceptions import ConfigError

ENV_PREFIX = "CRONKIT_"

# One full Gregorian cycle plus a year; any satisfiable schedule matches
# within this many years of any starting point.
MIN_SEARCH_YEAR_CAP = 401

DEFAULT_SEARCH_YEAR_CAP = 2000

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class EngineConfig:
    """Engine settings.

    Attributes:
        search_year_cap: Maximum number of years a single next-time search
            may carry through before reporting no result.
        log_level: Log level name used by :func:`configure_logging`.
    """

    search_year_cap: int = DEFAULT_SEARCH_YEAR_CAP
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        errors = []
        if isinstance(self.search_year_cap, bool) or not isinstance(self.search_year_cap, int):
            errors.append(f"search_year_cap must be an integer, got {self.search_year_cap!r}")
        elif self.search_year_cap < MIN_SEARCH_YEAR_CAP:
            errors.append(
                f"search_year_cap must be at least {MIN_SEARCH_YEAR_CAP}, "
                f"got {self.search_year_cap}"
            )
        if not isinstance(self.log_level, str) or self.log_level.upper() not in _LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        if errors:
            raise ConfigError("; ".join(errors))
        object.__setattr__(self, "log_level", self.log_level.upper())

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "EngineConfig":
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known})

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EngineConfig":
        """Load configuration from ``CRONKIT_*`` environment variables.

        Example:
            CRONKIT_SEARCH_YEAR_CAP=4000
            CRONKIT_LOG_LEVEL=debug
        """
        environ = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for key, value in environ.items():
            if key.startswith(ENV_PREFIX):
                values[key[len(ENV_PREFIX):].lower()] = _parse_value(value)
        return cls.from_mapping(values)

    @classmethod
    def from_file(cls, path: str | Path) -> "EngineConfig":
        """Load configuration from a TOML file.

        Settings may sit at the top level or under a ``[cronkit]`` table.

        Raises:
            ConfigError: If the file is missing or not valid TOML.
        """
        path = Path(path)
        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Configuration file not found: {path}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}") from e

        section = data.get("cronkit", data)
        if not isinstance(section, dict):
            raise ConfigError(f"[cronkit] in {path} must be a table")
        return cls.from_mapping(section)

    def with_overrides(self, **overrides: Any) -> "EngineConfig":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _parse_value(value: str) -> Any:
    """Parse string value to appropriate type."""
    try:
        return int(value)
    except ValueError:
        return value


# =============================================================================
# Process-wide Default
# =============================================================================


_config: EngineConfig | None = None
_config_lock = threading.Lock()


def get_config() -> EngineConfig:
    """Get the active configuration, loading it from the environment on first use."""
    global _config
    with _config_lock:
        if _config is None:
            _config = EngineConfig.from_env()
        return _config


def set_config(config: EngineConfig | None) -> None:
    """Replace the active configuration; None resets to environment defaults."""
    global _config
    with _config_lock:
        _config = config


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for command-line use.

    Library code never calls this; it only creates module loggers.
    """
    level_name = (level or get_config().log_level).upper()
    if level_name not in _LOG_LEVELS:
        raise ConfigError(f"Unknown log level: {level}")
    logging.basicConfig(
        level=getattr(logging, level_name),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
