"""Configuration loading for termscheme."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .providers.cached import DEFAULT_CACHE_DIR


class ConfigError(Exception):
    """Raised when the configuration file cannot be parsed."""


_DEFAULT_CONFIG_ENV = "TERMSCHEME_CONFIG"
_CONFIG_RELATIVE_PATH = Path(".config") / "termscheme" / "config.yaml"

DEFAULT_OUTPUT = Path("dist") / "css" / "generated" / "colorscheme.css"


@dataclass(frozen=True)
class ColorschemeConfig:
    """Which scheme to fetch, from where, and any color overrides."""

    name: str
    source: Optional[str] = None
    variant: Optional[str] = None
    url: Optional[str] = None
    custom_colors: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class AppConfig:
    """In-memory representation of termscheme configuration."""

    path: Path
    cache_dir: Path = DEFAULT_CACHE_DIR
    output: Path = DEFAULT_OUTPUT
    colorscheme: Optional[ColorschemeConfig] = None

    @property
    def exists(self) -> bool:
        """Return ``True`` if the configuration file exists on disk."""

        return self.path.exists()


def default_config_path() -> Path:
    """Return the default config path, honoring ``TERMSCHEME_CONFIG``."""

    env_value = os.environ.get(_DEFAULT_CONFIG_ENV)
    if env_value:
        return Path(env_value).expanduser()
    return Path.home() / _CONFIG_RELATIVE_PATH


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from ``path`` or the default location."""

    config_path = (path or default_config_path()).expanduser()

    if not config_path.exists():
        return AppConfig(path=config_path)

    try:
        with config_path.open("r", encoding="utf-8") as handle:
            raw: Any = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        message = f"Failed to parse YAML config {config_path}: {exc}"
        raise ConfigError(message) from exc
    except OSError as exc:
        message = f"Failed to read config {config_path}: {exc}"
        raise ConfigError(message) from exc

    if not isinstance(raw, dict):
        expected = type(raw).__name__
        message = (
            f"Expected a mapping at the top level of {config_path}, "
            f"got {expected}."
        )
        raise ConfigError(message)

    cache_dir = _coerce_path(raw.get("cache_dir")) or DEFAULT_CACHE_DIR
    output = _coerce_path(raw.get("output")) or DEFAULT_OUTPUT
    colorscheme = _coerce_colorscheme(raw.get("colorscheme"), config_path)

    return AppConfig(
        path=config_path,
        cache_dir=cache_dir,
        output=output,
        colorscheme=colorscheme,
    )


def _coerce_path(value: Any) -> Optional[Path]:
    if value is None:
        return None
    if isinstance(value, str):
        return Path(value).expanduser()
    typename = type(value).__name__
    raise ConfigError(
        f"Expected a string path in configuration, got {typename}."
    )


def _coerce_colorscheme(
    value: Any,
    config_path: Path,
) -> Optional[ColorschemeConfig]:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ConfigError(
            "Config key 'colorscheme' must be a mapping "
            f"(file: {config_path})."
        )

    name = value.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ConfigError(
            "Config key 'colorscheme.name' must be a non-empty string "
            f"(file: {config_path})."
        )

    optional: dict[str, Optional[str]] = {}
    for key in ("source", "variant", "url"):
        item = value.get(key)
        if item is not None and not isinstance(item, str):
            raise ConfigError(
                f"Config key 'colorscheme.{key}' must be a string "
                f"(file: {config_path})."
            )
        optional[key] = item

    custom_colors = value.get("custom_colors") or {}
    if not isinstance(custom_colors, dict) or not all(
        isinstance(key, str) and isinstance(item, str)
        for key, item in custom_colors.items()
    ):
        raise ConfigError(
            "Config key 'colorscheme.custom_colors' must map field names "
            f"to color strings (file: {config_path})."
        )

    return ColorschemeConfig(
        name=name.strip(),
        custom_colors=dict(custom_colors),
        **optional,
    )
