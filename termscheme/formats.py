"""Scheme source formats and their filename conventions."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class SchemeFormat(Enum):
    """Closed set of supported scheme file formats."""

    ITERM2 = ".itermcolors"
    JSON = ".json"
    YAML = ".yaml"
    TOML = ".toml"
    XRESOURCES = ".Xresources"

    @property
    def extension(self) -> str:
        """Return the filename extension, including the leading dot."""

        return self.value

    def filename(self, name: str) -> str:
        """Return the filename used for scheme ``name`` in this format."""

        return f"{name}{self.extension}"


# Remote listings only recognize these extensions.
LISTED_EXTENSIONS = (
    SchemeFormat.ITERM2.extension,
    SchemeFormat.JSON.extension,
    SchemeFormat.YAML.extension,
    SchemeFormat.TOML.extension,
)


def strip_listed_extension(filename: str) -> Optional[str]:
    """Return ``filename`` without a listed extension, else ``None``."""

    for extension in LISTED_EXTENSIONS:
        if filename.endswith(extension) and len(filename) > len(extension):
            return filename[: -len(extension)]
    return None


def detect_format_from_url(url: Optional[str]) -> SchemeFormat:
    """Guess a scheme format from a repository URL, defaulting to JSON."""

    if url:
        if "ghostty" in url:
            return SchemeFormat.TOML
        if "iterm" in url or "iTerm" in url:
            return SchemeFormat.ITERM2
        if "base16" in url:
            return SchemeFormat.YAML
        if "alacritty" in url:
            return SchemeFormat.TOML
        if "xresources" in url or "Xresources" in url:
            return SchemeFormat.XRESOURCES
    return SchemeFormat.JSON
