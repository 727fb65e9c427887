"""Disk cache wrapper for any scheme provider."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from ..palette import ColorPalette, palette_from_json, palette_to_json
from .base import SchemeProvider, variant_key

LOGGER = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path(".cache") / "colorschemes"
CACHE_FILE_SUFFIX = ".json"
_UNSAFE_KEY_CHARS = ("/", "\\", "\0")


class CachedProvider(SchemeProvider):
    """Cache the palettes fetched through ``provider`` in ``cache_dir``.

    One pretty-printed JSON file is kept per ``(name, variant)``. The
    cache is best effort: unreadable or unwritable cache files are logged
    and ignored, and never turn a working fetch into a failure.
    """

    def __init__(
        self,
        provider: SchemeProvider,
        cache_dir: Path | str = DEFAULT_CACHE_DIR,
    ) -> None:
        self._provider = provider
        self.cache_dir = Path(cache_dir).expanduser()

    @property
    def provider(self) -> SchemeProvider:
        """Return the wrapped provider."""

        return self._provider

    def cache_path(self, name: str, variant: Optional[str] = None) -> Path:
        """Return the cache file used for ``name`` and ``variant``.

        Raises ``ValueError`` when the identity would name a file outside
        ``cache_dir``.
        """

        key = f"{name}-{variant_key(variant)}"
        if any(char in key for char in _UNSAFE_KEY_CHARS):
            raise ValueError(f"Cannot cache scheme identity {key!r}")
        return self.cache_dir / f"{key}{CACHE_FILE_SUFFIX}"

    def fetch(self, name: str, variant: Optional[str] = None) -> ColorPalette:
        """Return a cached palette, or fetch and cache a fresh one."""

        try:
            cache_file = self.cache_path(name, variant)
        except ValueError as exc:
            LOGGER.warning("Bypassing cache: %s", exc)
            return self._provider.fetch(name, variant)

        cached = self._read_cache(cache_file)
        if cached is not None:
            LOGGER.info("Using cached color scheme: %s", name)
            return cached

        LOGGER.info(
            "Fetching color scheme from %s: %s",
            self._provider.provider_name(),
            name,
        )
        palette = self._provider.fetch(name, variant)
        self._write_cache(cache_file, palette)
        return palette

    def list_available(self) -> set[str]:
        """Return the wrapped provider's listing, uncached."""

        return self._provider.list_available()

    def provider_name(self) -> str:
        """Return the wrapped provider's name."""

        return self._provider.provider_name()

    def _read_cache(self, cache_file: Path) -> Optional[ColorPalette]:
        try:
            content = cache_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("Could not read cache file %s: %s", cache_file, exc)
            return None
        try:
            return palette_from_json(content)
        except ValueError as exc:
            LOGGER.warning(
                "Ignoring invalid cache file %s: %s", cache_file, exc
            )
            return None

    def _write_cache(self, cache_file: Path, palette: ColorPalette) -> None:
        partial = cache_file.with_name(
            f".{cache_file.name}.{os.getpid()}.tmp"
        )
        try:
            cache_file.parent.mkdir(parents=True, exist_ok=True)
            partial.write_text(palette_to_json(palette), encoding="utf-8")
            os.replace(partial, cache_file)
        except OSError as exc:
            LOGGER.warning(
                "Could not write cache file %s: %s", cache_file, exc
            )
            try:
                partial.unlink(missing_ok=True)
            except OSError:
                LOGGER.debug("Could not remove %s", partial, exc_info=True)
