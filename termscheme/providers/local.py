"""Scheme provider that reads scheme files from a local directory."""

from __future__ import annotations

from pathlib import Path
import stat
from typing import Optional

from ..errors import DecodeError, NotFoundError, ParseError, RetrievalError
from ..formats import SchemeFormat
from ..palette import ColorPalette
from ..parsing import parse_scheme
from .base import SchemeProvider, annotate_error

SUPPORTED_LOCAL_FORMATS = (SchemeFormat.XRESOURCES,)


class LocalSchemeProvider(SchemeProvider):
    """Read schemes stored as files in ``directory``.

    Only X resource files are parsed locally for now; other formats are
    refused before any file is read.
    """

    def __init__(self, directory: Path | str, scheme_format: SchemeFormat):
        self.directory = Path(directory).expanduser()
        self.format = scheme_format

    def fetch(self, name: str, variant: Optional[str] = None) -> ColorPalette:
        """Read and parse the scheme file called ``name``."""

        if self.format not in SUPPORTED_LOCAL_FORMATS:
            raise ParseError(
                f"Local format not yet implemented: {self.format.name}",
                source=self.provider_name(),
                scheme=name,
            )

        path = self._resolve_file(name)
        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(
                f"Invalid UTF-8 in scheme file: {exc}",
                source=self.provider_name(),
                path=str(path),
                scheme=name,
            ) from exc
        except OSError as exc:
            raise RetrievalError(
                f"Failed to read scheme: {exc}",
                source=self.provider_name(),
                path=str(path),
                scheme=name,
            ) from exc

        try:
            return parse_scheme(content, self.format)
        except ParseError as exc:
            annotate_error(
                exc,
                scheme=name,
                source=self.provider_name(),
                path=str(path),
            )
            raise

    def list_available(self) -> set[str]:
        """Return every entry name in the directory, unfiltered."""

        try:
            return {entry.name for entry in self.directory.iterdir()}
        except OSError as exc:
            raise RetrievalError(
                f"Failed to read schemes directory: {exc}",
                source=self.provider_name(),
                path=str(self.directory),
            ) from exc

    def provider_name(self) -> str:
        """Return ``"Local"``."""

        return "Local"

    def _resolve_file(self, name: str) -> Path:
        candidates = (
            self.directory / name,
            self.directory / self.format.filename(name),
        )
        for candidate in candidates:
            try:
                mode = candidate.stat().st_mode
            except (FileNotFoundError, NotADirectoryError, ValueError):
                continue
            except OSError as exc:
                raise RetrievalError(
                    f"Failed to look up scheme file: {exc}",
                    source=self.provider_name(),
                    path=str(candidate),
                    scheme=name,
                ) from exc
            if stat.S_ISREG(mode):
                return candidate
        raise NotFoundError(
            "Scheme file not found",
            source=self.provider_name(),
            path=str(candidates[0]),
            scheme=name,
        )
