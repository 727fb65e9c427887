"""Error types raised while fetching and parsing color schemes."""

from __future__ import annotations

from typing import Optional


class ColorSchemeError(Exception):
    """Base class for every scheme fetch failure.

    ``source``, ``path`` and ``scheme`` are optional diagnostics that
    identify which provider and which file failed.
    """

    def __init__(
        self,
        message: str,
        *,
        source: Optional[str] = None,
        path: Optional[str] = None,
        scheme: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.source = source
        self.path = path
        self.scheme = scheme

    def __str__(self) -> str:
        context = []
        if self.scheme:
            context.append(f"scheme={self.scheme!r}")
        if self.source:
            context.append(f"source={self.source}")
        if self.path:
            context.append(f"path={self.path}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class NotFoundError(ColorSchemeError, LookupError):
    """Raised when a provider has no scheme with the requested name."""


class RetrievalError(ColorSchemeError, OSError):
    """Raised when the transport or filesystem call fails."""


class DecodeError(ColorSchemeError, ValueError):
    """Raised when raw bytes are not valid base64 or UTF-8 text."""


class ParseError(ColorSchemeError, ValueError):
    """Raised when a scheme document is malformed or unsupported."""
