"""Provider interface shared by every scheme source."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..errors import ColorSchemeError
from ..palette import ColorPalette

DEFAULT_VARIANT = "default"


class SchemeProvider(ABC):
    """A source that can fetch and list named color schemes."""

    @abstractmethod
    def fetch(self, name: str, variant: Optional[str] = None) -> ColorPalette:
        """Return the palette for ``name``.

        Raises ``NotFoundError``, ``RetrievalError``, ``DecodeError`` or
        ``ParseError`` from ``termscheme.errors``.
        """

    @abstractmethod
    def list_available(self) -> set[str]:
        """Return the scheme names this source can serve."""

    @abstractmethod
    def provider_name(self) -> str:
        """Return a fixed, human-readable identity for diagnostics."""


def variant_key(variant: Optional[str]) -> str:
    """Return ``variant`` or the literal ``"default"`` when unset."""

    return variant or DEFAULT_VARIANT


def annotate_error(
    exc: ColorSchemeError,
    *,
    scheme: str,
    source: str,
    path: Optional[str] = None,
) -> ColorSchemeError:
    """Fill in any diagnostic context ``exc`` does not carry yet."""

    exc.scheme = exc.scheme or scheme
    exc.source = exc.source or source
    exc.path = exc.path or path
    return exc
