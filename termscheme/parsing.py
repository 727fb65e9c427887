"""Dispatch raw scheme text to the parser for its format."""

from __future__ import annotations

from typing import Optional

from .formats import SchemeFormat
from .iterm2 import parse_iterm2
from .palette import ColorPalette
from .structured import parse_json, parse_toml, parse_yaml
from .xresources import parse_xresources


def parse_scheme(
    content: str,
    scheme_format: SchemeFormat,
    *,
    dialect: Optional[str] = None,
) -> ColorPalette:
    """Parse ``content`` as ``scheme_format``.

    ``dialect`` only matters for TOML, where it selects the key layout.
    """

    if scheme_format is SchemeFormat.ITERM2:
        return parse_iterm2(content)
    if scheme_format is SchemeFormat.TOML:
        return parse_toml(content, dialect)
    if scheme_format is SchemeFormat.JSON:
        return parse_json(content)
    if scheme_format is SchemeFormat.YAML:
        return parse_yaml(content)
    return parse_xresources(content)
