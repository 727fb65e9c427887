"""Parsers for the TOML, JSON and YAML scheme formats.

Only the Ghostty TOML dialect maps to a palette today. Generic TOML,
JSON and YAML documents are checked for syntax and then rejected,
because no schema has been chosen for them yet.
"""

from __future__ import annotations

import json
import tomllib
from typing import Any, Mapping, Optional

import yaml

from .errors import ParseError
from .palette import ANSI_FIELDS, ColorPalette, normalize_color

GHOSTTY_DIALECT = "ghostty"
GHOSTTY_MISSING_COLOR = "#000000"


def parse_toml(content: str, dialect: Optional[str] = None) -> ColorPalette:
    """Parse a TOML scheme written in ``dialect``."""

    try:
        table = tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        raise ParseError(f"Failed to parse TOML color scheme: {exc}") from exc

    if dialect == GHOSTTY_DIALECT:
        return parse_ghostty_table(table)
    raise ParseError(
        f"TOML parsing not yet implemented for dialect {dialect!r}"
    )


def parse_ghostty_table(table: Mapping[str, Any]) -> ColorPalette:
    """Map a Ghostty theme table onto a palette.

    Missing keys fall back to black so every slot stays populated.
    """

    def get_color(key: str) -> str:
        value = table.get(key)
        if not isinstance(value, str):
            return GHOSTTY_MISSING_COLOR
        color = normalize_color(value)
        if color is None:
            raise ParseError(
                f"Ghostty key '{key}' has an unrecognized color {value!r}"
            )
        return color

    slots = {name: get_color(f"palette_{name}") for name in ANSI_FIELDS}
    return ColorPalette(
        **slots,
        background=get_color("background"),
        foreground=get_color("foreground"),
        cursor=get_color("cursor_color"),
        selection=get_color("selection_background"),
    )


def parse_json(content: str) -> ColorPalette:
    """Reject JSON schemes until a concrete schema is supported."""

    try:
        json.loads(content)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Failed to parse JSON color scheme: {exc}") from exc
    raise ParseError("JSON parsing not yet implemented")


def parse_yaml(content: str) -> ColorPalette:
    """Reject YAML schemes until a concrete schema is supported."""

    try:
        yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ParseError(f"Failed to parse YAML color scheme: {exc}") from exc
    raise ParseError("YAML parsing not yet implemented")
