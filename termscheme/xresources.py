"""Parse X resource files (``.Xresources``) into palettes."""

from __future__ import annotations

from typing import Optional

from .errors import ParseError
from .palette import ANSI_FIELDS, ColorPalette, normalize_color

XRESOURCES_DEFAULTS = {
    "color0": "#000000",
    "color1": "#ff0000",
    "color2": "#00ff00",
    "color3": "#ffff00",
    "color4": "#0000ff",
    "color5": "#ff00ff",
    "color6": "#00ffff",
    "color7": "#ffffff",
    "color8": "#808080",
    "color9": "#ff8080",
    "color10": "#80ff80",
    "color11": "#ffff80",
    "color12": "#8080ff",
    "color13": "#ff80ff",
    "color14": "#80ffff",
    "color15": "#ffffff",
    "background": "#000000",
    "foreground": "#ffffff",
}

_COMMENT_PREFIXES = ("!", "#")


def parse_resource_lines(content: str) -> dict[str, str]:
    """Return the ``key: value`` pairs of an X resource document.

    Comment lines (``!`` or ``#``) and blank lines are skipped. Every
    ``*.`` sequence is removed from keys, so ``*.color1`` becomes
    ``color1`` while ``URxvt*.color1`` becomes ``URxvtcolor1`` and is
    never looked up. Later lines win.
    """

    entries: dict[str, str] = {}
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        entries[key.strip().replace("*.", "")] = value.strip()
    return entries


def parse_xresources(content: str) -> ColorPalette:
    """Build a palette from X resource text.

    Missing keys fall back to ``XRESOURCES_DEFAULTS``. A present value
    that is not a recognizable color raises ``ParseError``.
    """

    entries = parse_resource_lines(content)
    slots = {
        field_name: _lookup(entries, f"color{index}")
        for index, field_name in enumerate(ANSI_FIELDS)
    }
    return ColorPalette(
        **slots,
        background=_lookup(entries, "background"),
        foreground=_lookup(entries, "foreground"),
        cursor=_lookup_optional(entries, "cursor"),
        selection=_lookup_optional(entries, "selection"),
    )


def _lookup(entries: dict[str, str], key: str) -> str:
    color = _lookup_optional(entries, key)
    if color is None:
        return XRESOURCES_DEFAULTS[key]
    return color


def _lookup_optional(entries: dict[str, str], key: str) -> Optional[str]:
    raw_value = entries.get(key)
    if not raw_value:
        return None
    color = normalize_color(raw_value)
    if color is None:
        raise ParseError(
            f"Xresources key '{key}' has an unrecognized color {raw_value!r}"
        )
    return color
