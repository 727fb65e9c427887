"""Parse iTerm2 ``.itermcolors`` property lists into palettes.

The document is scanned as text rather than loaded as XML. A slot is
resolved by finding the first ``<key>SLOT</key>`` and then reading the
first ``<real>`` value that follows each component key after it. Cached
palettes depend on this precedence, so it is kept even though a strict
plist reader would disagree on some hand-edited files.
"""

from __future__ import annotations

import math
from typing import Optional

from rich.color_triplet import ColorTriplet

from .palette import ANSI_FIELDS, ColorPalette, hex_from_triplet

_COMPONENT_KEYS = ("Red Component", "Green Component", "Blue Component")
_REAL_OPEN = "<real>"
_REAL_CLOSE = "</real>"

ITERM2_DEFAULT_ANSI = (
    "#000000",
    "#800000",
    "#008000",
    "#808000",
    "#000080",
    "#800080",
    "#008080",
    "#c0c0c0",
    "#808080",
    "#ff0000",
    "#00ff00",
    "#ffff00",
    "#0000ff",
    "#ff00ff",
    "#00ffff",
    "#ffffff",
)


def parse_iterm2(content: str) -> ColorPalette:
    """Build a palette from the text of an ``.itermcolors`` file.

    Missing ANSI slots fall back to ``ITERM2_DEFAULT_ANSI``; background
    and foreground fall back to the resolved black and white slots.
    Cursor and selection stay ``None`` when absent.
    """

    slots: dict[str, str] = {}
    for index, field_name in enumerate(ANSI_FIELDS):
        color = extract_slot_color(content, f"Ansi {index} Color")
        slots[field_name] = color or ITERM2_DEFAULT_ANSI[index]

    background = extract_slot_color(content, "Background Color")
    foreground = extract_slot_color(content, "Foreground Color")
    return ColorPalette(
        **slots,
        background=background or slots["black"],
        foreground=foreground or slots["white"],
        cursor=extract_slot_color(content, "Cursor Color"),
        selection=extract_slot_color(content, "Selection Color"),
    )


def extract_slot_color(content: str, slot: str) -> Optional[str]:
    """Return ``#RRGGBB`` for ``slot`` or ``None`` if it cannot be read."""

    start = content.find(f"<key>{slot}</key>")
    if start < 0:
        return None
    section = content[start:]

    channels: list[int] = []
    for component in _COMPONENT_KEYS:
        value = _component_value(section, component)
        if value is None:
            return None
        channels.append(component_to_byte(value))
    return hex_from_triplet(ColorTriplet(*channels), upper=True)


def component_to_byte(value: float) -> int:
    """Scale a 0.0-1.0 component to a rounded, clamped byte."""

    return max(0, min(255, round(value * 255)))


def _component_value(section: str, component: str) -> Optional[float]:
    key = f"<key>{component}</key>"
    index = section.find(key)
    if index < 0:
        return None
    after_key = section[index + len(key):]

    real_start = after_key.find(_REAL_OPEN)
    if real_start < 0:
        return None
    real_content = after_key[real_start + len(_REAL_OPEN):]
    real_end = real_content.find(_REAL_CLOSE)
    if real_end < 0:
        return None

    try:
        value = float(real_content[:real_end].strip())
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value
