"""Canonical terminal palette model and its JSON form."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
import json
import re
from typing import Any, Mapping, Optional

from rich.color import Color, ColorParseError
from rich.color_triplet import ColorTriplet

ANSI_FIELDS = (
    "black",
    "red",
    "green",
    "yellow",
    "blue",
    "magenta",
    "cyan",
    "white",
    "bright_black",
    "bright_red",
    "bright_green",
    "bright_yellow",
    "bright_blue",
    "bright_magenta",
    "bright_cyan",
    "bright_white",
)
REQUIRED_FIELDS = (*ANSI_FIELDS, "background", "foreground")
OPTIONAL_FIELDS = ("cursor", "selection")
PALETTE_FIELDS = (*REQUIRED_FIELDS, *OPTIONAL_FIELDS)

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")
_SHORT_HEX_COLOR = re.compile(r"^#([0-9A-Fa-f]{3})$")
_XRDB_RGB = re.compile(
    r"^rgb:([0-9A-Fa-f]{1,4})/([0-9A-Fa-f]{1,4})/([0-9A-Fa-f]{1,4})$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ColorPalette:
    """Sixteen ANSI slots plus background, foreground and extras.

    Every field holds a ``#RRGGBB`` string. ``cursor`` and ``selection``
    are ``None`` when the source scheme does not define them.
    """

    black: str
    red: str
    green: str
    yellow: str
    blue: str
    magenta: str
    cyan: str
    white: str
    bright_black: str
    bright_red: str
    bright_green: str
    bright_yellow: str
    bright_blue: str
    bright_magenta: str
    bright_cyan: str
    bright_white: str
    background: str
    foreground: str
    cursor: Optional[str] = None
    selection: Optional[str] = None

    def __post_init__(self) -> None:
        for name in REQUIRED_FIELDS:
            _require_hex(name, getattr(self, name))
        for name in OPTIONAL_FIELDS:
            value = getattr(self, name)
            if value is not None:
                _require_hex(name, value)


def is_hex_color(value: object) -> bool:
    """Return ``True`` when ``value`` is a ``#RRGGBB`` string."""

    return isinstance(value, str) and bool(_HEX_COLOR.match(value))


def hex_from_triplet(color: ColorTriplet, *, upper: bool = False) -> str:
    """Format ``color`` as ``#rrggbb`` (or ``#RRGGBB`` when ``upper``)."""

    if upper:
        return "#{:02X}{:02X}{:02X}".format(
            color.red,
            color.green,
            color.blue,
        )
    return color.hex


def normalize_color(value: str) -> Optional[str]:
    """Return ``value`` as a hex color, or ``None`` if unrecognized.

    ``#RRGGBB`` input is returned unchanged so source casing survives.
    Short ``#RGB``, xrdb ``rgb:r/g/b`` and anything ``rich`` can parse
    into a truecolor are converted to lowercase ``#rrggbb``.
    """

    candidate = value.strip()
    if _HEX_COLOR.match(candidate):
        return candidate

    short = _SHORT_HEX_COLOR.match(candidate)
    if short:
        digits = short.group(1)
        return "#" + "".join(digit * 2 for digit in digits).lower()

    xrdb = _XRDB_RGB.match(candidate)
    if xrdb:
        channels = [_scale_xrdb_channel(part) for part in xrdb.groups()]
        return hex_from_triplet(ColorTriplet(*channels))

    if not candidate or candidate.lower() == "default":
        return None
    try:
        parsed = Color.parse(candidate)
    except ColorParseError:
        return None
    return hex_from_triplet(parsed.get_truecolor())


def palette_to_dict(palette: ColorPalette) -> dict[str, Optional[str]]:
    """Return the palette as a plain mapping keyed by field name."""

    return asdict(palette)


def palette_from_dict(payload: Mapping[str, Any]) -> ColorPalette:
    """Build a palette from ``payload``, raising ``ValueError`` if invalid."""

    if not isinstance(payload, Mapping):
        raise ValueError("Palette payload must be a mapping.")
    unknown = sorted(set(payload) - set(PALETTE_FIELDS))
    if unknown:
        raise ValueError(f"Unknown palette keys: {', '.join(unknown)}")
    missing = [name for name in REQUIRED_FIELDS if name not in payload]
    if missing:
        raise ValueError(f"Missing palette keys: {', '.join(missing)}")
    values = {name: payload.get(name) for name in PALETTE_FIELDS}
    return ColorPalette(**values)


def palette_to_json(palette: ColorPalette) -> str:
    """Serialize ``palette`` as pretty-printed JSON."""

    return json.dumps(palette_to_dict(palette), indent=2)


def palette_from_json(text: str) -> ColorPalette:
    """Deserialize a palette written by ``palette_to_json``."""

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid palette JSON: {exc}") from exc
    return palette_from_dict(payload)


def apply_overrides(
    palette: ColorPalette,
    overrides: Mapping[str, str] | None,
) -> ColorPalette:
    """Return a copy of ``palette`` with ``overrides`` applied by field."""

    if not overrides:
        return palette
    known = {item.name for item in fields(ColorPalette)}
    changes: dict[str, str] = {}
    for key, raw_value in overrides.items():
        name = key.strip().lower().replace("-", "_")
        if name not in known:
            raise ValueError(f"Unknown palette field in overrides: {key!r}")
        color = normalize_color(raw_value)
        if color is None:
            raise ValueError(
                f"Override for {key!r} is not a color: {raw_value!r}"
            )
        changes[name] = color
    return replace(palette, **changes)


def is_dark(palette: ColorPalette) -> bool:
    """Return ``True`` when the palette background reads as dark."""

    background = Color.parse(palette.background).get_truecolor()
    luminance = (
        0.299 * background.red
        + 0.587 * background.green
        + 0.114 * background.blue
    ) / 255
    return luminance < 0.5


def _require_hex(name: str, value: object) -> None:
    if not is_hex_color(value):
        raise ValueError(
            f"Palette field '{name}' must be a #RRGGBB color, got {value!r}."
        )


def _scale_xrdb_channel(digits: str) -> int:
    maximum = (16 ** len(digits)) - 1
    return max(0, min(255, round(int(digits, 16) * 255 / maximum)))
