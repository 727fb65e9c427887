"""Render a palette as CSS custom properties."""

from __future__ import annotations

from .palette import ColorPalette

ROOT_HEADER = ":root {"
THEME_COMMENT = "  /* Generated from terminal color scheme */"

# Role order is part of the rendered output.
CSS_ROLE_FIELDS = (
    ("background", "background"),
    ("text", "foreground"),
    ("primary", "blue"),
    ("secondary", "cyan"),
    ("accent", "magenta"),
    ("error", "red"),
    ("warning", "yellow"),
    ("success", "green"),
    ("surface", "bright_black"),
    ("overlay", "black"),
    ("muted", "bright_black"),
    ("subtle", "white"),
    ("border", "bright_black"),
    ("text-light", "white"),
    ("background-light", "black"),
    ("card-background", "background"),
)
OPTIONAL_ROLE_FIELDS = (
    ("cursor", "cursor"),
    ("selection", "selection"),
)


def css_variable_lines(palette: ColorPalette) -> list[str]:
    """Return the ``--color-*`` declarations for ``palette``."""

    lines = [
        f"  --color-{role}: {getattr(palette, field)};"
        for role, field in CSS_ROLE_FIELDS
    ]
    for role, field in OPTIONAL_ROLE_FIELDS:
        value = getattr(palette, field)
        if value:
            lines.append(f"  --color-{role}: {value};")
    return lines


def to_css_variables(palette: ColorPalette) -> str:
    """Render ``palette`` as a ``:root`` block of CSS variables."""

    body = "\n".join(css_variable_lines(palette))
    return f"{ROOT_HEADER}\n{body}\n}}\n"


def to_theme_css(palette: ColorPalette, selector: str) -> str:
    """Render the ``:root`` variables under ``selector`` instead.

    The declarations are lifted from ``to_css_variables`` so both
    renderings always carry the same values.
    """

    if ":root" in selector:
        raise ValueError("Theme selector must not target :root.")
    lines = to_css_variables(palette).splitlines()
    declarations = [
        line
        for line in lines[1:]
        if line.strip() != "}"
    ]
    body = "\n".join([THEME_COMMENT, *declarations])
    return f"{selector.strip()} {{\n{body}\n}}\n"
