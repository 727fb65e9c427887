from __future__ import annotations

import pytest

from termscheme.errors import ParseError
from termscheme.formats import SchemeFormat
from termscheme.parsing import parse_scheme
from termscheme.structured import GHOSTTY_DIALECT
from termscheme.structured import parse_json
from termscheme.structured import parse_toml
from termscheme.structured import parse_yaml

GHOSTTY_THEME = """
palette_black = "#21222c"
palette_red = "#ff5555"
palette_bright_white = "#ffffff"
background = "#282a36"
foreground = "#f8f8f2"
cursor_color = "#f8f8f2"
selection_background = "#44475a"
"""


def test_ghostty_toml_maps_palette_keys():
    palette = parse_toml(GHOSTTY_THEME, GHOSTTY_DIALECT)

    assert palette.black == "#21222c"
    assert palette.red == "#ff5555"
    assert palette.bright_white == "#ffffff"
    assert palette.background == "#282a36"
    assert palette.foreground == "#f8f8f2"
    assert palette.cursor == "#f8f8f2"
    assert palette.selection == "#44475a"


def test_ghostty_toml_defaults_missing_keys_to_black():
    palette = parse_toml('background = "#101010"\n', GHOSTTY_DIALECT)

    assert palette.background == "#101010"
    assert palette.green == "#000000"
    assert palette.foreground == "#000000"
    assert palette.cursor == "#000000"
    assert palette.selection == "#000000"


def test_ghostty_toml_ignores_non_string_values():
    palette = parse_toml("palette_red = 12\n", GHOSTTY_DIALECT)

    assert palette.red == "#000000"


def test_ghostty_toml_rejects_invalid_color():
    with pytest.raises(ParseError, match="palette_red"):
        parse_toml('palette_red = "sparkly"\n', GHOSTTY_DIALECT)


def test_invalid_toml_is_a_parse_error():
    with pytest.raises(ParseError, match="Failed to parse TOML"):
        parse_toml("palette_red = \n", GHOSTTY_DIALECT)


def test_generic_toml_is_not_implemented():
    with pytest.raises(ParseError, match="not yet implemented"):
        parse_toml(GHOSTTY_THEME)


@pytest.mark.parametrize(
    ("parser", "content"),
    [
        (parse_json, '{"background": "#000000"}'),
        (parse_yaml, "background: '#000000'\n"),
    ],
)
def test_json_and_yaml_are_not_implemented(parser, content):
    with pytest.raises(ParseError, match="not yet implemented"):
        parser(content)


@pytest.mark.parametrize(
    ("parser", "content"),
    [
        (parse_json, "{not json"),
        (parse_yaml, "key: [unclosed\n"),
    ],
)
def test_json_and_yaml_syntax_errors(parser, content):
    with pytest.raises(ParseError, match="Failed to parse"):
        parser(content)


def test_parse_scheme_dispatches_by_format():
    xresources = parse_scheme("*.color1: #123456\n", SchemeFormat.XRESOURCES)
    ghostty = parse_scheme(
        GHOSTTY_THEME,
        SchemeFormat.TOML,
        dialect=GHOSTTY_DIALECT,
    )

    assert xresources.red == "#123456"
    assert ghostty.red == "#ff5555"
    with pytest.raises(ParseError):
        parse_scheme("{}", SchemeFormat.JSON)
