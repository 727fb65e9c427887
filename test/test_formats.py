from __future__ import annotations

import pytest

from termscheme.formats import SchemeFormat
from termscheme.formats import detect_format_from_url
from termscheme.formats import strip_listed_extension


def test_filenames_use_format_extension():
    assert SchemeFormat.ITERM2.filename("Dracula") == "Dracula.itermcolors"
    assert SchemeFormat.JSON.filename("a") == "a.json"
    assert SchemeFormat.YAML.filename("a") == "a.yaml"
    assert SchemeFormat.TOML.filename("a") == "a.toml"
    assert SchemeFormat.XRESOURCES.filename("a") == "a.Xresources"


def test_strip_listed_extension():
    assert strip_listed_extension("Solarized Dark.itermcolors") == (
        "Solarized Dark"
    )
    assert strip_listed_extension("v1.2.toml") == "v1.2"
    assert strip_listed_extension("notes.txt") is None
    assert strip_listed_extension("a.Xresources") is None
    assert strip_listed_extension(".json") is None


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://github.com/ghostty-org/ghostty-colors", SchemeFormat.TOML),
        (
            "https://github.com/mbadolato/iTerm2-Color-Schemes",
            SchemeFormat.ITERM2,
        ),
        ("https://example.com/base16/x", SchemeFormat.YAML),
        ("https://example.com/alacritty-theme", SchemeFormat.TOML),
        ("https://example.com/Xresources", SchemeFormat.XRESOURCES),
        ("https://example.com/themes", SchemeFormat.JSON),
        (None, SchemeFormat.JSON),
    ],
)
def test_detect_format_from_url(url, expected):
    assert detect_format_from_url(url) is expected

