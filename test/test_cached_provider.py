from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import pytest

from termscheme.errors import NotFoundError
from termscheme.errors import RetrievalError
from termscheme.palette import ColorPalette
from termscheme.palette import palette_from_json
from termscheme.providers.base import SchemeProvider
from termscheme.providers.cached import CachedProvider


def _palette(**overrides: str | None) -> ColorPalette:
    values: dict[str, str | None] = {
        name: "#808080"
        for name in (
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
    }
    values.update(background="#000000", foreground="#FFFFFF")
    values.update(overrides)
    return ColorPalette(**values)


class MockProvider(SchemeProvider):
    """Serve registered palettes and count fetches."""

    def __init__(self, schemes: dict[str, ColorPalette]) -> None:
        self.schemes = schemes
        self.fetches: list[tuple[str, Optional[str]]] = []

    def fetch(self, name: str, variant: Optional[str] = None) -> ColorPalette:
        self.fetches.append((name, variant))
        if name not in self.schemes:
            raise NotFoundError("Unknown scheme", source="Mock", scheme=name)
        return self.schemes[name]

    def list_available(self) -> set[str]:
        return set(self.schemes)

    def provider_name(self) -> str:
        return "Mock"


class FetchOnceProvider(MockProvider):
    """Fail the test if the same identity is fetched twice."""

    def fetch(self, name: str, variant: Optional[str] = None) -> ColorPalette:
        if (name, variant) in self.fetches:
            raise AssertionError(f"{name!r} fetched twice")
        return super().fetch(name, variant)


def test_mock_provider_end_to_end():
    palette = _palette()
    provider = MockProvider({"Test Theme": palette})

    assert provider.fetch("Test Theme") == palette
    assert provider.fetch("Test Theme").background == "#000000"
    assert provider.fetch("Test Theme").foreground == "#FFFFFF"
    with pytest.raises(NotFoundError):
        provider.fetch("Missing")


def test_first_fetch_populates_one_cache_file(tmp_path):
    cache_dir = tmp_path / "cache"
    provider = CachedProvider(
        FetchOnceProvider({"X": _palette(cursor="#ABCDEF")}),
        cache_dir,
    )

    first = provider.fetch("X")

    assert sorted(path.name for path in cache_dir.iterdir()) == [
        "X-default.json",
    ]
    second = provider.fetch("X")
    assert second == first
    assert second.cursor == "#ABCDEF"
    assert second.selection is None


def test_cache_file_holds_pretty_printed_palette(tmp_path):
    palette = _palette(selection="#123456")
    provider = CachedProvider(MockProvider({"X": palette}), tmp_path)

    provider.fetch("X", "night")

    text = (tmp_path / "X-night.json").read_text(encoding="utf-8")
    assert text.startswith("{\n  ")
    assert palette_from_json(text) == palette


def test_variants_are_cached_separately(tmp_path):
    inner = MockProvider({"Test Theme": _palette()})
    provider = CachedProvider(inner, tmp_path)

    provider.fetch("Test Theme", "variant")
    provider.fetch("Test Theme")
    provider.fetch("Test Theme", "variant")

    assert (tmp_path / "Test Theme-variant.json").exists()
    assert (tmp_path / "Test Theme-default.json").exists()
    assert inner.fetches == [("Test Theme", "variant"), ("Test Theme", None)]


def test_existing_cache_file_skips_inner_provider(tmp_path):
    seeded = _palette(red="#FF0000")
    seeding = CachedProvider(MockProvider({"X": seeded}), tmp_path)
    seeding.fetch("X")

    inner = MockProvider({})
    provider = CachedProvider(inner, tmp_path)

    assert provider.fetch("X") == seeded
    assert inner.fetches == []


@pytest.mark.parametrize(
    "content",
    [
        "",
        '{"black": "#000000"',
        '{"black": "nope"}',
        "[]",
    ],
)
def test_corrupt_cache_file_is_a_miss(tmp_path, content):
    (tmp_path / "X-default.json").write_text(content, encoding="utf-8")
    palette = _palette()
    inner = MockProvider({"X": palette})
    provider = CachedProvider(inner, tmp_path)

    assert provider.fetch("X") == palette
    assert inner.fetches == [("X", None)]
    text = (tmp_path / "X-default.json").read_text(encoding="utf-8")
    assert palette_from_json(text) == palette


def test_inner_errors_propagate_unchanged(tmp_path):
    error = RetrievalError("gh api failed", source="GitHub:o/r")

    class BrokenProvider(MockProvider):
        def fetch(
            self,
            name: str,
            variant: Optional[str] = None,
        ) -> ColorPalette:
            raise error

    provider = CachedProvider(BrokenProvider({}), tmp_path)

    with pytest.raises(RetrievalError) as excinfo:
        provider.fetch("X")

    assert excinfo.value is error
    assert list(tmp_path.iterdir()) == []


def test_cache_write_failure_is_swallowed(tmp_path, monkeypatch, caplog):
    palette = _palette()
    provider = CachedProvider(MockProvider({"X": palette}), tmp_path)
    original_write_text = Path.write_text

    def fake_write_text(self, *args, **kwargs):  # noqa: ANN001
        if self.parent == tmp_path:
            raise PermissionError("read-only")
        return original_write_text(self, *args, **kwargs)

    monkeypatch.setattr(Path, "write_text", fake_write_text)

    with caplog.at_level(logging.WARNING):
        assert provider.fetch("X") == palette

    assert "Could not write cache file" in caplog.text
    assert list(tmp_path.iterdir()) == []


def test_unwritable_cache_dir_is_swallowed(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    palette = _palette()
    provider = CachedProvider(MockProvider({"X": palette}), blocker / "cache")

    assert provider.fetch("X") == palette


def test_listing_and_name_pass_through(tmp_path):
    inner = MockProvider({"a": _palette(), "b": _palette()})
    provider = CachedProvider(inner, tmp_path)

    assert provider.list_available() == {"a", "b"}
    assert provider.provider_name() == "Mock"
    assert provider.provider is inner
    assert list(tmp_path.iterdir()) == []


def test_overlong_name_falls_through_to_inner_provider(tmp_path, caplog):
    name = "x" * 300
    palette = _palette()
    inner = MockProvider({name: palette})
    provider = CachedProvider(inner, tmp_path)

    with caplog.at_level(logging.WARNING):
        assert provider.fetch(name) == palette
        assert provider.fetch(name) == palette

    assert inner.fetches == [(name, None), (name, None)]
    assert "Could not" in caplog.text
    assert list(tmp_path.iterdir()) == []


def test_cache_file_that_is_a_directory_is_a_miss(tmp_path):
    (tmp_path / "X-default.json").mkdir()
    palette = _palette()
    inner = MockProvider({"X": palette})
    provider = CachedProvider(inner, tmp_path)

    assert provider.fetch("X") == palette
    assert inner.fetches == [("X", None)]


@pytest.mark.parametrize("name", ["../escaped", "nested/name", "a\\b"])
def test_names_with_path_separators_are_not_cached(tmp_path, name):
    cache_dir = tmp_path / "cache"
    palette = _palette()
    inner = MockProvider({name: palette})
    provider = CachedProvider(inner, cache_dir)

    assert provider.fetch(name) == palette
    assert provider.fetch(name) == palette

    assert len(inner.fetches) == 2
    assert not cache_dir.exists()
    assert list(tmp_path.iterdir()) == []
    with pytest.raises(ValueError):
        provider.cache_path(name)
