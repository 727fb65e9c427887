"""Generate the site's color scheme stylesheet from configuration.

The written file starts with a ``/* Config hash: ... */`` comment. When
the hash for the current configuration is already present the file is
left alone, so repeated site builds skip the fetch entirely.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import ColorschemeConfig
from .css import to_css_variables, to_theme_css
from .formats import detect_format_from_url
from .palette import ColorPalette, apply_overrides, is_dark
from .providers.base import SchemeProvider, variant_key
from .providers.cached import DEFAULT_CACHE_DIR, CachedProvider
from .providers.remote import GitHubSchemeProvider
from .providers.transport import RepositoryClient

LOGGER = logging.getLogger(__name__)

DEFAULT_SOURCE = "iterm2"
DARK_THEME_SELECTOR = ".theme-dark"
LIGHT_THEME_SELECTOR = ".theme-light"

_GHOSTTY_SOURCES = {"ghostty", "ghostty-colors"}
_ITERM2_SOURCES = {"iterm2", "iTerm2-Color-Schemes"}
_BASE16_SOURCES = {"base16"}


def config_hash(config: ColorschemeConfig) -> str:
    """Return the key that identifies a generated stylesheet."""

    source = config.source or DEFAULT_SOURCE
    key = f"{config.name}{variant_key(config.variant)}{source}"
    if config.custom_colors:
        overrides = ",".join(
            f"{field}={color}"
            for field, color in sorted(config.custom_colors.items())
        )
        key = f"{key}:{overrides}"
    return key


def needs_regeneration(config: ColorschemeConfig, css_path: Path) -> bool:
    """Return ``True`` when ``css_path`` is missing or was built otherwise."""

    if not css_path.exists():
        return True
    content = css_path.read_text(encoding="utf-8")
    return f"/* Config hash: {config_hash(config)} */" not in content


def remote_provider_for(
    source: Optional[str],
    url: Optional[str] = None,
    *,
    client: Optional[RepositoryClient] = None,
) -> GitHubSchemeProvider:
    """Return the uncached GitHub provider named by ``source``.

    Known preset names map to their repositories; any other value that
    looks like ``owner/repo`` is used as a repository directly with a
    format guessed from ``url``. Everything else falls back to iTerm2.
    """

    if source in _GHOSTTY_SOURCES:
        return GitHubSchemeProvider.ghostty_colors(client)
    if source in _ITERM2_SOURCES:
        return GitHubSchemeProvider.iterm2_schemes(client)
    if source in _BASE16_SOURCES:
        return GitHubSchemeProvider.base16_schemes(client)
    if source and "/" in source:
        return GitHubSchemeProvider(
            source,
            detect_format_from_url(url),
            client=client,
        )
    return GitHubSchemeProvider.iterm2_schemes(client)


def select_provider(
    source: Optional[str],
    url: Optional[str] = None,
    *,
    cache_dir: Optional[Path] = DEFAULT_CACHE_DIR,
    client: Optional[RepositoryClient] = None,
) -> SchemeProvider:
    """Return the provider for ``source`` cached in ``cache_dir``.

    Passing ``cache_dir=None`` returns the bare remote provider.
    """

    provider = remote_provider_for(source, url, client=client)
    if cache_dir is None:
        return provider
    return CachedProvider(provider, cache_dir)


def render_colorscheme_css(
    config: ColorschemeConfig,
    palette: ColorPalette,
    provider_name: str,
) -> str:
    """Return the full stylesheet text for ``palette``."""

    header = [
        f"/* Config hash: {config_hash(config)} */",
        f"/* Colorscheme: {config.name} {variant_key(config.variant)} */",
    ]
    if config.url:
        header.append(f"/* Source: {config.url} */")
    header.append(f"/* Provider: {provider_name} */")

    selector = LIGHT_THEME_SELECTOR
    if is_dark(palette):
        selector = DARK_THEME_SELECTOR
    return "\n".join(
        [
            *header,
            "",
            to_css_variables(palette),
            to_theme_css(palette, selector),
        ]
    )


def generate_colorscheme_css(
    config: ColorschemeConfig,
    css_path: Path,
    *,
    provider: Optional[SchemeProvider] = None,
    cache_dir: Optional[Path] = DEFAULT_CACHE_DIR,
    force: bool = False,
) -> bool:
    """Write the stylesheet for ``config`` to ``css_path``.

    Returns ``False`` when an up-to-date file was already present and
    ``True`` after writing. Fetch errors propagate to the caller.
    """

    if not force and not needs_regeneration(config, css_path):
        LOGGER.info("Using cached colorscheme CSS: %s", css_path)
        return False

    active = provider or select_provider(
        config.source,
        config.url,
        cache_dir=cache_dir,
    )
    palette = active.fetch(config.name, config.variant)
    palette = apply_overrides(palette, config.custom_colors)

    css = render_colorscheme_css(config, palette, active.provider_name())
    css_path.parent.mkdir(parents=True, exist_ok=True)
    css_path.write_text(css, encoding="utf-8")
    LOGGER.info(
        "Generated colorscheme CSS: %s (source: %s, provider: %s)",
        css_path,
        config.source or "default",
        active.provider_name(),
    )
    return True


def list_available_schemes(
    source: Optional[str] = None,
    *,
    client: Optional[RepositoryClient] = None,
) -> list[str]:
    """Return the sorted scheme names offered by ``source``."""

    return sorted(remote_provider_for(source, client=client).list_available())
