"""Command-line entry point for termscheme.

Provides ``generate`` (write the site stylesheet), ``list`` (show the
schemes a source offers) and ``show`` (print one scheme as CSS).
"""

from __future__ import annotations

import argparse
from dataclasses import replace
import logging
from pathlib import Path
import sys
import textwrap
from typing import Callable

from .config import AppConfig, ColorschemeConfig, ConfigError, load_config
from .css import to_css_variables, to_theme_css
from .errors import ColorSchemeError
from .generator import (
    generate_colorscheme_css,
    list_available_schemes,
    select_provider,
)

CONFIG_ATTR = "_config"


def build_parser() -> argparse.ArgumentParser:
    """Create the top-level argument parser."""

    parser = argparse.ArgumentParser(
        prog="termscheme",
        description=textwrap.dedent(
            """
            Turn terminal color schemes into CSS custom properties. The
            `generate` subcommand writes the configured stylesheet, `list`
            shows available schemes and `show` prints one scheme as CSS.
            """
        ).strip(),
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=(
            "Path to a YAML configuration file. Defaults to "
            "$TERMSCHEME_CONFIG or ~/.config/termscheme/config.yaml."
        ),
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log cache and fetch activity.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Write the color scheme stylesheet",
    )
    generate_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Stylesheet path (overrides config).",
    )
    _add_scheme_arguments(generate_parser, name_required=False)
    generate_parser.add_argument(
        "--force",
        action="store_true",
        help="Regenerate even when the stylesheet is up to date.",
    )
    generate_parser.set_defaults(handler=_run_generate)

    list_parser = subparsers.add_parser(
        "list",
        help="List schemes available from a source",
    )
    list_parser.add_argument(
        "--source",
        default=None,
        help="Scheme source (iterm2, ghostty, base16 or owner/repo).",
    )
    list_parser.set_defaults(handler=_run_list)

    show_parser = subparsers.add_parser(
        "show",
        help="Print one scheme as CSS variables",
    )
    _add_scheme_arguments(show_parser, name_required=True)
    show_parser.add_argument(
        "--selector",
        default=None,
        help="Emit the variables under this selector instead of :root.",
    )
    show_parser.set_defaults(handler=_run_show)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point used by console scripts and ``python -m termscheme.cli``."""

    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        parser.error(str(exc))

    setattr(args, CONFIG_ATTR, config)

    handler: Callable[[argparse.Namespace], int] = args.handler
    return handler(args)


def _add_scheme_arguments(
    parser: argparse.ArgumentParser,
    *,
    name_required: bool,
) -> None:
    if name_required:
        parser.add_argument("name", help="Scheme name, e.g. 'Dracula'.")
    else:
        parser.add_argument(
            "--name",
            default=None,
            help="Scheme name (overrides config).",
        )
    parser.add_argument(
        "--source",
        default=None,
        help="Scheme source (iterm2, ghostty, base16 or owner/repo).",
    )
    parser.add_argument(
        "--variant",
        default=None,
        help="Scheme variant (defaults to 'default').",
    )


def _run_generate(args: argparse.Namespace) -> int:
    config: AppConfig = getattr(args, CONFIG_ATTR)
    scheme = _resolve_scheme(args, config)
    if scheme is None:
        print(
            "A scheme name is required via --name or the config file.",
            file=sys.stderr,
        )
        return 2

    output = args.output or config.output
    try:
        written = generate_colorscheme_css(
            scheme,
            output,
            cache_dir=config.cache_dir,
            force=args.force,
        )
    except ColorSchemeError as exc:
        print(f"Failed to fetch colorscheme: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"Invalid custom colors: {exc}", file=sys.stderr)
        return 2

    if written:
        print(f"Generated colorscheme CSS: {output}")
    else:
        print(f"Colorscheme CSS is up to date: {output}")
    return 0


def _run_list(args: argparse.Namespace) -> int:
    config: AppConfig = getattr(args, CONFIG_ATTR)
    source = args.source
    if source is None and config.colorscheme is not None:
        source = config.colorscheme.source

    try:
        names = list_available_schemes(source)
    except ColorSchemeError as exc:
        print(f"Failed to list schemes: {exc}", file=sys.stderr)
        return 1

    for name in names:
        print(name)
    return 0


def _run_show(args: argparse.Namespace) -> int:
    config: AppConfig = getattr(args, CONFIG_ATTR)
    provider = select_provider(args.source, cache_dir=config.cache_dir)
    try:
        palette = provider.fetch(args.name, args.variant)
    except ColorSchemeError as exc:
        print(f"Failed to fetch colorscheme: {exc}", file=sys.stderr)
        return 1

    if args.selector:
        try:
            print(to_theme_css(palette, args.selector), end="")
        except ValueError as exc:
            print(str(exc), file=sys.stderr)
            return 2
    else:
        print(to_css_variables(palette), end="")
    return 0


def _resolve_scheme(
    args: argparse.Namespace,
    config: AppConfig,
) -> ColorschemeConfig | None:
    base = config.colorscheme
    if base is None:
        if args.name is None:
            return None
        base = ColorschemeConfig(name=args.name)

    overrides = {
        key: value
        for key, value in (
            ("name", args.name),
            ("source", args.source),
            ("variant", args.variant),
        )
        if value is not None
    }
    return replace(base, **overrides)


if __name__ == "__main__":
    raise SystemExit(main())
