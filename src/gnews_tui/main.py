#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from textual.theme import BUILTIN_THEMES

from .app import NewsApp
from .bookmarks import BookmarkStore
from .client import ArticleFeedClient
from .config import DEFAULT_THEME, load_config, resolve_settings, setup_logging
from .prefs import FilePreferences

logger = logging.getLogger("gnews")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="GNews TUI Client")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--theme",
        type=str,
        help=f"Set theme for this run. Available: {', '.join(BUILTIN_THEMES)}",
    )
    parser.add_argument("--api-key", dest="api_key", help="GNews API key")
    parser.add_argument("--lang", dest="language", help="Article language (default: en)")
    parser.add_argument("--page-size", dest="page_size", type=int, help="Articles per page")
    return parser


# --- Entrypoint ---
def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    debug_path = setup_logging(args.debug)
    if debug_path:
        print(f"Debug logging enabled: {debug_path}", file=sys.stderr)

    config = load_config()
    try:
        settings = resolve_settings(
            config,
            {
                "api_key": args.api_key,
                "language": args.language,
                "page_size": args.page_size,
                "theme": args.theme,
            },
        )
    except ValueError as e:
        print(f"Invalid setting: {e}", file=sys.stderr)
        sys.exit(2)

    theme_name = settings.theme
    if theme_name not in BUILTIN_THEMES:
        print(f"Theme '{theme_name}' not found, falling back to {DEFAULT_THEME}.", file=sys.stderr)
        theme_name = DEFAULT_THEME

    logger.info("Using theme: %s", theme_name)

    client = None
    if settings.api_key:
        client = ArticleFeedClient(
            settings.api_key,
            base_url=settings.base_url,
            language=settings.language,
            page_size=settings.page_size,
        )
    store = BookmarkStore(FilePreferences(settings.preferences_file))

    try:
        app = NewsApp(client, store, theme=theme_name, config=config)
        app.run()
    except Exception as e:
        logger.exception("Application crashed: %s", e)
        print(f"Application crashed: {e}", file=sys.stderr)
    finally:
        if client is not None:
            client.close()


if __name__ == "__main__":
    main()
