#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import logging
import sys

from .app import NewsApp, build_coordinator
from .cache import ArticleCache
from .config import load_config, setup_logging
from .errors import CacheError

logger = logging.getLogger("spacenews")


# --- Entrypoint ---
def main() -> None:
    parser = argparse.ArgumentParser(description="Spaceflight News TUI Client")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--theme", type=str, help="Set theme for this run")
    parser.add_argument("--search", type=str, default="", help="Initial search text")
    parser.add_argument(
        "--clear-cache", action="store_true", help="Delete offline articles and exit"
    )
    args = parser.parse_args()

    debug_path = setup_logging(args.debug)
    if debug_path:
        print(f"Debug logging enabled: {debug_path}", file=sys.stderr)

    config = load_config()

    if args.clear_cache:
        try:
            ArticleCache(config["cache_file"]).clear()
        except CacheError as e:
            print(e.description, file=sys.stderr)
            sys.exit(1)
        print("Offline cache cleared.")
        return

    theme_name = args.theme or config.get("theme")
    logger.info("Using theme: %s", theme_name or "default")

    try:
        app = NewsApp(
            coordinator=build_coordinator(config),
            theme=theme_name,
            initial_search=args.search,
        )
        app.run()
    except Exception as e:
        logger.exception("Application crashed: %s", e)
        print(f"Application crashed: {e}", file=sys.stderr)


if __name__ == "__main__":
    main()
