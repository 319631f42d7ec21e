from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional

# --- Configuration ---
API_BASE_URL = "https://api.spaceflightnewsapi.net/v4/articles"
PAGE_LIMIT = 10
HTTP_TIMEOUT = 15
SEARCH_DEBOUNCE_INTERVAL = 0.5

CONFIG_PATH = os.path.expanduser("~/.config/spacenews/config.json")
BOOKMARKS_FILE = os.path.expanduser("~/.config/spacenews/bookmarks.txt")
CACHE_FILE = os.path.expanduser("~/.cache/spacenews/cached_articles.json")

REQUEST_HEADERS = {
    "User-Agent": "spacenews-tui/0.1 (+https://api.spaceflightnewsapi.net)",
    "Accept": "application/json",
}

DEFAULT_CONFIG: Dict[str, Any] = {
    "api_base_url": API_BASE_URL,
    "http_timeout": HTTP_TIMEOUT,
    "search_debounce_interval": SEARCH_DEBOUNCE_INTERVAL,
    "cache_file": CACHE_FILE,
    "bookmarks_file": BOOKMARKS_FILE,
    "theme": None,
}

# --- Logging ---
logger = logging.getLogger("spacenews")


def setup_logging(debug: bool = False) -> Optional[str]:
    """Configure logging."""
    if not debug:
        logging.basicConfig(level=logging.CRITICAL, handlers=[logging.NullHandler()])
        return None

    ts = datetime.now().strftime("%Y%m%dT%H%M%S")
    pid = os.getpid()
    debug_path = f"/tmp/spacenews_debug_{ts}_{pid}.log"

    # A TUI owns the terminal, so debug output can only go to a file
    logging.basicConfig(
        level=logging.DEBUG,
        filename=debug_path,
        filemode="a",
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    logger.debug("Debug logging enabled to %s", debug_path)
    return debug_path


def ensure_config_file_exists(path: str = CONFIG_PATH) -> None:
    """Write the default config file if the user's config file is not found."""
    if os.path.exists(path):
        return
    logger.info("Config file not found at %s, creating default.", path)
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:
            json.dump(DEFAULT_CONFIG, f, indent=2)
    except OSError as e:
        logger.error("Failed to create default config file: %s", e)


def load_config(path: str = CONFIG_PATH) -> Dict[str, Any]:
    """Load the main configuration file, filling in defaults for missing keys."""
    ensure_config_file_exists(path)
    config = dict(DEFAULT_CONFIG)
    try:
        with open(path, "r") as f:
            user_config = json.load(f)
        if isinstance(user_config, dict):
            config.update(user_config)
        else:
            logger.error("Ignoring config at %s: top level is not an object", path)
        logger.info("Loaded config from %s", path)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Failed to load config from %s: %s", path, e)
    return config
