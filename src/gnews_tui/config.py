from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

# --- Configuration ---
GNEWS_BASE_URL = "https://gnews.io/api/v4"
HTTP_TIMEOUT = 15
DEFAULT_LANGUAGE = "en"
DEFAULT_PAGE_SIZE = 10
DEFAULT_THEME = "textual-dark"

CATEGORIES = ["General", "Business", "Sports", "Technology"]

CONFIG_PATH = os.path.expanduser("~/.config/gnews/config.json")
PREFERENCES_FILE = os.path.expanduser("~/.config/gnews/bookmark_prefs.json")
BOOKMARKS_KEY = "bookmarks"

REQUEST_HEADERS = {
    "User-Agent": "gnews-tui/0.1 (+https://gnews.io)",
    "Accept": "application/json",
}

# Default UI settings
UI_DEFAULTS = {
    "statusbar_keybindings": (
        "[b {color}]/[/] search, [b {color}]m[/] more, "
        "[b {color}]b[/] bookmark, [b {color}]B[/] bookmarks"
    ),
}

DEFAULT_CONFIG: Dict[str, Any] = {
    "api_key": "",
    "language": DEFAULT_LANGUAGE,
    "page_size": DEFAULT_PAGE_SIZE,
    "theme": DEFAULT_THEME,
}

# --- Logging ---
logger = logging.getLogger("gnews")


def setup_logging(debug: bool = False) -> Optional[str]:
    """Configure logging."""
    if not debug:
        logging.basicConfig(level=logging.CRITICAL, handlers=[logging.NullHandler()])
        return None

    ts = datetime.now().strftime("%Y%m%dT%H%M%S")
    pid = os.getpid()
    debug_path = f"/tmp/gnews_debug_{ts}_{pid}.log"

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
    """Load the main configuration file."""
    ensure_config_file_exists(path)
    try:
        with open(path, "r") as f:
            config = json.load(f)
            logger.info("Loaded config from %s", path)
    except (IOError, json.JSONDecodeError) as e:
        logger.error("Failed to load config from %s: %s", path, e)
        return {}
    if not isinstance(config, dict):
        logger.error("Ignoring config at %s: expected a JSON object", path)
        return {}
    return config


@dataclass
class Settings:
    """Resolved runtime settings for the client and the app."""

    api_key: Optional[str] = None
    language: str = DEFAULT_LANGUAGE
    page_size: int = DEFAULT_PAGE_SIZE
    base_url: str = GNEWS_BASE_URL
    theme: str = DEFAULT_THEME
    preferences_file: str = PREFERENCES_FILE


def resolve_settings(
    config: Mapping[str, Any],
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Merge CLI overrides, environment and config file, in that order of precedence."""
    overrides = {k: v for k, v in (overrides or {}).items() if v is not None}
    environ = os.environ if environ is None else environ

    def pick(name: str, env_var: Optional[str], default: Any) -> tuple[Any, str]:
        if name in overrides:
            return overrides[name], f"--{name.replace('_', '-')}"
        if env_var and environ.get(env_var):
            return environ[env_var], env_var
        if config.get(name) not in (None, ""):
            return config[name], f"config '{name}'"
        return default, "default"

    api_key, _ = pick("api_key", "GNEWS_API_KEY", None)
    language, _ = pick("language", "GNEWS_LANGUAGE", DEFAULT_LANGUAGE)
    page_size, origin = pick("page_size", "GNEWS_PAGE_SIZE", DEFAULT_PAGE_SIZE)
    base_url, _ = pick("base_url", None, GNEWS_BASE_URL)
    theme, _ = pick("theme", None, DEFAULT_THEME)
    preferences_file, _ = pick("preferences_file", None, PREFERENCES_FILE)

    return Settings(
        api_key=api_key or None,
        language=str(language),
        page_size=_parse_page_size(page_size, origin),
        base_url=str(base_url).rstrip("/"),
        theme=str(theme),
        preferences_file=os.path.expanduser(str(preferences_file)),
    )


def _parse_page_size(value: Any, origin: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{origin} must be an integer, got {value!r}") from None
    if parsed <= 0:
        raise ValueError(f"{origin} must be positive, got {parsed}")
    return parsed
