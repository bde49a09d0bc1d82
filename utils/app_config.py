"""Pre-bootstrap configuration. Zero imports from the rest of the app except constants.

Stores values that must be known before the API client exists (base URL,
remembered token, display preferences). Config lives in
~/.finance_tracker/config.json; FINANCE_TRACKER_* environment variables
(optionally from a .env file) take precedence over the file.
"""
import json
import os
from pathlib import Path

from dotenv import load_dotenv

from utils.constants import DEFAULT_API_URL, DEFAULT_TIMEOUT

CONFIG_DIR = Path.home() / ".finance_tracker"
CONFIG_FILE = CONFIG_DIR / "config.json"

ENV_API_URL = "FINANCE_TRACKER_API_URL"
ENV_TIMEOUT = "FINANCE_TRACKER_TIMEOUT"
ENV_LOG_LEVEL = "FINANCE_TRACKER_LOG_LEVEL"


def load_env() -> None:
    """Populate os.environ from a .env file in the working directory, if any."""
    load_dotenv()


def load_config() -> dict:
    """Returns {} on a missing or corrupt file; never raises."""
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(config: dict) -> None:
    """Creates ~/.finance_tracker/ if needed; atomic write via .tmp + os.replace()."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    tmp = CONFIG_FILE.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, CONFIG_FILE)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def get_setting(key: str, default=None):
    return load_config().get(key, default)


def set_setting(key: str, value) -> None:
    """Update one key in config and save. None removes the key."""
    config = load_config()
    if value is None:
        config.pop(key, None)
    else:
        config[key] = value
    save_config(config)


def get_api_base_url() -> str:
    url = os.getenv(ENV_API_URL) or load_config().get("api_base_url") or DEFAULT_API_URL
    return url.rstrip("/")


def get_timeout() -> float:
    raw = os.getenv(ENV_TIMEOUT) or load_config().get("timeout")
    try:
        return float(raw) if raw else DEFAULT_TIMEOUT
    except (TypeError, ValueError):
        return DEFAULT_TIMEOUT


def get_log_level() -> str:
    return (os.getenv(ENV_LOG_LEVEL) or load_config().get("log_level") or "INFO").upper()


def get_token() -> str | None:
    return load_config().get("token")


def set_token(token: str | None) -> None:
    set_setting("token", token)
