"""Credentials and persistent JSON config helpers.

Credentials come from the environment and are mandatory. The JSON config
(theme, last query) is optional: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from ..errors import ConfigurationError

APP_NAME = "seektree"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

USER_ENV_VAR = "SOULSEEK_USER"
PASSWORD_ENV_VAR = "SOULSEEK_PASSWORD"


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


def load_credentials(environ: Mapping[str, str] | None = None) -> Credentials:
    """Read account credentials from the environment.

    Raises ``ConfigurationError`` naming every missing or blank variable.
    """
    env = os.environ if environ is None else environ
    username = env.get(USER_ENV_VAR, "")
    password = env.get(PASSWORD_ENV_VAR, "")
    missing = [
        name
        for name, value in ((USER_ENV_VAR, username), (PASSWORD_ENV_VAR, password))
        if not value.strip()
    ]
    if missing:
        raise ConfigurationError(f"missing required environment variable(s): {', '.join(missing)}")
    return Credentials(username=username, password=password)


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep runtime behavior
    non-fatal when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def _load_string(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _save_string(key: str, value: str) -> None:
    stripped = str(value).strip()
    if not stripped:
        return
    config = load_config()
    config[key] = stripped
    save_config(config)


def load_theme_name() -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    return _load_string("theme")


def save_theme_name(theme_name: str) -> None:
    """Persist selected UI theme name."""
    _save_string("theme", theme_name)


def load_last_query() -> str | None:
    """Load the most recently submitted search query."""
    return _load_string("last_query")


def save_last_query(query: str) -> None:
    """Persist a submitted search query; blank queries are ignored."""
    _save_string("last_query", query)
