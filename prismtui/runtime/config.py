"""Persistent JSON preferences.

Stores the default sort mode, sort direction, and UI theme name.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from ..instance_model import SortMode

logger = logging.getLogger(__name__)

APP_NAME = "prismtui"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass(frozen=True)
class Preferences:
    sort_mode: SortMode = SortMode.LAST_PLAYED
    sort_ascending: bool = True
    theme: str | None = None


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored so an unwritable
    config directory never interrupts the session.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def load_preferences() -> Preferences:
    """Read preferences; only well-typed values are accepted."""
    data = load_config()
    ascending = data.get("sort_ascending")
    theme = data.get("theme")
    return Preferences(
        sort_mode=SortMode.from_label(data.get("default_sort")),
        sort_ascending=ascending if isinstance(ascending, bool) else True,
        theme=(theme.strip() or None) if isinstance(theme, str) else None,
    )


def save_preferences(preferences: Preferences) -> None:
    """Merge preferences into the stored document, keeping unknown keys."""
    config = load_config()
    config["default_sort"] = preferences.sort_mode.label
    config["sort_ascending"] = bool(preferences.sort_ascending)
    if preferences.theme:
        config["theme"] = preferences.theme
    save_config(config)
