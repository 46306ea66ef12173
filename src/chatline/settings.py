"""Settings file I/O for chatline.

Manages a JSON settings file at XDG_CONFIG_HOME/chatline/settings.json.
Known keys:
  "displaynames" — {user_id: display name} used when rendering events
  "color"        — whether terminal output is styled (default true)

Import as: import chatline.settings
"""

import json
import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def get_config_path() -> Path:
    """Return path to settings file.

    Uses XDG_CONFIG_HOME (default ~/.config) / chatline / settings.json.
    """
    config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(config_home) / "chatline" / "settings.json"


def load_settings() -> dict:
    """Load settings from JSON file. Returns empty dict on missing/corrupt file."""
    path = get_config_path()
    # [LAW:dataflow-not-control-flow] Always attempt read; empty dict is the "no data" value.
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, UnicodeDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def save_settings(data: dict) -> None:
    """Atomic write of settings dict to JSON file.

    Creates parent directories if needed. Writes to temp file then renames
    to avoid partial writes on crash.
    """
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    # Atomic: write temp → rename
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        os.replace(tmp_path, path)
    except Exception:
        # Clean up temp file on failure
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def load_setting(key: str, default=None):
    """Load a single setting by key. Returns default if absent."""
    return load_settings().get(key, default)


def save_setting(key: str, value) -> None:
    """Save a single setting by key (merge into existing settings)."""
    data = load_settings()
    data[key] = value
    save_settings(data)


def _clean_displaynames(raw: object, source: str) -> dict[str, str]:
    if not isinstance(raw, dict):
        logger.warning("Ignoring displaynames from %s: expected an object", source)
        return {}
    names = {k: v for k, v in raw.items() if isinstance(k, str) and isinstance(v, str)}
    dropped = len(raw) - len(names)
    if dropped:
        logger.warning("Dropped %d non-string displayname entries from %s", dropped, source)
    return names


def load_displaynames() -> dict[str, str]:
    """Load the user_id → display name map from settings."""
    raw = load_setting("displaynames", {})
    return _clean_displaynames(raw, str(get_config_path()))


def save_displayname(user_id: str, name: str) -> None:
    """Record a display name for a user ID."""
    names = load_displaynames()
    names[user_id] = name
    save_setting("displaynames", names)


def load_displayname_file(path: str | Path) -> dict[str, str]:
    """Read a JSON {user_id: display name} file.

    Raises:
        ValueError: If the file cannot be read or is not a JSON object
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValueError(f"Cannot read displayname file {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"Displayname file {path} must contain a JSON object")
    return _clean_displaynames(raw, str(path))


def load_color_enabled() -> bool:
    """Whether styled output is enabled. Defaults to True."""
    return bool(load_setting("color", True))


def save_color_enabled(enabled: bool) -> None:
    save_setting("color", bool(enabled))
