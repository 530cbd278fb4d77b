"""
Opener - Configuration
"""
import json
import os
from pathlib import Path
from typing import Any, List

from .log_sink import LogSink

# ─── Settings ─────────────────────────────────────────────────────────────────
SETTINGS_PATH = Path(os.environ.get("OPENER_SETTINGS_PATH", "opener_settings.json"))
NAMESPACE = os.environ.get("OPENER_NAMESPACE", "opener")
SETTINGS_KEY = "customFolders"

# ─── API ──────────────────────────────────────────────────────────────────────
API_TOKEN = os.environ.get("OPENER_API_TOKEN", "opener-local-token")
PORT = int(os.environ.get("OPENER_PORT", 8557))


def load_custom_folders(path: Path, sink: LogSink, namespace: str = NAMESPACE) -> List[Any]:
    """
    Read the raw custom action records from a JSON settings file.
    Accepts either a flat `"opener.customFolders"` key or a nested
    `{"opener": {"customFolders": [...]}}` section. Records are returned
    unvalidated; a missing file means no custom actions.
    """
    if not path.exists():
        return []
    try:
        settings = json.loads(path.read_text(encoding="utf-8-sig"))
    except (OSError, ValueError) as e:
        sink.warn(f"Could not read settings from {path}: {e}")
        return []
    if not isinstance(settings, dict):
        sink.warn(f"Settings file {path} must contain a JSON object")
        return []

    flat_key = f"{namespace}.{SETTINGS_KEY}"
    if flat_key in settings:
        return settings[flat_key]
    section = settings.get(namespace)
    if isinstance(section, dict):
        return section.get(SETTINGS_KEY, [])
    return []
