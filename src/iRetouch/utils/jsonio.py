"""JSON persistence for engine settings."""

from __future__ import annotations

import json
import os
import tempfile
import time
from pathlib import Path
from typing import Any

from ..errors import SettingsError

REPLACE_ATTEMPTS = 5


def read_json(path: Path) -> dict[str, Any]:
    """Read the JSON object stored at *path*.

    Missing files, malformed JSON and non-object documents all raise
    :class:`SettingsError` chained to the underlying cause.
    """

    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError as exc:
        raise SettingsError(f"Settings file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise SettingsError(f"Settings file {path} is not valid JSON") from exc
    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {path} must contain a JSON object")
    return data


def atomic_write_text(path: Path, data: str) -> None:
    """Replace *path* with *data* so readers see either the old or the new text."""

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    staged = Path(name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        for attempt in range(1, REPLACE_ATTEMPTS + 1):
            try:
                os.replace(staged, path)
                return
            except PermissionError:
                # Windows refuses the swap while another process holds *path*.
                if attempt == REPLACE_ATTEMPTS:
                    raise
                time.sleep(0.05 * attempt)
    finally:
        staged.unlink(missing_ok=True)


def write_json(path: Path, data: dict[str, Any]) -> None:
    """Serialise *data* as indented, key-sorted JSON and write it atomically."""

    atomic_write_text(path, json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True))
