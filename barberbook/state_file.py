from __future__ import annotations

import json
import logging
import os
import tempfile
from typing import Any, Protocol

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"


class StateStorage(Protocol):
    def load(self) -> dict[str, Any] | None: ...

    def save(self, blob: dict[str, Any]) -> None: ...


def load_blob(path: str) -> dict[str, Any] | None:
    if not os.path.exists(path):
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        # Corrupted state shouldn't brick the scheduler; start fresh.
        logger.warning("Failed to load state from %s (%s: %s)", path, type(e).__name__, e)
        return None

    if not isinstance(raw, dict):
        logger.warning("Ignoring state in %s: expected a JSON object, got %s", path, type(raw).__name__)
        return None
    return raw


def save_blob(path: str, blob: dict[str, Any]) -> None:
    folder = os.path.dirname(os.path.abspath(path))
    if folder and not os.path.exists(folder):
        os.makedirs(folder, exist_ok=True)

    # Atomic write
    with tempfile.NamedTemporaryFile("w", delete=False, encoding="utf-8", dir=folder, suffix=".tmp") as tf:
        json.dump(blob, tf, ensure_ascii=False, indent=2)
        tmp_name = tf.name

    os.replace(tmp_name, path)


class JsonStateFile:
    def __init__(self, path: str) -> None:
        self.path = path

    def load(self) -> dict[str, Any] | None:
        return load_blob(self.path)

    def save(self, blob: dict[str, Any]) -> None:
        save_blob(self.path, blob)


class MemoryStateStorage:
    """Keeps the last saved blob in memory; used for ``STATE_FILE=:memory:`` and tests."""

    def __init__(self, blob: dict[str, Any] | None = None) -> None:
        self.blob = blob
        self.save_count = 0

    def load(self) -> dict[str, Any] | None:
        return json.loads(json.dumps(self.blob)) if self.blob is not None else None

    def save(self, blob: dict[str, Any]) -> None:
        self.blob = json.loads(json.dumps(blob))
        self.save_count += 1


def open_storage(path: str) -> StateStorage:
    if path == MEMORY_PATH:
        return MemoryStateStorage()
    return JsonStateFile(path)
