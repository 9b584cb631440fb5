"""
JSON file snapshot store.

Each storage key maps to ``<data_dir>/<key>.json``.
"""

import json
import logging
from pathlib import Path
from typing import Any

from recallkit.domain.errors import PersistenceError
from recallkit.domain.ports import SnapshotStore

logger = logging.getLogger(__name__)


class JsonFileSnapshotStore(SnapshotStore):
    """Persists snapshots as indented UTF-8 JSON files."""

    def __init__(self, data_dir: Path):
        self.data_dir = data_dir

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def load(self, key: str) -> Any | None:
        path = self.path_for(key)
        if not path.exists():
            logger.debug(f"No snapshot at {path}")
            return None

        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            # Unreadable snapshot is treated like a missing one; the store starts fresh.
            logger.warning(f"Could not read snapshot {path}: {e}")
            return None

    def save(self, key: str, data: dict[str, Any]) -> None:
        path = self.path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".json.tmp")
            tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
            tmp.replace(path)
        except OSError as e:
            raise PersistenceError(f"Could not write snapshot {path}: {e}") from e
        logger.debug(f"Saved snapshot to {path}")
