"""In-memory snapshot store."""

import copy
from typing import Any

from recallkit.domain.ports import SnapshotStore


class MemorySnapshotStore(SnapshotStore):
    """Keeps snapshots in a dict. Nothing survives the process."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self.data: dict[str, Any] = dict(initial or {})
        self.save_count = 0

    def load(self, key: str) -> Any | None:
        return copy.deepcopy(self.data.get(key))

    def save(self, key: str, data: dict[str, Any]) -> None:
        self.data[key] = copy.deepcopy(data)
        self.save_count += 1
