# Snapshot storage adapters
from .json_store import JsonFileSnapshotStore
from .memory_store import MemorySnapshotStore

__all__ = ["JsonFileSnapshotStore", "MemorySnapshotStore"]
