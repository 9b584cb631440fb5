"""
Ports (interfaces) for the scheduling store's collaborators.

These define the contracts that infrastructure adapters must implement.
The application layer depends on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any


class Clock(ABC):
    """
    Port for reading the current time.

    Implementations:
        - SystemClock: Wall-clock time.
        - FixedClock: Settable time for tests.
    """

    @abstractmethod
    def now_ms(self) -> int:
        """Current time as epoch milliseconds."""
        pass

    def today(self) -> date:
        """Current calendar date in the local timezone."""
        return datetime.fromtimestamp(self.now_ms() / 1000).date()


class SnapshotStore(ABC):
    """
    Port for durable storage of the scheduler snapshot.

    The snapshot is an opaque JSON-compatible mapping keyed by a fixed
    storage identifier.

    Implementations:
        - JsonFileSnapshotStore: One JSON file per key in a data directory.
        - MemorySnapshotStore: Process-local dict, for tests and dry runs.
    """

    @abstractmethod
    def load(self, key: str) -> Any | None:
        """
        Fetch the raw snapshot stored under ``key``.

        Returns:
            The decoded payload, or None when nothing has been stored yet.
        """
        pass

    @abstractmethod
    def save(self, key: str, data: dict[str, Any]) -> None:
        """
        Replace the snapshot stored under ``key``.

        Raises:
            PersistenceError: If the snapshot could not be written.
        """
        pass
