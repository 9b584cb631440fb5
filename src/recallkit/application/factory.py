"""
Store Factory
Centralizes the wiring of catalog, snapshot storage and clock into a SchedulingStore.
"""

import logging

from recallkit.application.config import AppConfig
from recallkit.application.scheduler import SchedulingStore
from recallkit.domain.errors import CatalogError
from recallkit.domain.ports import Clock, SnapshotStore
from recallkit.infrastructure.catalog import load_catalog
from recallkit.infrastructure.clock import SystemClock
from recallkit.infrastructure.storage import JsonFileSnapshotStore, MemorySnapshotStore

logger = logging.getLogger(__name__)


def get_snapshot_store(config: AppConfig) -> SnapshotStore:
    """
    Returns the SnapshotStore implementation selected by config.
    """
    if config.backend == "memory":
        return MemorySnapshotStore()
    return JsonFileSnapshotStore(config.data_dir)


def build_store(config: AppConfig, clock: Clock | None = None) -> SchedulingStore:
    """
    Load the catalog and persisted progress, and return a ready SchedulingStore.

    Raises:
        CatalogError: If no catalog path is configured or it cannot be loaded.
    """
    if config.catalog_path is None:
        raise CatalogError(
            "No catalog configured. Pass --catalog or set RECALLKIT_CATALOG_PATH."
        )

    catalog = load_catalog(config.catalog_path)
    snapshots = get_snapshot_store(config)
    logger.debug(f"Backend: {config.backend} ({len(catalog)} catalog items)")

    return SchedulingStore.open(
        catalog,
        snapshots,
        clock or SystemClock(),
        storage_key=config.storage_key,
    )
