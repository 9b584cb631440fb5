from datetime import datetime

import pytest

from recallkit.application.scheduler import SchedulingStore
from recallkit.domain.models import CatalogItem
from recallkit.infrastructure.clock import FixedClock
from recallkit.infrastructure.storage import MemorySnapshotStore


@pytest.fixture
def clock():
    """A clock frozen at noon, so hour-level moves never cross midnight."""
    return FixedClock.at(datetime(2026, 3, 10, 12, 0, 0))


@pytest.fixture
def catalog():
    return [
        CatalogItem(id=1, payload={"word": "alma", "meaning": "apple"}),
        CatalogItem(id=2, payload={"word": "kutya", "meaning": "dog"}),
        CatalogItem(id=3, payload={"word": "macska", "meaning": "cat"}),
        CatalogItem(id=4, payload={"word": "ház", "meaning": "house"}),
        CatalogItem(id=5, payload={"word": "víz", "meaning": "water"}),
    ]


@pytest.fixture
def snapshots():
    return MemorySnapshotStore()


@pytest.fixture
def store(catalog, snapshots, clock):
    return SchedulingStore.open(catalog, snapshots, clock)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Isolate config files and env from the developer's machine
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "RECALLKIT_CATALOG_PATH",
        "RECALLKIT_DATA_DIR",
        "RECALLKIT_BACKEND",
        "RECALLKIT_STORAGE_KEY",
        "RECALLKIT_VERBOSE",
    ):
        monkeypatch.delenv(var, raising=False)
    return home
