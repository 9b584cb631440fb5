"""
Catalog loader.

Reads the vocabulary catalog from a YAML or JSON file. The file holds a list
of mappings, each with an integer ``id``; every other key becomes the item's
opaque payload. A top-level mapping with an ``items`` list is also accepted.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from recallkit.domain.errors import CatalogError
from recallkit.domain.models import CatalogItem

logger = logging.getLogger(__name__)


def load_catalog(path: Path) -> list[CatalogItem]:
    """
    Load an ordered catalog from ``path``.

    Raises:
        CatalogError: If the file is missing, unparsable, or holds entries
            without a unique integer id.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogError(f"Cannot read catalog {path}: {e}") from e

    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid catalog file {path}: {e}") from e

    items = parse_catalog(raw)
    logger.debug(f"Loaded {len(items)} catalog items from {path}")
    return items


def parse_catalog(raw: Any) -> list[CatalogItem]:
    """Build CatalogItems from already-decoded YAML/JSON data."""
    if raw is None:
        return []
    if isinstance(raw, dict):
        raw = raw.get("items")
    if not isinstance(raw, list):
        raise CatalogError("Catalog must be a list of items (or a mapping with an 'items' list)")

    items: list[CatalogItem] = []
    seen: set[int] = set()
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise CatalogError(f"Catalog entry #{index} is not a mapping")

        item_id = entry.get("id")
        if isinstance(item_id, bool) or not isinstance(item_id, int):
            raise CatalogError(f"Catalog entry #{index} has no integer 'id'")
        if item_id in seen:
            raise CatalogError(f"Duplicate catalog id {item_id}")
        seen.add(item_id)

        payload = {k: v for k, v in entry.items() if k != "id"}
        items.append(CatalogItem(id=item_id, payload=payload))

    return items
