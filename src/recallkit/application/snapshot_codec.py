"""
Snapshot codec.

Converts SchedulerSnapshot to and from the persisted JSON layout:

    {
      "state": {
        "items": {"<id>": {"interval", "repetition", "efactor", "lastReviewed", "memo"}},
        "dailyNewLimit": 10,
        "newLearnedToday": 0,
        "lastLearnDate": "YYYY-MM-DD",
        "lastStudiedAt": null
      },
      "version": 0
    }

Decoding is forgiving: invalid item entries are dropped and invalid top-level
fields fall back to their defaults, so a partly corrupt snapshot still loads.
"""

import logging
from datetime import date
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from recallkit.domain.constants import (
    DEFAULT_DAILY_NEW_LIMIT,
    MIN_EASINESS_FACTOR,
    SNAPSHOT_VERSION,
)
from recallkit.domain.models import ReviewState, SchedulerSnapshot

logger = logging.getLogger(__name__)


class ReviewStateRecord(BaseModel):
    """Wire shape of one item's review state."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    interval: NonNegativeInt
    repetition: NonNegativeInt
    efactor: float = Field(ge=MIN_EASINESS_FACTOR, allow_inf_nan=False)
    last_reviewed: NonNegativeInt = Field(alias="lastReviewed")
    memo: str | None = None

    @field_validator("memo", mode="before")
    @classmethod
    def drop_malformed_memo(cls, v: Any) -> str | None:
        # A bad note must not cost the item its schedule.
        if v is not None and not isinstance(v, str):
            logger.warning(f"Discarding non-text memo {v!r}")
            return None
        return v

    def to_state(self) -> ReviewState:
        return ReviewState(
            interval=self.interval,
            repetition=self.repetition,
            easiness_factor=self.efactor,
            last_reviewed_at=self.last_reviewed,
            memo=self.memo,
        )

    @classmethod
    def from_state(cls, state: ReviewState) -> "ReviewStateRecord":
        return cls(
            interval=state.interval,
            repetition=state.repetition,
            efactor=state.easiness_factor,
            last_reviewed=state.last_reviewed_at,
            memo=state.memo,
        )


_ITEM_ID = TypeAdapter(int)
_COUNT = TypeAdapter(NonNegativeInt)
_DATE = TypeAdapter(date)
_OPTIONAL_TS = TypeAdapter(NonNegativeInt | None)


def encode_snapshot(snapshot: SchedulerSnapshot) -> dict[str, Any]:
    """Serialize a snapshot to a JSON-compatible dict."""
    items: dict[str, Any] = {}
    for item_id, state in snapshot.progress.items():
        record = ReviewStateRecord.from_state(state).model_dump(by_alias=True)
        if record["memo"] is None:
            del record["memo"]
        items[str(item_id)] = record

    return {
        "state": {
            "items": items,
            "dailyNewLimit": snapshot.daily_new_limit,
            "newLearnedToday": snapshot.new_learned_today,
            "lastLearnDate": snapshot.last_activity_date.isoformat(),
            "lastStudiedAt": snapshot.last_studied_at,
        },
        "version": SNAPSHOT_VERSION,
    }


def decode_snapshot(raw: Any, today: date) -> SchedulerSnapshot:
    """
    Rebuild a snapshot from persisted data.

    Args:
        raw: Decoded JSON payload, or None if nothing was stored.
        today: Date used when the stored activity date is missing or invalid.

    Returns:
        A SchedulerSnapshot. Never raises on malformed input.
    """
    if raw is None:
        return SchedulerSnapshot(last_activity_date=today)

    if not isinstance(raw, dict):
        logger.warning(f"Ignoring snapshot of type {type(raw).__name__}; starting fresh")
        return SchedulerSnapshot(last_activity_date=today)

    # Accept both the wrapped {"state": ..., "version": ...} layout and a bare state.
    state = raw.get("state", raw)
    if not isinstance(state, dict):
        logger.warning("Snapshot 'state' is not a mapping; starting fresh")
        return SchedulerSnapshot(last_activity_date=today)

    return SchedulerSnapshot(
        progress=_decode_items(state.get("items")),
        daily_new_limit=_field(state, "dailyNewLimit", _COUNT, DEFAULT_DAILY_NEW_LIMIT),
        new_learned_today=_field(state, "newLearnedToday", _COUNT, 0),
        last_activity_date=_field(state, "lastLearnDate", _DATE, today),
        last_studied_at=_field(state, "lastStudiedAt", _OPTIONAL_TS, None),
    )


def _decode_items(raw_items: Any) -> dict[int, ReviewState]:
    if raw_items is None:
        return {}
    if not isinstance(raw_items, dict):
        logger.warning("Snapshot 'items' is not a mapping; dropping all progress")
        return {}

    progress: dict[int, ReviewState] = {}
    for key, value in raw_items.items():
        try:
            item_id = _ITEM_ID.validate_python(key)
            record = ReviewStateRecord.model_validate(value)
        except ValidationError as e:
            logger.warning(f"Dropping invalid progress entry {key!r}: {e.error_count()} error(s)")
            continue
        progress[item_id] = record.to_state()
    return progress


def _field(state: dict[str, Any], key: str, adapter: TypeAdapter, default: Any) -> Any:
    if key not in state:
        return default
    try:
        return adapter.validate_python(state[key])
    except ValidationError:
        logger.warning(f"Invalid snapshot field {key}={state[key]!r}; using default {default!r}")
        return default
