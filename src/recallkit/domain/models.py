"""
Domain models for review scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any

from .constants import DEFAULT_DAILY_NEW_LIMIT, INITIAL_EASINESS_FACTOR


@dataclass(frozen=True)
class CatalogItem:
    """
    A learnable item from the vocabulary catalog.

    Attributes:
        id: Stable, unique integer identifier.
        payload: Opaque content (word, translation, audio...). Never inspected.
    """

    id: int
    payload: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class ReviewState:
    """
    SM-2 review state for a single catalog item.

    Attributes:
        interval: Days until the item is due again. 0 means due immediately.
        repetition: Consecutive successful responses.
        easiness_factor: Interval growth multiplier (>= 1.3).
        last_reviewed_at: Epoch milliseconds of the last graded response,
            or of the memo that created the state.
        memo: Optional free-text note attached by the learner.
    """

    interval: int = 0
    repetition: int = 0
    easiness_factor: float = INITIAL_EASINESS_FACTOR
    last_reviewed_at: int = 0
    memo: str | None = None

    @classmethod
    def initial(cls, now_ms: int = 0) -> "ReviewState":
        return cls(last_reviewed_at=now_ms)

    def with_memo(self, memo: str | None) -> "ReviewState":
        return replace(self, memo=memo)


@dataclass
class SchedulerSnapshot:
    """
    The complete persisted state of a scheduling store.

    Saved as a single unit after every mutation.
    """

    progress: dict[int, ReviewState] = field(default_factory=dict)
    daily_new_limit: int = DEFAULT_DAILY_NEW_LIMIT
    new_learned_today: int = 0
    last_activity_date: date = field(default_factory=date.today)
    last_studied_at: int | None = None

    def copy(self) -> "SchedulerSnapshot":
        return replace(self, progress=dict(self.progress))


@dataclass(frozen=True)
class StudySummary:
    """Counts describing the learner's position at a given moment."""

    total_items: int
    unseen: int
    learning: int  # interval == 0
    scheduled: int  # interval > 0
    due_reviews: int  # learning + elapsed scheduled items
    new_available: int  # unseen items admitted by today's quota
    new_learned_today: int
    daily_new_limit: int

    @property
    def due_total(self) -> int:
        return self.due_reviews + self.new_available
