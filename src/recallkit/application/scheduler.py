"""
Scheduling store.

Holds the learner's progress map and daily counters, and answers the one
question that matters: which items are due right now.

Due-set rules, applied in catalog order:
1. Unseen items are admitted while today's new-item quota lasts.
2. Items in the learning phase (interval 0) are always due.
3. Scheduled items are due once the elapsed (fractional) days since their
   last review reach their interval.
"""

import logging
import threading
from collections.abc import Sequence
from dataclasses import replace
from datetime import date

from recallkit.application.snapshot_codec import decode_snapshot, encode_snapshot
from recallkit.domain.constants import DEFAULT_STORAGE_KEY, ONE_DAY_MS
from recallkit.domain.errors import InvalidDailyLimitError
from recallkit.domain.models import (
    CatalogItem,
    ReviewState,
    SchedulerSnapshot,
    StudySummary,
)
from recallkit.domain.ports import Clock, SnapshotStore
from recallkit.domain.sm2 import transition, validate_grade

logger = logging.getLogger(__name__)


class SchedulingStore:
    """
    Stateful SM-2 scheduler over a fixed catalog.

    Every public method runs under a single lock. A mutation is applied to a
    copy of the state, saved through the snapshot store, and only then
    becomes visible; a failed save leaves the store unchanged.
    """

    def __init__(
        self,
        catalog: Sequence[CatalogItem],
        snapshot_store: SnapshotStore,
        clock: Clock,
        snapshot: SchedulerSnapshot | None = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
    ):
        """
        Args:
            catalog: Ordered, immutable list of learnable items.
            snapshot_store: Persistence port, called after each mutation.
            clock: Source of "now" and "today".
            snapshot: Starting state; defaults to an empty one.
            storage_key: Identifier the snapshot is saved under.
        """
        self._catalog = tuple(catalog)
        self._snapshots = snapshot_store
        self._clock = clock
        self._state = snapshot or SchedulerSnapshot(last_activity_date=clock.today())
        self._storage_key = storage_key
        self._lock = threading.RLock()

    @classmethod
    def open(
        cls,
        catalog: Sequence[CatalogItem],
        snapshot_store: SnapshotStore,
        clock: Clock,
        storage_key: str = DEFAULT_STORAGE_KEY,
    ) -> "SchedulingStore":
        """Load the persisted snapshot (or defaults) and build a store around it."""
        raw = snapshot_store.load(storage_key)
        snapshot = decode_snapshot(raw, today=clock.today())
        logger.debug(
            f"Opened store '{storage_key}' with {len(snapshot.progress)} studied items"
        )
        return cls(catalog, snapshot_store, clock, snapshot=snapshot, storage_key=storage_key)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def catalog(self) -> tuple[CatalogItem, ...]:
        return self._catalog

    @property
    def daily_new_limit(self) -> int:
        with self._lock:
            return self._state.daily_new_limit

    @property
    def new_learned_today(self) -> int:
        """Stored counter. May be stale across midnight until the next answer."""
        with self._lock:
            return self._state.new_learned_today

    @property
    def last_activity_date(self) -> date:
        with self._lock:
            return self._state.last_activity_date

    @property
    def last_studied_at(self) -> int | None:
        with self._lock:
            return self._state.last_studied_at

    def get_state(self, item_id: int) -> ReviewState | None:
        with self._lock:
            return self._state.progress.get(item_id)

    def get_review_interval(self, item_id: int) -> int:
        """Interval in days for ``item_id``; 0 when it has never been studied."""
        state = self.get_state(item_id)
        return state.interval if state else 0

    def snapshot(self) -> SchedulerSnapshot:
        with self._lock:
            return self._state.copy()

    def get_due_words(self) -> list[CatalogItem]:
        """
        Items due now, in catalog order.

        Side-effect free: a day rollover is only reflected in the effective
        new-item count, never written back.
        """
        with self._lock:
            now = self._clock.now_ms()
            remaining = self._new_words_remaining(self._clock.today())

            due: list[CatalogItem] = []
            new_added = 0
            for item in self._catalog:
                state = self._state.progress.get(item.id)
                if state is None:
                    if new_added < remaining:
                        due.append(item)
                        new_added += 1
                elif _is_review_due(state, now):
                    due.append(item)
            return due

    def summary(self) -> StudySummary:
        """Counts of unseen, learning, scheduled and due items right now."""
        with self._lock:
            now = self._clock.now_ms()
            today = self._clock.today()
            remaining = self._new_words_remaining(today)

            unseen = learning = scheduled = due_reviews = 0
            for item in self._catalog:
                state = self._state.progress.get(item.id)
                if state is None:
                    unseen += 1
                    continue
                if state.interval == 0:
                    learning += 1
                else:
                    scheduled += 1
                if _is_review_due(state, now):
                    due_reviews += 1

            return StudySummary(
                total_items=len(self._catalog),
                unseen=unseen,
                learning=learning,
                scheduled=scheduled,
                due_reviews=due_reviews,
                new_available=min(unseen, remaining),
                new_learned_today=self._effective_new_learned(today),
                daily_new_limit=self._state.daily_new_limit,
            )

    # ------------------------------------------------------------------
    # Write side
    # ------------------------------------------------------------------

    def submit_answer(self, item_id: int, grade: int) -> ReviewState:
        """
        Record a graded response for ``item_id``.

        Unknown ids are treated as brand-new items. An item counts toward
        today's new-item quota on its first attempt, whether it passed or not.

        Raises:
            InvalidGradeError: If grade is not an integer in 0..5.
        """
        grade = validate_grade(grade)

        with self._lock:
            now = self._clock.now_ms()
            today = self._clock.today()
            state = self._state.copy()

            if state.last_activity_date != today:
                logger.debug(f"Day rollover {state.last_activity_date} -> {today}")
                state.new_learned_today = 0

            prior = state.progress.get(item_id) or ReviewState.initial()
            if prior.interval == 0:
                state.new_learned_today += 1

            updated = replace(transition(prior, grade), last_reviewed_at=now, memo=prior.memo)

            state.progress[item_id] = updated
            state.last_studied_at = now
            state.last_activity_date = today
            logger.debug(
                f"Item {item_id} graded {grade}: interval {prior.interval} -> {updated.interval}, "
                f"EF {updated.easiness_factor:.2f}"
            )
            self._commit(state)
            return updated

    def set_daily_new_limit(self, limit: int) -> None:
        """
        Replace the daily new-item quota. Takes effect on the next due query.

        Raises:
            InvalidDailyLimitError: If limit is negative or not an integer.
        """
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise InvalidDailyLimitError(limit)

        with self._lock:
            state = self._state.copy()
            state.daily_new_limit = limit
            self._commit(state)
            logger.debug(f"Daily new limit set to {limit}")

    def set_memo(self, item_id: int, memo: str) -> ReviewState:
        """
        Attach a note to ``item_id`` without touching its schedule.

        An unseen item gets a fresh learning-phase state stamped with the
        current time; it does not count toward today's new-item quota.
        """
        with self._lock:
            existing = self._state.progress.get(item_id)
            if existing is None:
                updated = ReviewState.initial(self._clock.now_ms()).with_memo(memo)
            else:
                updated = existing.with_memo(memo)

            state = self._state.copy()
            state.progress[item_id] = updated
            self._commit(state)
            return updated

    def reset_progress(self) -> None:
        """Forget all progress. The daily limit and activity date are kept."""
        with self._lock:
            state = self._state.copy()
            state.progress = {}
            state.new_learned_today = 0
            state.last_studied_at = None
            self._commit(state)
            logger.info("Progress reset")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _effective_new_learned(self, today: date) -> int:
        if self._state.last_activity_date == today:
            return self._state.new_learned_today
        return 0

    def _new_words_remaining(self, today: date) -> int:
        return max(0, self._state.daily_new_limit - self._effective_new_learned(today))

    def _commit(self, state: SchedulerSnapshot) -> None:
        # Save first: PersistenceError propagates with self._state untouched.
        self._snapshots.save(self._storage_key, encode_snapshot(state))
        self._state = state


def _is_review_due(state: ReviewState, now_ms: int) -> bool:
    if state.interval == 0:
        return True
    days_since_review = (now_ms - state.last_reviewed_at) / ONE_DAY_MS
    return days_since_review >= state.interval
