from datetime import date

import pytest

from recallkit.domain.models import ReviewState, SchedulerSnapshot
from recallkit.application.snapshot_codec import decode_snapshot, encode_snapshot

TODAY = date(2026, 3, 10)


def test_encode_uses_persisted_layout():
    snapshot = SchedulerSnapshot(
        progress={
            7: ReviewState(interval=6, repetition=2, easiness_factor=2.6, last_reviewed_at=1000),
            8: ReviewState(interval=0, last_reviewed_at=2000, memo="note"),
        },
        daily_new_limit=15,
        new_learned_today=3,
        last_activity_date=TODAY,
        last_studied_at=1000,
    )

    data = encode_snapshot(snapshot)

    assert data == {
        "state": {
            "items": {
                "7": {"interval": 6, "repetition": 2, "efactor": 2.6, "lastReviewed": 1000},
                "8": {
                    "interval": 0,
                    "repetition": 0,
                    "efactor": 2.5,
                    "lastReviewed": 2000,
                    "memo": "note",
                },
            },
            "dailyNewLimit": 15,
            "newLearnedToday": 3,
            "lastLearnDate": "2026-03-10",
            "lastStudiedAt": 1000,
        },
        "version": 0,
    }


def test_decode_restores_encoded_snapshot():
    snapshot = SchedulerSnapshot(
        progress={3: ReviewState(interval=15, repetition=3, easiness_factor=2.36, last_reviewed_at=5, memo="x")},
        daily_new_limit=0,
        new_learned_today=2,
        last_activity_date=date(2026, 1, 1),
        last_studied_at=None,
    )
    assert decode_snapshot(encode_snapshot(snapshot), today=TODAY) == snapshot


def test_missing_snapshot_gives_defaults():
    snapshot = decode_snapshot(None, today=TODAY)

    assert snapshot.progress == {}
    assert snapshot.daily_new_limit == 10
    assert snapshot.new_learned_today == 0
    assert snapshot.last_activity_date == TODAY
    assert snapshot.last_studied_at is None


@pytest.mark.parametrize("raw", [[], "garbage", 42, {"state": ["not", "a", "dict"]}])
def test_structurally_wrong_snapshot_gives_defaults(raw):
    assert decode_snapshot(raw, today=TODAY) == SchedulerSnapshot(last_activity_date=TODAY)


def test_invalid_items_are_dropped_individually(caplog):
    raw = {
        "state": {
            "items": {
                "1": {"interval": 6, "repetition": 2, "efactor": 2.5, "lastReviewed": 100},
                "2": {"interval": -3, "repetition": 0, "efactor": 2.5, "lastReviewed": 100},
                "3": {"interval": 1, "repetition": 1, "efactor": 0.9, "lastReviewed": 100},
                "4": {"interval": 1, "repetition": 1, "efactor": 2.5},
                "five": {"interval": 1, "repetition": 1, "efactor": 2.5, "lastReviewed": 100},
                "6": "not a record",
                "7": {"interval": 1.5, "repetition": 1, "efactor": 2.5, "lastReviewed": 100},
                "8": {"interval": 0, "repetition": 0, "efactor": 2.5, "lastReviewed": 9, "memo": "ok"},
            },
            "dailyNewLimit": 5,
        },
        "version": 0,
    }

    snapshot = decode_snapshot(raw, today=TODAY)

    assert set(snapshot.progress) == {1, 8}
    assert snapshot.progress[8].memo == "ok"
    assert snapshot.daily_new_limit == 5
    assert "Dropping invalid progress entry" in caplog.text


def test_invalid_top_level_fields_fall_back():
    raw = {
        "state": {
            "items": [],
            "dailyNewLimit": -4,
            "newLearnedToday": "many",
            "lastLearnDate": "yesterday",
            "lastStudiedAt": -1,
        }
    }

    snapshot = decode_snapshot(raw, today=TODAY)

    assert snapshot == SchedulerSnapshot(last_activity_date=TODAY)


def test_bare_state_accepted():
    raw = {
        "items": {"12": {"interval": 1, "repetition": 1, "efactor": 2.5, "lastReviewed": 42}},
        "dailyNewLimit": 20,
        "newLearnedToday": 1,
        "lastLearnDate": "2026-03-09",
        "lastStudiedAt": 42,
    }

    snapshot = decode_snapshot(raw, today=TODAY)

    assert snapshot.progress[12].last_reviewed_at == 42
    assert snapshot.daily_new_limit == 20
    assert snapshot.last_activity_date == date(2026, 3, 9)
    assert snapshot.last_studied_at == 42


def test_non_text_memo_keeps_schedule(caplog):
    raw = {
        "state": {
            "items": {
                "4": {"interval": 6, "repetition": 2, "efactor": 2.6, "lastReviewed": 77, "memo": 12},
                "5": {"interval": 1, "repetition": 1, "efactor": 2.5, "lastReviewed": 3, "memo": ["a"]},
            }
        }
    }

    snapshot = decode_snapshot(raw, today=TODAY)

    assert snapshot.progress[4] == ReviewState(
        interval=6, repetition=2, easiness_factor=2.6, last_reviewed_at=77, memo=None
    )
    assert snapshot.progress[5].memo is None
    assert "Discarding non-text memo" in caplog.text
