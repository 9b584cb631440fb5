import pytest

from recallkit.domain.errors import InvalidGradeError
from recallkit.domain.models import ReviewState
from recallkit.domain.sm2 import next_easiness_factor, round_half_up, transition


def test_fresh_item_correct_answer():
    result = transition(ReviewState(), 4)

    assert result.interval == 1
    assert result.repetition == 1
    # 2.5 + (0.1 - 1 * (0.08 + 1 * 0.02)) = 2.5
    assert result.easiness_factor == pytest.approx(2.5)


@pytest.mark.parametrize("grade", [3, 4, 5])
def test_second_success_gives_six_days(grade):
    result = transition(ReviewState(interval=1, repetition=1, easiness_factor=2.5), grade)
    assert result.interval == 6
    assert result.repetition == 2


def test_streak_multiplies_interval_by_easiness():
    state = ReviewState(interval=6, repetition=2, easiness_factor=2.5)
    result = transition(state, 5)

    assert result.interval == 15  # round(6 * 2.5)
    assert result.repetition == 3
    assert result.easiness_factor == pytest.approx(2.6)


def test_interval_growth_uses_pre_update_easiness():
    # EF drops to 2.36 on grade 3, but the interval uses the old 2.5
    state = ReviewState(interval=10, repetition=4, easiness_factor=2.5)
    result = transition(state, 3)

    assert result.interval == 25
    assert result.easiness_factor == pytest.approx(2.36)


def test_halves_round_up():
    state = ReviewState(interval=1, repetition=2, easiness_factor=2.5)
    assert transition(state, 4).interval == 3
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2


def test_failure_resets_streak():
    state = ReviewState(interval=6, repetition=2, easiness_factor=2.5)
    result = transition(state, 1)

    assert result.interval == 1
    assert result.repetition == 0
    # 2.5 + (0.1 - 4 * (0.08 + 4 * 0.02)) = 1.96
    assert result.easiness_factor == pytest.approx(1.96)


def test_blackout_resets_like_any_failure():
    state = ReviewState(interval=40, repetition=7, easiness_factor=2.8)
    blackout = transition(state, 0)
    near_miss = transition(state, 2)

    assert (blackout.interval, blackout.repetition) == (1, 0)
    assert (near_miss.interval, near_miss.repetition) == (1, 0)
    assert blackout.easiness_factor < near_miss.easiness_factor


def test_easiness_never_below_floor():
    state = ReviewState(interval=1, repetition=0, easiness_factor=1.3)
    assert transition(state, 0).easiness_factor == 1.3
    assert next_easiness_factor(1.4, 0) == 1.3


def test_easiness_has_no_ceiling():
    ef = 2.5
    for _ in range(20):
        ef = next_easiness_factor(ef, 5)
    assert ef == pytest.approx(4.5)


def test_easiness_floor_holds_for_every_grade():
    for ef in (1.3, 1.5, 2.0, 2.5, 3.1):
        for grade in range(6):
            for rep in (0, 1, 2, 5):
                state = ReviewState(interval=3, repetition=rep, easiness_factor=ef)
                assert transition(state, grade).easiness_factor >= 1.3


def test_review_time_and_memo_untouched():
    state = ReviewState(interval=6, repetition=2, easiness_factor=2.5, last_reviewed_at=123, memo="tricky")
    result = transition(state, 4)

    assert result.last_reviewed_at == 123
    assert result.memo == "tricky"


@pytest.mark.parametrize("grade", [-1, 6, 100, 3.0, True, "4", None])
def test_invalid_grades_rejected(grade):
    with pytest.raises(InvalidGradeError):
        transition(ReviewState(), grade)


def test_invalid_grade_is_value_error():
    with pytest.raises(ValueError, match="between 0 and 5"):
        transition(ReviewState(), 7)
