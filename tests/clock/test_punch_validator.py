from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from punchclock.clock.validator import DUPLICATE_MESSAGE, PunchValidator, check_transition
from punchclock.core.enums import PunchType
from punchclock.core.exceptions import ValidationError


def _punch(validator, repo, type, ts, now, user_id=1):
    new_event = validator.validate(user_id=user_id, type=type, timestamp=ts, now=now)
    return repo.create(new_event)


def test_full_day_sequence_is_accepted(clock_repo, at, fixed_now):
    v = PunchValidator(clock_repo)

    _punch(v, clock_repo, PunchType.CLOCK_IN, at(8), fixed_now)
    _punch(v, clock_repo, PunchType.BREAK_START, at(9), fixed_now)
    _punch(v, clock_repo, PunchType.BREAK_END, at(10), fixed_now)
    _punch(v, clock_repo, PunchType.CLOCK_OUT, at(11), fixed_now)

    assert clock_repo.count_by_user(1) == 4


def test_clock_out_as_first_punch_is_rejected(clock_repo, at, fixed_now):
    v = PunchValidator(clock_repo)

    with pytest.raises(ValidationError) as exc:
        v.validate(user_id=1, type=PunchType.CLOCK_OUT, timestamp=at(9), now=fixed_now)

    assert "must clock in first" in exc.value.message


def test_clock_in_twice_is_rejected(clock_repo, at, fixed_now):
    v = PunchValidator(clock_repo)
    _punch(v, clock_repo, PunchType.CLOCK_IN, at(8), fixed_now)

    with pytest.raises(ValidationError) as exc:
        v.validate(user_id=1, type=PunchType.CLOCK_IN, timestamp=at(9), now=fixed_now)

    assert "already clocked in" in exc.value.message


def test_break_end_requires_break_start(clock_repo, at, fixed_now):
    v = PunchValidator(clock_repo)
    _punch(v, clock_repo, PunchType.CLOCK_IN, at(8), fixed_now)

    with pytest.raises(ValidationError) as exc:
        v.validate(user_id=1, type=PunchType.BREAK_END, timestamp=at(9), now=fixed_now)

    assert "must start break first" in exc.value.message


@pytest.mark.parametrize(
    "previous",
    [[], [PunchType.CLOCK_IN, PunchType.BREAK_START], [PunchType.CLOCK_IN, PunchType.CLOCK_OUT]],
    ids=["first-punch", "after-break-start", "after-clock-out"],
)
def test_break_start_requires_being_clocked_in(clock_repo, at, fixed_now, previous):
    for hour, type in enumerate(previous, start=8):
        clock_repo.add(1, at(hour), type)
    v = PunchValidator(clock_repo)

    with pytest.raises(ValidationError) as exc:
        v.validate(user_id=1, type=PunchType.BREAK_START, timestamp=at(11), now=fixed_now)

    assert exc.value.message == "Cannot start break: must be clocked in to start break"


def test_clock_in_allowed_again_after_clock_out():
    # Only a preceding ClockIn blocks a new ClockIn.
    class _E:
        def __init__(self, type):
            self.type = type

    check_transition([_E(PunchType.CLOCK_IN), _E(PunchType.CLOCK_OUT)], PunchType.CLOCK_IN)


def test_punch_within_59_seconds_is_duplicate(clock_repo, at, fixed_now):
    v = PunchValidator(clock_repo)
    _punch(v, clock_repo, PunchType.CLOCK_IN, at(8), fixed_now)

    with pytest.raises(ValidationError) as exc:
        v.validate(user_id=1, type=PunchType.BREAK_START, timestamp=at(8, 0, 59), now=fixed_now)

    assert exc.value.message == DUPLICATE_MESSAGE


def test_punch_exactly_60_seconds_later_is_not_duplicate(clock_repo, at, fixed_now):
    v = PunchValidator(clock_repo)
    _punch(v, clock_repo, PunchType.CLOCK_IN, at(8), fixed_now)

    new_event = v.validate(user_id=1, type=PunchType.BREAK_START, timestamp=at(8, 1, 0), now=fixed_now)

    assert new_event.timestamp == at(8, 1, 0)


def test_punches_across_utc_midnight_are_validated_per_day(clock_repo, at, fixed_now):
    v = PunchValidator(clock_repo)
    clock_repo.add(1, at(23, 59, 30, days_ago=1), PunchType.CLOCK_OUT)

    # 40 s apart, but on different UTC days.
    new_event = v.validate(user_id=1, type=PunchType.CLOCK_IN, timestamp=at(0, 0, 10), now=fixed_now)

    assert new_event.timestamp == at(0, 0, 10)


def test_sequence_resets_on_new_utc_day(clock_repo, at, fixed_now):
    v = PunchValidator(clock_repo)
    # Left clocked in yesterday; today starts fresh.
    clock_repo.add(1, at(9, days_ago=1), PunchType.CLOCK_IN)

    new_event = v.validate(user_id=1, type=PunchType.CLOCK_IN, timestamp=at(9), now=fixed_now)

    assert new_event.type is PunchType.CLOCK_IN


def test_other_users_punches_do_not_interfere(clock_repo, at, fixed_now):
    v = PunchValidator(clock_repo)
    clock_repo.add(2, at(8), PunchType.CLOCK_IN)

    new_event = v.validate(user_id=1, type=PunchType.CLOCK_IN, timestamp=at(8), now=fixed_now)

    assert new_event.user_id == 1


@pytest.mark.parametrize(
    "offset",
    [timedelta(days=7, seconds=1), timedelta(minutes=-5, seconds=-1)],
    ids=["too-old", "too-far-ahead"],
)
def test_client_timestamp_outside_window_is_rejected(clock_repo, fixed_now, offset):
    v = PunchValidator(clock_repo)

    with pytest.raises(ValidationError):
        v.validate(user_id=1, type=PunchType.CLOCK_IN, timestamp=fixed_now - offset, now=fixed_now)


def test_missing_timestamp_defaults_to_now(clock_repo):
    v = PunchValidator(clock_repo)
    now = datetime(2026, 3, 10, 12, 0, 0, 123456, tzinfo=timezone.utc)

    new_event = v.validate(user_id=1, type=PunchType.CLOCK_IN, now=now)

    assert new_event.timestamp == now


def test_duplicate_check_uses_fractional_seconds(clock_repo, at, fixed_now):
    v = PunchValidator(clock_repo)
    clock_repo.add(1, at(8).replace(microsecond=900000), PunchType.CLOCK_IN)

    # 59.2 s after the stored punch.
    with pytest.raises(ValidationError) as exc:
        v.validate(user_id=1, type=PunchType.BREAK_START, timestamp=at(8, 1).replace(microsecond=100000), now=fixed_now)

    assert exc.value.message == DUPLICATE_MESSAGE


def test_offset_timestamps_are_normalized_to_utc(clock_repo, fixed_now):
    v = PunchValidator(clock_repo)
    local = datetime(2026, 3, 10, 14, 0, tzinfo=timezone(timedelta(hours=3)))

    new_event = v.validate(user_id=1, type=PunchType.CLOCK_IN, timestamp=local, now=fixed_now)

    assert new_event.timestamp == datetime(2026, 3, 10, 11, 0, tzinfo=timezone.utc)


def test_description_length_is_limited(clock_repo, fixed_now):
    v = PunchValidator(clock_repo)

    with pytest.raises(ValidationError):
        v.validate(user_id=1, type=PunchType.CLOCK_IN, description="x" * 501, now=fixed_now)

    ok = v.validate(user_id=1, type=PunchType.CLOCK_IN, description="  ", now=fixed_now)
    assert ok.description is None
