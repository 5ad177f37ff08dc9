"""Unit tests for honor/time lock evaluation."""

from datetime import datetime, timezone

import pytest

from openme.core.errors import ValidationAppError
from openme.schemas.letters import LockType
from openme.services.lock_evaluator import evaluate_unlock


class TestHonorLock:
    def test_unlocked_only_when_confirmed(self) -> None:
        assert evaluate_unlock(LockType.HONOR, honor_confirmed=True) is True
        assert evaluate_unlock(LockType.HONOR, honor_confirmed=False) is False

    def test_truthy_non_bool_is_not_confirmation(self) -> None:
        assert evaluate_unlock(LockType.HONOR, honor_confirmed="yes") is False  # type: ignore[arg-type]

    def test_ignores_time_fields(self) -> None:
        result = evaluate_unlock(
            LockType.HONOR,
            now=datetime(2020, 1, 1, tzinfo=timezone.utc),
            unlock_at="2099-01-01T00:00:00Z",
            honor_confirmed=True,
        )
        assert result is True


class TestTimeLock:
    def test_locked_before_unlock_at(self) -> None:
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        assert evaluate_unlock(LockType.TIME, now=now, unlock_at="2026-02-01T00:00:00Z") is False

    def test_unlocked_at_exact_threshold(self) -> None:
        now = datetime(2026, 2, 1, tzinfo=timezone.utc)
        assert evaluate_unlock(LockType.TIME, now=now, unlock_at="2026-02-01T00:00:00Z") is True

    def test_unlocked_after_unlock_at(self) -> None:
        now = datetime(2026, 3, 1, tzinfo=timezone.utc)
        assert evaluate_unlock(LockType.TIME, now=now, unlock_at="2026-02-01T00:00:00Z") is True

    def test_accepts_datetime_threshold(self) -> None:
        now = datetime(2026, 3, 1, tzinfo=timezone.utc)
        threshold = datetime(2026, 2, 1, tzinfo=timezone.utc)
        assert evaluate_unlock(LockType.TIME, now=now, unlock_at=threshold) is True

    def test_naive_values_are_treated_as_utc(self) -> None:
        now = datetime(2026, 2, 1, 0, 0, 1)
        assert evaluate_unlock(LockType.TIME, now=now, unlock_at="2026-02-01T00:00:00Z") is True

    def test_offsets_are_respected(self) -> None:
        # 01:00+02:00 is 23:00 UTC the previous day
        now = datetime(2026, 1, 31, 23, 30, tzinfo=timezone.utc)
        assert evaluate_unlock(LockType.TIME, now=now, unlock_at="2026-02-01T01:00:00+02:00") is True

    def test_date_only_threshold_is_accepted(self) -> None:
        now = datetime(2026, 2, 2, tzinfo=timezone.utc)
        assert evaluate_unlock(LockType.TIME, now=now, unlock_at="2026-02-01") is True

    def test_defaults_to_wall_clock(self) -> None:
        assert evaluate_unlock(LockType.TIME, unlock_at="2000-01-01T00:00:00Z") is True
        assert evaluate_unlock(LockType.TIME, unlock_at="2999-01-01T00:00:00Z") is False

    @pytest.mark.parametrize("unlock_at", [None, "", "not-a-date", 12345])
    def test_invalid_unlock_at_raises(self, unlock_at) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            evaluate_unlock(LockType.TIME, unlock_at=unlock_at)

        assert exc_info.value.message == "valid unlockAt is required for time lock"
        assert exc_info.value.status_code == 400
