from datetime import timedelta

import pytest

from core.priorities import (
    Effort,
    Priority,
    PriorityResult,
    Status,
    normalize_priority,
    priority_label,
    score_task,
)
from core.settings import PrioritySettings


def test_due_today_long_effort_is_high_ten(now):
    assert score_task(now, Effort.LONG, now=now) == PriorityResult(Priority.HIGH, 10)


def test_both_medium_promotes_to_high(now):
    result = score_task(now + timedelta(days=2), Effort.MEDIUM, now=now)
    assert result == PriorityResult(Priority.HIGH, 7)


def test_far_deadline_short_effort_is_low(now):
    result = score_task(now + timedelta(days=10), Effort.SHORT, now=now)
    assert result == PriorityResult(Priority.LOW, 1)


def test_single_medium_bucket_is_medium(now):
    result = score_task(now + timedelta(days=2), Effort.SHORT, now=now)
    assert result == PriorityResult(Priority.MEDIUM, 4)


def test_high_effort_dominates_low_deadline(now):
    # deadline LOW, effort HIGH: 1 + 0 + 3 + 3
    result = score_task(now + timedelta(days=30), Effort.LONG, now=now)
    assert result == PriorityResult(Priority.HIGH, 7)


def test_high_deadline_dominates_medium_effort(now):
    # deadline HIGH, effort MEDIUM: min(10, 1 + 4 + 2 + 3)
    result = score_task(now + timedelta(hours=30), Effort.MEDIUM, now=now)
    assert result == PriorityResult(Priority.HIGH, 10)


def test_overdue_task_counts_as_high_deadline(now):
    result = score_task(now - timedelta(days=5), Effort.SHORT, now=now)
    assert result == PriorityResult(Priority.HIGH, 8)


def test_deadline_bucket_boundaries(now):
    assert score_task(now + timedelta(days=3, hours=23), Effort.SHORT, now=now).priority is Priority.MEDIUM
    assert score_task(now + timedelta(days=4), Effort.SHORT, now=now).priority is Priority.LOW


@pytest.mark.parametrize("effort", [Effort.SHORT, Effort.MEDIUM, Effort.LONG, "bogus"])
@pytest.mark.parametrize("days", [-3, 0, 2, 10])
def test_completed_tasks_are_always_low_one(now, effort, days):
    result = score_task(now + timedelta(days=days), effort, Status.COMPLETED, now=now)
    assert result == PriorityResult(Priority.LOW, 1)
    assert score_task(now, effort, "COMPLETED", now=now) == PriorityResult(Priority.LOW, 1)


@pytest.mark.parametrize("effort", ["SHORT", "MEDIUM", "LONG", "", "huge"])
@pytest.mark.parametrize("days", [-100, -1, 0, 1, 2, 3, 4, 365])
def test_score_always_within_bounds(now, effort, days):
    result = score_task(now + timedelta(days=days), effort, now=now)
    assert 1 <= result.score <= 10


def test_unknown_effort_falls_into_low_bucket(now):
    unknown = score_task(now + timedelta(days=10), "huge", now=now)
    short = score_task(now + timedelta(days=10), Effort.SHORT, now=now)
    assert unknown == short


def test_plain_strings_are_accepted(now):
    assert score_task(now, "LONG", "PENDING", now=now) == PriorityResult(Priority.HIGH, 10)


def test_naive_due_date_is_treated_as_utc(now):
    naive = (now + timedelta(days=2)).replace(tzinfo=None)
    assert score_task(naive, Effort.MEDIUM, now=now) == PriorityResult(Priority.HIGH, 7)


def test_custom_settings_change_thresholds(now):
    strict = PrioritySettings(high_deadline_days=0, medium_deadline_days=1)
    result = score_task(now + timedelta(days=1), Effort.SHORT, now=now, settings=strict)
    assert result == PriorityResult(Priority.MEDIUM, 4)


def test_effort_parse_is_strict():
    assert Effort.parse("long") is Effort.LONG
    assert Effort.parse(Effort.SHORT) is Effort.SHORT
    with pytest.raises(ValueError):
        Effort.parse("huge")


def test_normalize_priority_and_labels():
    assert normalize_priority("high") is Priority.HIGH
    assert normalize_priority("ALL") is None
    assert normalize_priority("nope") is None
    assert priority_label("MEDIUM") == "Medium priority"
    assert priority_label(Priority.HIGH, short=True) == "High"
