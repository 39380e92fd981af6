"""Priority engine: urgency label and score from deadline, effort and status."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from core.settings import PRIORITY, PrioritySettings
from utils.datetime_utils import utc_now, whole_days_between


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Effort(str, Enum):
    SHORT = "SHORT"
    MEDIUM = "MEDIUM"
    LONG = "LONG"

    @classmethod
    def parse(cls, value: "Effort | str") -> "Effort":
        """Strict conversion used at input boundaries; raises ``ValueError``."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown effort {value!r}; expected one of {allowed}") from None


class Status(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


PRIORITY_META: Dict[Priority, Dict[str, str]] = {
    Priority.LOW: {"label": "Low priority", "short": "Low"},
    Priority.MEDIUM: {"label": "Medium priority", "short": "Med"},
    Priority.HIGH: {"label": "High priority", "short": "High"},
}


@dataclass(frozen=True)
class PriorityResult:
    priority: Priority
    score: int


def _deadline_bucket(days: int, cfg: PrioritySettings) -> Priority:
    if days <= cfg.high_deadline_days:
        return Priority.HIGH
    if days <= cfg.medium_deadline_days:
        return Priority.MEDIUM
    return Priority.LOW


def _effort_bucket(effort: Effort | str) -> Priority:
    # Unrecognized effort values land in the LOW bucket.
    value = effort.value if isinstance(effort, Effort) else str(effort)
    if value == Effort.LONG.value:
        return Priority.HIGH
    if value == Effort.MEDIUM.value:
        return Priority.MEDIUM
    return Priority.LOW


def _clamp(score: int, cfg: PrioritySettings) -> int:
    return max(cfg.min_score, min(cfg.max_score, score))


def score_task(
    due_date: datetime,
    effort: Effort | str,
    status: Status | str = Status.PENDING,
    *,
    now: Optional[datetime] = None,
    settings: Optional[PrioritySettings] = None,
) -> PriorityResult:
    """Compute the priority label and 1..10 score for a task.

    Completed tasks are always ``(LOW, 1)``. Otherwise the deadline and the
    effort are each bucketed into LOW/MEDIUM/HIGH, points are added per
    bucket, and a final rule picks the label. "Either bucket HIGH" is checked
    before "both MEDIUM", which is checked before "either MEDIUM".
    """

    cfg = settings or PRIORITY
    if str(getattr(status, "value", status)) == Status.COMPLETED.value:
        return PriorityResult(Priority.LOW, cfg.min_score)

    days = whole_days_between(now or utc_now(), due_date)
    deadline = _deadline_bucket(days, cfg)
    effort_level = _effort_bucket(effort)

    score = cfg.base_score
    if deadline is Priority.HIGH:
        score += cfg.high_deadline_points
    elif deadline is Priority.MEDIUM:
        score += cfg.medium_deadline_points
    if effort_level is Priority.HIGH:
        score += cfg.high_effort_points
    elif effort_level is Priority.MEDIUM:
        score += cfg.medium_effort_points

    buckets = (deadline, effort_level)
    if Priority.HIGH in buckets:
        return PriorityResult(Priority.HIGH, _clamp(score + cfg.any_high_bonus, cfg))
    if deadline is Priority.MEDIUM and effort_level is Priority.MEDIUM:
        return PriorityResult(Priority.HIGH, _clamp(score + cfg.both_medium_bonus, cfg))
    if Priority.MEDIUM in buckets:
        return PriorityResult(Priority.MEDIUM, _clamp(score + cfg.any_medium_bonus, cfg))
    return PriorityResult(Priority.LOW, _clamp(score, cfg))


def normalize_priority(value: Priority | str | None) -> Optional[Priority]:
    """Map user input (``high``, ``Medium``...) to a :class:`Priority`."""
    if value is None:
        return None
    text = str(getattr(value, "value", value)).strip().upper()
    if not text or text == "ALL":
        return None
    try:
        return Priority(text)
    except ValueError:
        return None


def priority_label(value: Priority | str, *, short: bool = False) -> str:
    meta = PRIORITY_META.get(normalize_priority(value) or Priority.LOW)
    return meta["short" if short else "label"]


__all__ = [
    "Effort",
    "Priority",
    "PriorityResult",
    "PRIORITY_META",
    "Status",
    "normalize_priority",
    "priority_label",
    "score_task",
]
