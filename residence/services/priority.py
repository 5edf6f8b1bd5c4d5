from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone
from typing import Any, Iterable

from django.utils import timezone

RANK_PERFORMANCE_TYPES = frozenset({"rank", "keam_rank", "rank_keam"})
RANK_CAP = 50000
RANK_DIVISOR = 1250
MAX_WAITING_BONUS = 30
SENIORITY_YEAR = 4
SENIORITY_BONUS = 5


@dataclass(frozen=True)
class ScoredApplication:
    application: Any
    score: float
    label: str
    created_at: datetime | None


def _value(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def _as_float(raw: Any) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError):
        return 0.0


def performance_points(performance_type: str | None, performance_value: Any) -> float:
    kind = (performance_type or "").strip().lower()
    value = _as_float(performance_value)
    if kind == "sgpa":
        return min(10.0, max(0.0, value)) * 5
    if kind in RANK_PERFORMANCE_TYPES:
        capped = min(RANK_CAP, max(0.0, value))
        return max(0.0, 40 - capped / RANK_DIVISOR)
    return 0.0


def distance_points(distance_from_home: str | None) -> float:
    text = (distance_from_home or "").lower()
    if ">50" in text:
        return 20.0
    if "25-50" in text:
        return 10.0
    return 0.0


def waiting_points(created_at: datetime | None, now: datetime) -> float:
    if created_at is None:
        return 0.0
    days = math.floor((now - created_at).total_seconds() / 86400)
    return float(min(MAX_WAITING_BONUS, max(0, days)))


def seniority_points(academic_year: Any) -> float:
    try:
        year = int(str(academic_year).strip())
    except (TypeError, ValueError):
        return 0.0
    return float(SENIORITY_BONUS) if year >= SENIORITY_YEAR else 0.0


def priority_label(score: float) -> str:
    if score >= 50:
        return "High"
    if score >= 25:
        return "Medium"
    return "Low"


def score_application(application: Any, now: datetime | None = None) -> ScoredApplication:
    """Score one application for warden triage.

    ``application`` may be a model instance or a plain mapping exposing
    ``performance_type``, ``performance_value``, ``distance_from_home``,
    ``created_at`` and ``academic_year``.
    """

    now = now or timezone.now()
    created_at = _value(application, "created_at")
    score = (
        performance_points(_value(application, "performance_type"), _value(application, "performance_value"))
        + distance_points(_value(application, "distance_from_home"))
        + waiting_points(created_at, now)
        + seniority_points(_value(application, "academic_year"))
    )
    score = round(score, 2)
    return ScoredApplication(
        application=application,
        score=score,
        label=priority_label(score),
        created_at=created_at,
    )


def score_pending_applications(
    applications: Iterable[Any],
    now: datetime | None = None,
) -> list[ScoredApplication]:
    """Return scored applications, highest score first and oldest first on ties."""

    now = now or timezone.now()
    scored = [score_application(application, now=now) for application in applications]
    oldest = datetime.min.replace(tzinfo=dt_timezone.utc)
    scored.sort(key=lambda item: (-item.score, item.created_at or oldest))
    return scored
