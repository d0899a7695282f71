# File: /taskgrid/engine/dashboard.py | Version: 1.0 | Title: Per-day created/completed counts
from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, NamedTuple, Optional

from taskgrid.schemas.records import Record

DayCounts = Dict[str, Dict[str, int]]


class DashboardData(NamedTuple):
    assigned_by_day: DayCounts
    completed_by_day: DayCounts


def _day(ts: Optional[datetime]) -> Optional[str]:
    return ts.date().isoformat() if ts else None


def dashboard_counts(records: Iterable[Record]) -> DashboardData:
    assigned: DayCounts = defaultdict(lambda: defaultdict(int))
    completed: DayCounts = defaultdict(lambda: defaultdict(int))
    for r in records:
        who = r.assignee_email or "Unassigned"
        created_day = _day(r.created_at)
        if created_day:
            assigned[created_day][who] += 1
        completed_day = _day(r.completed_at)
        if completed_day:
            completed[completed_day][who] += 1
    return DashboardData(
        {d: dict(v) for d, v in assigned.items()},
        {d: dict(v) for d, v in completed.items()},
    )
