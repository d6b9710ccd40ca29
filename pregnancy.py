"""
Pregnancy week tracker: week arithmetic from the last menstrual period (LMP).
"""
import datetime
from typing import Any, Dict, Optional

import local_database as local_db
from models import PregnancyWeek

MIN_WEEK = 4
MAX_WEEK = 40
GESTATION_DAYS = 280


def parse_date(value: str) -> datetime.date:
    return datetime.datetime.strptime(value, "%Y-%m-%d").date()


def compute_week(lmp: datetime.date, today: Optional[datetime.date] = None) -> int:
    """Whole weeks since the LMP, clamped to the weeks the tracker covers."""
    today = today or datetime.date.today()
    days = abs((today - lmp).days)
    return max(MIN_WEEK, min(MAX_WEEK, days // 7))


def due_date(lmp: datetime.date) -> datetime.date:
    return lmp + datetime.timedelta(days=GESTATION_DAYS)


def nearest_week_data(week: int) -> PregnancyWeek:
    """
    Data for `week`, or for the closest tabulated week when the table skips it.

    Ties go to the earlier week (22 is served from 21, 34 from 32).
    """
    available = sorted(local_db.PREGNANCY_WEEKS)
    best = available[0]
    for candidate in available:
        if abs(candidate - week) < abs(best - week):
            best = candidate
    return local_db.PREGNANCY_WEEKS[best]


def progress_percent(week: int) -> int:
    return min(100, round(week / MAX_WEEK * 100))


def days_left(week: int) -> int:
    return max(0, (MAX_WEEK - week) * 7)


def week_summary(week: int) -> Dict[str, Any]:
    week = max(MIN_WEEK, min(MAX_WEEK, week))
    data = nearest_week_data(week)
    return {
        "week": week,
        "data_week": data.week,
        "data": data.to_dict(),
        "progress_percent": progress_percent(week),
        "days_left": days_left(week),
    }


def tracker_summary(lmp_value: str, today: Optional[datetime.date] = None) -> Dict[str, Any]:
    lmp = parse_date(lmp_value)
    week = compute_week(lmp, today)
    summary = week_summary(week)
    summary.update({
        "lmp": lmp.isoformat(),
        "due_date": due_date(lmp).strftime("%d/%m/%Y"),
        "weeks": list(range(MIN_WEEK, MAX_WEEK + 1)),
        "disclaimer": local_db.PREGNANCY_DISCLAIMER,
    })
    return summary
