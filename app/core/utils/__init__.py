"""Utility helpers"""

from app.core.utils.datetime import (
    UTC,
    days_ago,
    ensure_utc,
    hours_between,
    now_utc,
    time_of_day_bucket,
)
from app.core.utils.pagination import PageParams
from app.core.utils.time import measure_time

__all__ = [
    # datetime
    "UTC",
    "now_utc",
    "ensure_utc",
    "days_ago",
    "hours_between",
    "time_of_day_bucket",
    # pagination
    "PageParams",
    # time measurement
    "measure_time",
]
