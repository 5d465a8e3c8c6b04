"""
Expiry date arithmetic and freshness classification.

Dates are plain calendar dates. Day differences are counted on the wall
clock of ``now`` so a daylight-saving switch never shifts a label by an hour.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta
from typing import Union

from .errors import InvalidInput
from .models import ExpiryStatus

EXPIRING_SOON_DAYS = 2

DateLike = Union[date, datetime, str]


def parse_production_date(value: DateLike) -> date:
    """Accept a date, a datetime (its date part) or an ISO ``YYYY-MM-DD`` string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if len(text) > 10:
                return datetime.fromisoformat(text).date()
            return date.fromisoformat(text)
        except ValueError as exc:
            raise InvalidInput(f"Cannot parse production date: {value!r}") from exc
    raise InvalidInput(f"Cannot parse production date: {value!r}")


def compute_expiry(production_date: date, shelf_life_days: int) -> date:
    if shelf_life_days < 0:
        raise InvalidInput(f"Shelf life must not be negative: {shelf_life_days}")
    return production_date + timedelta(days=shelf_life_days)


def _expiry_start(expiry_date: date, now: datetime) -> datetime:
    # same tzinfo as now, so subtraction stays on the wall clock
    return datetime.combine(expiry_date, time.min, tzinfo=now.tzinfo)


def _as_datetime(now: Union[date, datetime]) -> datetime:
    if isinstance(now, datetime):
        return now
    return datetime.combine(now, time.min)


def days_until_expiry(expiry_date: date, now: Union[date, datetime]) -> int:
    """Whole days left before the expiry day starts, rounded up."""
    now_dt = _as_datetime(now)
    delta = _expiry_start(expiry_date, now_dt) - now_dt
    return math.ceil(delta / timedelta(days=1))


def expiry_status(
    expiry_date: date,
    now: Union[date, datetime],
    soon_days: int = EXPIRING_SOON_DAYS,
) -> ExpiryStatus:
    now_dt = _as_datetime(now)
    if now_dt >= _expiry_start(expiry_date, now_dt):
        return ExpiryStatus.EXPIRED
    days = days_until_expiry(expiry_date, now_dt)
    if 0 < days <= soon_days:
        return ExpiryStatus.EXPIRING_SOON
    return ExpiryStatus.FRESH
