"""
Daily seeding (no HTTP, no storage).

- daily_key: one integer per local calendar date, e.g. 2024-01-15 -> 20240115
- pseudo_random: a reproducible number in [0, 1) for a seed
- select_secret_index: which catalog entry is today's secret

The key only has to be equal for the same day and usable as a seed,
it is never compared across days.
"""

import math
from datetime import date, datetime, timedelta
from typing import Optional

from .types import EntityId


def daily_key(today: Optional[date] = None) -> int:
    if today is None:
        today = date.today()
    return today.year * 10000 + today.month * 100 + today.day


def pseudo_random(seed: int) -> float:
    """
    Sine-based transform: same seed -> same value on every run.
    Returns the fractional part of sin(seed) * 10000.
    """
    x = math.sin(seed) * 10000
    return x - math.floor(x)


def select_secret_index(day_key: int, universe_size: int) -> EntityId:
    """
    Example:
      select_secret_index(20240115, 386) -> 54
    Always in 1..universe_size. Pure function of its two arguments.
    """
    if universe_size <= 0:
        raise ValueError("Universe size must be a positive integer.")
    index = math.floor(pseudo_random(day_key) * universe_size) + 1
    # guard against float rounding pushing us onto the bound
    return min(index, universe_size)


def time_until_midnight(now: Optional[datetime] = None) -> str:
    """How long until the next puzzle, formatted like '5h 12m'."""
    if now is None:
        now = datetime.now()
    tomorrow = datetime.combine(now.date() + timedelta(days=1), datetime.min.time())
    seconds = int((tomorrow - now).total_seconds())
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    return f"{hours}h {minutes}m"
