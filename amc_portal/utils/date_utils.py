"""Date manipulation utilities"""

import math
from datetime import date
from typing import Iterable, Optional


def days_until(end: date, as_of: date) -> int:
    """Whole days from as_of to end, rounded up (negative once end has passed)"""
    return math.ceil((end - as_of).total_seconds() / 86400)


def earliest(dates: Iterable[Optional[date]]) -> Optional[date]:
    """Earliest non-null date, or None"""
    present = [d for d in dates if d is not None]
    return min(present) if present else None


def latest(dates: Iterable[Optional[date]]) -> Optional[date]:
    """Latest non-null date, or None"""
    present = [d for d in dates if d is not None]
    return max(present) if present else None
