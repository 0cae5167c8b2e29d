"""Rolling-horizon windows over a planning range."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator


@dataclass(frozen=True)
class HorizonWindow:
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def __str__(self) -> str:
        return f"{self.start.isoformat()}..{self.end.isoformat()}"


def horizon_windows(start: date, end: date, window_days: int, overlap_days: int = 0) -> Iterator[HorizonWindow]:
    """Yield successive windows of window_days covering [start, end]; the last one is clipped."""
    if window_days <= 0:
        raise ValueError("window_days must be positive")
    if not 0 <= overlap_days < window_days:
        raise ValueError("overlap_days must be within [0, window_days)")
    step = timedelta(days=window_days - overlap_days)
    span = timedelta(days=window_days - 1)
    current = start
    while current <= end:
        yield HorizonWindow(start=current, end=min(current + span, end))
        if current + span >= end:
            break
        current += step
