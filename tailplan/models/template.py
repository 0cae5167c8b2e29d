"""Flight-number templates and the weekly recurrence pattern."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Tuple

INACTIVE_MARK = "."


class TemplateStatus(Enum):
    DRAFT = "draft"
    READY = "ready"
    PUBLISHED = "published"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: Optional[str]) -> "TemplateStatus":
        """Blank statuses count as draft, matching how templates are stored."""
        if value in (None, ""):
            return cls.DRAFT
        return cls(str(value).strip().lower())


@dataclass(frozen=True)
class WeeklyPattern:
    """
    Seven operating-day flags, Monday first.

    The stored form is a 7-character string where position i (1-indexed,
    Mon=1..Sun=7) is active only when it holds the digit i itself, so
    "1234567" is daily and "1.3.5.7" flies Mon/Wed/Fri/Sun. A "1" in the
    Tuesday slot is NOT active. Only the string boundary knows this
    convention; everything else works with the flags.
    """

    days: Tuple[bool, bool, bool, bool, bool, bool, bool]

    def __post_init__(self) -> None:
        if len(self.days) != 7:
            raise ValueError(f"WeeklyPattern needs 7 flags, got {len(self.days)}")

    @classmethod
    def parse(cls, text: Optional[str]) -> "WeeklyPattern":
        text = text or ""
        flags = tuple(len(text) > idx and text[idx] == str(idx + 1) for idx in range(7))
        return cls(days=flags)  # type: ignore[arg-type]

    @classmethod
    def from_weekdays(cls, iso_weekdays: Iterable[int]) -> "WeeklyPattern":
        active = set(iso_weekdays)
        return cls(days=tuple(day in active for day in range(1, 8)))  # type: ignore[arg-type]

    @classmethod
    def daily(cls) -> "WeeklyPattern":
        return cls(days=(True,) * 7)  # type: ignore[arg-type]

    def to_string(self) -> str:
        return "".join(str(idx + 1) if flag else INACTIVE_MARK for idx, flag in enumerate(self.days))

    def is_active(self, day: date) -> bool:
        return self.days[day.isoweekday() - 1]

    @property
    def iso_weekdays(self) -> List[int]:
        return [idx + 1 for idx, flag in enumerate(self.days) if flag]

    def __str__(self) -> str:
        return self.to_string()


@dataclass(frozen=True)
class Season:
    season_id: str
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class FlightNumberTemplate:
    """Recurring flight definition owned by schedule planning; read-only here."""

    template_id: str
    season_id: str
    flight_number: str
    departure: str
    arrival: str
    departure_time: time
    arrival_time: Optional[time]
    block_minutes: int
    pattern: WeeklyPattern
    aircraft_type: str
    service_type: str = "J"
    effective_from: Optional[date] = None
    effective_until: Optional[date] = None
    arrival_day_offset: int = 0
    status: TemplateStatus = TemplateStatus.DRAFT
    excluded_dates: FrozenSet[date] = field(default_factory=frozenset)
    operator_id: Optional[str] = None


def parse_hhmm(value: Optional[str]) -> Optional[time]:
    """Parse "HHMM" or "HH:MM" into a time; blank values give None."""
    if value is None:
        return None
    text = str(value).strip().replace(":", "")
    if not text:
        return None
    if len(text) != 4 or not text.isdigit():
        raise ValueError(f"Invalid time of day: {value!r}")
    return time(hour=int(text[:2]), minute=int(text[2:]))
