"""Calendar expansion: recurring templates to dated flight instances.

Expansion is a pure function of its inputs. Calling it twice with the same
templates and range yields equal lists in the same order (date, then flight
number, then template id).
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Callable, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Tuple
from zoneinfo import ZoneInfo

from tailplan.models.flight import RouteTier, ScheduledFlightInstance, flight_id_for
from tailplan.models.template import FlightNumberTemplate, Season, TemplateStatus

DEFAULT_STATUSES: FrozenSet[TemplateStatus] = frozenset(
    {TemplateStatus.DRAFT, TemplateStatus.READY, TemplateStatus.PUBLISHED}
)

TierLookup = Callable[[str, str], Optional[RouteTier]]


def daterange(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def operating_window(
    template: FlightNumberTemplate, season: Optional[Season] = None
) -> Tuple[Optional[date], Optional[date]]:
    """Intersection of the template's effective window and its season bounds."""
    lower = template.effective_from
    upper = template.effective_until
    if season is not None:
        lower = season.start if lower is None else max(lower, season.start)
        upper = season.end if upper is None else min(upper, season.end)
    return lower, upper


def operates_on(
    template: FlightNumberTemplate,
    day: date,
    allowed_statuses: FrozenSet[TemplateStatus] = DEFAULT_STATUSES,
    season: Optional[Season] = None,
) -> bool:
    if template.status not in allowed_statuses:
        return False
    lower, upper = operating_window(template, season)
    if lower is not None and day < lower:
        return False
    if upper is not None and day > upper:
        return False
    if day in template.excluded_dates:
        return False
    return template.pattern.is_active(day)


def _to_utc(day: date, local_time, zone_name: Optional[str]) -> datetime:
    # Stations without a known zone are taken as UTC.
    tz = ZoneInfo(zone_name) if zone_name else timezone.utc
    return datetime.combine(day, local_time, tzinfo=tz).astimezone(timezone.utc)


def instantiate(
    template: FlightNumberTemplate,
    day: date,
    timezones: Optional[Mapping[str, str]] = None,
    tier_of: Optional[TierLookup] = None,
) -> ScheduledFlightInstance:
    """Project one template onto one operating date."""
    zones = timezones or {}
    start = _to_utc(day, template.departure_time, zones.get(template.departure))
    if template.arrival_time is not None:
        arrival_day = day + timedelta(days=template.arrival_day_offset)
        end = _to_utc(arrival_day, template.arrival_time, zones.get(template.arrival))
    else:
        end = start + timedelta(minutes=template.block_minutes)

    return ScheduledFlightInstance(
        flight_id=flight_id_for(template.template_id, day),
        template_id=template.template_id,
        flight_number=template.flight_number,
        flight_date=day,
        departure=template.departure,
        arrival=template.arrival,
        start=start,
        end=end,
        block_minutes=template.block_minutes,
        aircraft_type=template.aircraft_type,
        service_type=template.service_type,
        route_tier=tier_of(template.departure, template.arrival) if tier_of else None,
    )


def expand_templates(
    templates: Iterable[FlightNumberTemplate],
    start: date,
    end: date,
    *,
    allowed_statuses: Iterable[TemplateStatus] = DEFAULT_STATUSES,
    seasons: Optional[Mapping[str, Season]] = None,
    timezones: Optional[Mapping[str, str]] = None,
    tier_of: Optional[TierLookup] = None,
) -> List[ScheduledFlightInstance]:
    """Expand templates over the inclusive range [start, end]."""
    statuses = frozenset(allowed_statuses)
    seasons = seasons or {}
    instances: List[ScheduledFlightInstance] = []
    for template in templates:
        season = seasons.get(template.season_id)
        lower, upper = operating_window(template, season)
        first = start if lower is None else max(start, lower)
        last = end if upper is None else min(end, upper)
        for day in daterange(first, last):
            if operates_on(template, day, statuses, season):
                instances.append(instantiate(template, day, timezones, tier_of))

    instances.sort(key=lambda inst: (inst.flight_date, inst.flight_number, inst.template_id))
    return instances
