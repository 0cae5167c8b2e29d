"""Read-only CSV repositories for templates, fleet and reference data.

Files are semicolon-delimited and live under ``DATA_DIR`` unless another
root is passed in.
"""
from __future__ import annotations

import csv
from datetime import date
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tailplan.config import CSV_DELIMITER, DATA_DIR
from tailplan.engine.utilization import TailAssignmentTable
from tailplan.log import get_logger
from tailplan.models.fleet import AircraftUnit
from tailplan.models.template import FlightNumberTemplate, Season, TemplateStatus, WeeklyPattern, parse_hhmm
from tailplan.models.turnaround import AirportTatOverride, TierPair, TurnaroundPolicy

logger = get_logger(__name__)

TIER_COLUMNS = {
    TierPair.DOM_DOM: "tat_dom_dom_minutes",
    TierPair.DOM_INT: "tat_dom_int_minutes",
    TierPair.INT_DOM: "tat_int_dom_minutes",
    TierPair.INT_INT: "tat_int_int_minutes",
}


def _blank(value: Optional[str]) -> bool:
    return value is None or str(value).strip() in ("", "null")


def _to_int(value: Optional[str], default: Optional[int] = None) -> Optional[int]:
    return default if _blank(value) else int(float(value))


def _to_date(value: Optional[str]) -> Optional[date]:
    return None if _blank(value) else date.fromisoformat(str(value).strip())


def _to_bool(value: Optional[str], default: bool = True) -> bool:
    if _blank(value):
        return default
    return str(value).strip().lower() in ("1", "true", "yes", "y")


def _known_zone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


class DatasetLoader:
    def __init__(self, data_root: Path = DATA_DIR) -> None:
        self.data_root = Path(data_root)

    def _rows(self, filename: str) -> Iterator[Dict[str, str]]:
        path = self.data_root / filename
        if not path.exists():
            logger.warning("Dataset %s not found; treating as empty", path)
            return
        with path.open(newline="", encoding="utf-8") as handle:
            yield from csv.DictReader(handle, delimiter=CSV_DELIMITER)

    # ------------------------------------------------------------
    # Schedule
    # ------------------------------------------------------------
    def load_templates(self) -> List[FlightNumberTemplate]:
        templates: List[FlightNumberTemplate] = []
        for row in self._rows("templates.csv"):
            excluded = frozenset(
                date.fromisoformat(item.strip())
                for item in (row.get("excluded_dates") or "").split(",")
                if item.strip()
            )
            templates.append(
                FlightNumberTemplate(
                    template_id=row["id"],
                    season_id=row.get("season_id") or "",
                    operator_id=row.get("operator_id") or None,
                    flight_number=row["flight_number"],
                    departure=row["departure_iata"],
                    arrival=row["arrival_iata"],
                    departure_time=parse_hhmm(row["std"]),
                    arrival_time=parse_hhmm(row.get("sta")),
                    block_minutes=_to_int(row.get("block_minutes"), 0),
                    pattern=WeeklyPattern.parse(row.get("days_of_operation")),
                    aircraft_type=row["aircraft_type"],
                    service_type=row.get("service_type") or "J",
                    effective_from=_to_date(row.get("effective_from")),
                    effective_until=_to_date(row.get("effective_until")),
                    arrival_day_offset=_to_int(row.get("arrival_day_offset"), 0),
                    status=TemplateStatus.parse(row.get("status")),
                    excluded_dates=excluded,
                )
            )
        return templates

    def load_seasons(self) -> Dict[str, Season]:
        seasons: Dict[str, Season] = {}
        for row in self._rows("seasons.csv"):
            seasons[row["id"]] = Season(
                season_id=row["id"],
                start=date.fromisoformat(row["start_date"]),
                end=date.fromisoformat(row["end_date"]),
            )
        return seasons

    # ------------------------------------------------------------
    # Fleet and turnaround policy
    # ------------------------------------------------------------
    def load_fleet(self) -> List[AircraftUnit]:
        fleet: List[AircraftUnit] = []
        for row in self._rows("fleet.csv"):
            if not _to_bool(row.get("is_active")):
                continue
            fleet.append(
                AircraftUnit(
                    index=len(fleet),
                    registration=row["registration"],
                    aircraft_type=row["aircraft_type"],
                    family=row.get("family") or None,
                )
            )
        return fleet

    def load_turnaround_policies(self) -> List[TurnaroundPolicy]:
        policies: List[TurnaroundPolicy] = []
        for row in self._rows("aircraft_types.csv"):
            scheduled = _to_int(row.get("default_tat_minutes"))
            if scheduled is None:
                continue
            tier_overrides = {
                pair: _to_int(row.get(column)) for pair, column in TIER_COLUMNS.items() if not _blank(row.get(column))
            }
            policies.append(
                TurnaroundPolicy(
                    aircraft_type=row["type_code"],
                    scheduled_minutes=scheduled,
                    minimum_minutes=_to_int(row.get("min_tat_minutes")),
                    hard_floor_minutes=_to_int(row.get("hard_tat_minutes")),
                    tier_overrides=tier_overrides,
                )
            )
        return policies

    def load_family_map(self) -> Dict[str, str]:
        """Aircraft type code to family, for family substitution."""
        return {
            row["type_code"]: row["family"] for row in self._rows("aircraft_types.csv") if not _blank(row.get("family"))
        }

    def load_airport_tat_overrides(self) -> List[AirportTatOverride]:
        return [
            AirportTatOverride(
                station=row["station"], aircraft_type=row["aircraft_type"], minutes=_to_int(row["tat_minutes"])
            )
            for row in self._rows("airport_tat_rules.csv")
            if _to_bool(row.get("is_active"))
        ]

    # ------------------------------------------------------------
    # Airports
    # ------------------------------------------------------------
    def load_airports(self) -> Tuple[Dict[str, str], Dict[str, str]]:
        """Return (station -> country, station -> IANA timezone)."""
        countries: Dict[str, str] = {}
        timezones: Dict[str, str] = {}
        for row in self._rows("airports.csv"):
            code = row["code"]
            if not _blank(row.get("country")):
                countries[code] = row["country"]
            zone = (row.get("timezone") or "").strip()
            if _blank(zone):
                continue
            if not _known_zone(zone):
                logger.warning("Unknown timezone %r for airport %s; treating its local times as UTC", zone, code)
                continue
            timezones[code] = zone
        return countries, timezones

    # ------------------------------------------------------------
    # Tail assignments (produced outside the core)
    # ------------------------------------------------------------
    def load_tail_assignments(self) -> TailAssignmentTable:
        entries = {}
        for row in self._rows("tail_assignments.csv"):
            if _blank(row.get("registration")):
                continue
            entries[(row["template_id"], date.fromisoformat(row["flight_date"]))] = row["registration"]
        return TailAssignmentTable(entries)
