"""Dated flight instances produced by calendar expansion."""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional


class RouteTier(Enum):
    DOMESTIC = "domestic"
    INTERNATIONAL = "international"


def flight_id_for(template_id: str, flight_date: date) -> str:
    return f"{template_id}:{flight_date.isoformat()}"


def to_epoch_ms(instant: datetime) -> int:
    return int(round(instant.timestamp() * 1000))


@dataclass(frozen=True)
class ScheduledFlightInstance:
    """One operating day of a template. Derived on demand and never stored."""

    flight_id: str
    template_id: str
    flight_number: str
    flight_date: date
    departure: str
    arrival: str
    start: datetime
    end: datetime
    block_minutes: int
    aircraft_type: str
    service_type: str
    route_tier: Optional[RouteTier] = None
    pinned: bool = False
    pinned_registration: Optional[str] = None

    def pinned_to(self, registration: str) -> "ScheduledFlightInstance":
        return replace(self, pinned=True, pinned_registration=registration)

    def with_route_tier(self, tier: RouteTier) -> "ScheduledFlightInstance":
        return replace(self, route_tier=tier)

    def to_wire(self) -> Dict:
        """Represent the flight in the shape the solver expects."""
        return {
            "id": self.flight_id,
            "depStation": self.departure,
            "arrStation": self.arrival,
            "startMs": to_epoch_ms(self.start),
            "endMs": to_epoch_ms(self.end),
            "icaoType": self.aircraft_type,
            "pinned": self.pinned,
            "pinnedReg": self.pinned_registration,
            "routeType": self.route_tier.value if self.route_tier else None,
        }

    def to_dict(self) -> Dict:
        """Presentation form with ISO timestamps."""
        return {
            "flight_id": self.flight_id,
            "template_id": self.template_id,
            "flight_number": self.flight_number,
            "flight_date": self.flight_date.isoformat(),
            "departure": self.departure,
            "arrival": self.arrival,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "block_minutes": self.block_minutes,
            "aircraft_type": self.aircraft_type,
            "service_type": self.service_type,
            "route_tier": self.route_tier.value if self.route_tier else None,
            "pinned": self.pinned,
            "pinned_registration": self.pinned_registration,
        }
