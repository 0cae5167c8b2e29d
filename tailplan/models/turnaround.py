"""Turnaround-time policy shapes."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from tailplan.models.flight import RouteTier


class TierPair(Enum):
    """Arriving tier, then departing tier."""

    DOM_DOM = "dom_dom"
    DOM_INT = "dom_int"
    INT_DOM = "int_dom"
    INT_INT = "int_int"

    @classmethod
    def of(cls, arriving: RouteTier, departing: RouteTier) -> "TierPair":
        arriving_dom = arriving is RouteTier.DOMESTIC
        departing_dom = departing is RouteTier.DOMESTIC
        if arriving_dom and departing_dom:
            return cls.DOM_DOM
        if arriving_dom:
            return cls.DOM_INT
        if departing_dom:
            return cls.INT_DOM
        return cls.INT_INT


@dataclass(frozen=True)
class TurnaroundPolicy:
    aircraft_type: str
    scheduled_minutes: int
    minimum_minutes: Optional[int] = None
    hard_floor_minutes: Optional[int] = None
    tier_overrides: Mapping[TierPair, int] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class AirportTatOverride:
    station: str
    aircraft_type: str
    minutes: int


@dataclass(frozen=True)
class ResolvedTat:
    scheduled: int
    minimum: int
    hard_floor: int


@dataclass(frozen=True)
class TatMaps:
    """Parallel type-keyed maps handed to the request builder."""

    scheduled: Mapping[str, int]
    minimum: Mapping[str, int]
    hard_floor: Mapping[str, int]
    tier_overrides: Mapping[str, Mapping[TierPair, int]] = field(default_factory=lambda: MappingProxyType({}))
    station_overrides: Mapping[tuple, int] = field(default_factory=lambda: MappingProxyType({}))

    def covers(self, aircraft_type: str) -> bool:
        return aircraft_type in self.scheduled

    def to_wire(self) -> Dict:
        return {
            "tatMinutes": dict(self.scheduled),
            "minTatMinutes": dict(self.minimum),
            "hardTatMinutes": dict(self.hard_floor),
            "tatTierOverrides": {
                ac_type: {pair.value: minutes for pair, minutes in pairs.items()}
                for ac_type, pairs in self.tier_overrides.items()
            },
            "stationTatOverrides": [
                {"station": station, "icaoType": ac_type, "minutes": minutes}
                for (station, ac_type), minutes in sorted(self.station_overrides.items())
            ],
        }
