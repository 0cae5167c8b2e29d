"""Value types read from planning repositories and produced by expansion."""

from .fleet import AircraftUnit
from .flight import RouteTier, ScheduledFlightInstance, flight_id_for
from .template import FlightNumberTemplate, Season, TemplateStatus, WeeklyPattern
from .turnaround import AirportTatOverride, ResolvedTat, TatMaps, TierPair, TurnaroundPolicy

__all__ = [
    "AircraftUnit",
    "RouteTier",
    "ScheduledFlightInstance",
    "flight_id_for",
    "FlightNumberTemplate",
    "Season",
    "TemplateStatus",
    "WeeklyPattern",
    "AirportTatOverride",
    "ResolvedTat",
    "TatMaps",
    "TierPair",
    "TurnaroundPolicy",
]
