"""Composition of solver requests from expanded flights, fleet and TAT policy."""
from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Sequence

from tailplan.domain.context import OperatorContext
from tailplan.domain.contracts import AssignmentRequest, OptimizerSettings
from tailplan.engine.horizon import HorizonWindow
from tailplan.errors import ConfigurationError
from tailplan.log import get_logger
from tailplan.models.fleet import AircraftUnit
from tailplan.models.flight import RouteTier, ScheduledFlightInstance
from tailplan.models.turnaround import TatMaps

logger = get_logger(__name__)


class AssignmentRequestBuilder:
    """
    Packages one horizon's flights for the solver.

    Configuration problems (uncovered aircraft types, duplicate tails, pins to
    unknown tails) raise ConfigurationError here, before anything touches the
    network. They are the only failures surfaced to callers as exceptions.
    """

    def __init__(
        self,
        settings: Optional[OptimizerSettings] = None,
        context: Optional[OperatorContext] = None,
        classify=None,
    ) -> None:
        self.settings = settings or OptimizerSettings()
        self.context = context or OperatorContext()
        self.classify = classify

    def build(
        self,
        instances: Iterable[ScheduledFlightInstance],
        fleet: Sequence[AircraftUnit],
        tat: TatMaps,
        *,
        window: Optional[HorizonWindow] = None,
        pins: Optional[Mapping[str, str]] = None,
    ) -> AssignmentRequest:
        flights = self._select_flights(instances, window)
        flights = self._apply_pins(flights, fleet, pins or {})
        self._validate_fleet(fleet)
        self._validate_tat_coverage(flights, fleet, tat)

        request = AssignmentRequest(
            flights=tuple(flights),
            aircraft=tuple(fleet),
            tat=tat,
            settings=self.settings,
            operator_id=self.context.operator_id,
        )
        logger.info(
            "Built assignment request operator=%s window=%s flights=%d aircraft=%d continuity=%s",
            self.context.operator_id,
            window or "all",
            len(request.flights),
            len(request.aircraft),
            self.settings.chain_continuity.value,
        )
        return request

    def _select_flights(
        self, instances: Iterable[ScheduledFlightInstance], window: Optional[HorizonWindow]
    ) -> List[ScheduledFlightInstance]:
        flights: List[ScheduledFlightInstance] = []
        for instance in instances:
            if window is not None and not window.contains(instance.flight_date):
                continue
            if instance.route_tier is None and self.classify is not None:
                tier: RouteTier = self.classify(instance.departure, instance.arrival)
                instance = instance.with_route_tier(tier)
            flights.append(instance)
        return flights

    @staticmethod
    def _apply_pins(
        flights: List[ScheduledFlightInstance], fleet: Sequence[AircraftUnit], pins: Mapping[str, str]
    ) -> List[ScheduledFlightInstance]:
        if not pins:
            return flights
        if not isinstance(pins, Mapping):
            raise ConfigurationError("Pins must map flight ids to registrations")
        registrations = {unit.registration for unit in fleet}
        unknown = sorted({str(reg) for reg in pins.values() if reg not in registrations})
        if unknown:
            raise ConfigurationError(f"Pinned registrations not in fleet: {', '.join(unknown)}")
        return [
            flight.pinned_to(pins[flight.flight_id]) if flight.flight_id in pins else flight for flight in flights
        ]

    @staticmethod
    def _validate_fleet(fleet: Sequence[AircraftUnit]) -> None:
        seen = set()
        duplicates = set()
        for unit in fleet:
            if unit.registration in seen:
                duplicates.add(unit.registration)
            seen.add(unit.registration)
        if duplicates:
            raise ConfigurationError(f"Duplicate registrations in fleet: {', '.join(sorted(duplicates))}")

    @staticmethod
    def _validate_tat_coverage(
        flights: Sequence[ScheduledFlightInstance], fleet: Sequence[AircraftUnit], tat: TatMaps
    ) -> None:
        types = {flight.aircraft_type for flight in flights} | {unit.aircraft_type for unit in fleet}
        missing = sorted(ac_type for ac_type in types if not tat.covers(ac_type))
        if missing:
            raise ConfigurationError(f"No scheduled TAT configured for aircraft types: {', '.join(missing)}")
