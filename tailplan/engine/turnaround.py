"""Turnaround-time resolution and route-tier classification."""
from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional

from tailplan.config import DEFAULT_TAT_MINUTES
from tailplan.domain.context import OperatorContext
from tailplan.log import get_logger
from tailplan.models.flight import RouteTier
from tailplan.models.turnaround import AirportTatOverride, ResolvedTat, TatMaps, TierPair, TurnaroundPolicy

logger = get_logger(__name__)


class TurnaroundPolicyResolver:
    """
    Resolves scheduled / minimum / hard-floor TAT for an aircraft type.

    Lookup order for the scheduled value: airport+type override, then the
    type's tier-pair override, then the type default, then the global
    default. Minimum falls back to scheduled and hard floor to minimum.
    """

    def __init__(
        self,
        policies: Iterable[TurnaroundPolicy],
        airport_overrides: Iterable[AirportTatOverride] = (),
        global_default: Optional[int] = DEFAULT_TAT_MINUTES,
    ) -> None:
        self.policies: Dict[str, TurnaroundPolicy] = {policy.aircraft_type: policy for policy in policies}
        self.airport_overrides: Dict[tuple, int] = {
            (item.station, item.aircraft_type): item.minutes for item in airport_overrides
        }
        self.global_default = global_default

    def resolve(
        self,
        aircraft_type: str,
        tier_pair: Optional[TierPair] = None,
        station: Optional[str] = None,
    ) -> Optional[ResolvedTat]:
        """Return the resolved TAT, or None when no level covers the type."""
        policy = self.policies.get(aircraft_type)
        override = self.airport_overrides.get((station, aircraft_type)) if station else None

        if override is not None:
            scheduled = override
        elif policy is not None:
            scheduled = policy.scheduled_minutes
            if tier_pair is not None and tier_pair in policy.tier_overrides:
                scheduled = policy.tier_overrides[tier_pair]
        elif self.global_default is not None:
            return ResolvedTat(self.global_default, self.global_default, self.global_default)
        else:
            return None

        minimum = scheduled
        if policy is not None and policy.minimum_minutes is not None:
            minimum = min(policy.minimum_minutes, scheduled)
        hard_floor = minimum
        if policy is not None and policy.hard_floor_minutes is not None:
            hard_floor = min(policy.hard_floor_minutes, minimum)
        return ResolvedTat(scheduled=scheduled, minimum=minimum, hard_floor=hard_floor)

    def tat_maps(self, aircraft_types: Iterable[str]) -> TatMaps:
        """Build the type-keyed maps for every type that resolves."""
        scheduled: Dict[str, int] = {}
        minimum: Dict[str, int] = {}
        hard_floor: Dict[str, int] = {}
        tier_overrides: Dict[str, Mapping[TierPair, int]] = {}

        for ac_type in sorted(set(aircraft_types)):
            resolved = self.resolve(ac_type)
            if resolved is None:
                logger.warning("No turnaround policy for aircraft type %s", ac_type)
                continue
            scheduled[ac_type] = resolved.scheduled
            minimum[ac_type] = resolved.minimum
            hard_floor[ac_type] = resolved.hard_floor
            policy = self.policies.get(ac_type)
            if policy is not None and policy.tier_overrides:
                tier_overrides[ac_type] = MappingProxyType(dict(policy.tier_overrides))

        station_overrides = {
            key: minutes for key, minutes in self.airport_overrides.items() if key[1] in scheduled
        }
        return TatMaps(
            scheduled=MappingProxyType(scheduled),
            minimum=MappingProxyType(minimum),
            hard_floor=MappingProxyType(hard_floor),
            tier_overrides=MappingProxyType(tier_overrides),
            station_overrides=MappingProxyType(station_overrides),
        )


class RouteClassifier:
    """Classifies a leg as domestic when both ends are in the operator's home country."""

    def __init__(self, country_of_station: Mapping[str, str], context: OperatorContext) -> None:
        self.country_of_station = country_of_station
        self.context = context

    def is_domestic_station(self, station: str) -> bool:
        if self.context.home_country is None:
            return False
        return self.country_of_station.get(station) == self.context.home_country

    def __call__(self, departure: str, arrival: str) -> RouteTier:
        if self.is_domestic_station(departure) and self.is_domestic_station(arrival):
            return RouteTier.DOMESTIC
        return RouteTier.INTERNATIONAL
