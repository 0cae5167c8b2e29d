"""Data shapes exchanged with the tail-assignment solver.

Every class here owns its JSON translation so callers never deal with the
solver's camelCase keys directly.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from tailplan.config import (
    DEFAULT_CHAIN_BREAK_COST,
    DEFAULT_MIP_GAP,
    DEFAULT_OVERFLOW_COST,
    DEFAULT_SOFT_TAT_PENALTY,
    DEFAULT_TIGHT_TAT_PENALTY,
    DEFAULT_TIME_LIMIT_SEC,
)
from tailplan.models.fleet import AircraftUnit
from tailplan.models.flight import ScheduledFlightInstance
from tailplan.models.turnaround import TatMaps


class ChainContinuity(Enum):
    STRICT = "strict"
    FLEXIBLE = "flexible"


class SolveStatus(Enum):
    """Terminal outcome of one solve. Error is the only locally produced value."""

    OPTIMAL = "Optimal"
    FEASIBLE = "Feasible"
    INFEASIBLE = "Infeasible"
    ERROR = "Error"


@dataclass(frozen=True)
class OptimizerSettings:
    """Cost weights and solver knobs for one request."""

    family_map: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    allow_family_substitution: bool = False
    chain_break_cost: float = DEFAULT_CHAIN_BREAK_COST
    overflow_cost: float = DEFAULT_OVERFLOW_COST
    tight_tat_penalty: float = DEFAULT_TIGHT_TAT_PENALTY
    soft_tat_penalty: float = DEFAULT_SOFT_TAT_PENALTY
    chain_continuity: ChainContinuity = ChainContinuity.STRICT
    time_limit_sec: int = DEFAULT_TIME_LIMIT_SEC
    mip_gap: float = DEFAULT_MIP_GAP

    def __post_init__(self) -> None:
        if self.time_limit_sec <= 0:
            raise ValueError("time_limit_sec must be positive")
        if not 0.0 <= self.mip_gap < 1.0:
            raise ValueError("mip_gap must be within [0, 1)")
        for name in ("chain_break_cost", "overflow_cost", "tight_tat_penalty", "soft_tat_penalty"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        object.__setattr__(self, "family_map", MappingProxyType(dict(self.family_map)))

    def to_wire(self) -> Dict:
        return {
            "timeLimitSec": self.time_limit_sec,
            "mipGap": self.mip_gap,
            "allowFamilySub": self.allow_family_substitution,
            "familyMap": dict(self.family_map),
            "chainBreakCost": self.chain_break_cost,
            "overflowCost": self.overflow_cost,
            "tightTatPenalty": self.tight_tat_penalty,
            "softTatPenalty": self.soft_tat_penalty,
            "chainContinuity": self.chain_continuity.value,
        }

    @staticmethod
    def from_dict(payload: Optional[Dict]) -> "OptimizerSettings":
        """Build settings from snake_case keys; unknown keys are rejected."""
        payload = dict(payload or {})
        if "chain_continuity" in payload:
            payload["chain_continuity"] = ChainContinuity(payload["chain_continuity"])
        return OptimizerSettings(**payload)


@dataclass(frozen=True)
class AssignmentRequest:
    """Complete, immutable solve package."""

    flights: Tuple[ScheduledFlightInstance, ...]
    aircraft: Tuple[AircraftUnit, ...]
    tat: TatMaps
    settings: OptimizerSettings
    operator_id: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.flights

    @property
    def flight_ids(self) -> List[str]:
        return [flight.flight_id for flight in self.flights]

    def to_wire(self) -> Dict:
        payload = {
            "flights": [flight.to_wire() for flight in self.flights],
            "aircraft": [unit.to_wire() for unit in self.aircraft],
        }
        payload.update(self.tat.to_wire())
        payload.update(self.settings.to_wire())
        if self.operator_id is not None:
            payload["operatorId"] = self.operator_id
        return payload


@dataclass(frozen=True)
class ChainBreak:
    flight_id: str
    prev_arrival: str
    next_departure: str

    def to_wire(self) -> Dict:
        return {"flightId": self.flight_id, "prevArr": self.prev_arrival, "nextDep": self.next_departure}

    @staticmethod
    def from_wire(payload: Dict) -> "ChainBreak":
        return ChainBreak(
            flight_id=str(payload["flightId"]),
            prev_arrival=str(payload.get("prevArr", "")),
            next_departure=str(payload.get("nextDep", "")),
        )


@dataclass(frozen=True)
class AssignmentResult:
    status: SolveStatus
    assignments: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    overflow: Tuple[str, ...] = ()
    chain_breaks: Tuple[ChainBreak, ...] = ()
    objective_value: float = 0.0
    total_variables: int = 0
    total_constraints: int = 0
    elapsed_ms: float = 0.0
    message: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.status is SolveStatus.ERROR

    @staticmethod
    def empty() -> "AssignmentResult":
        """Result for a request with no flights: trivially optimal."""
        return AssignmentResult(status=SolveStatus.OPTIMAL)

    @staticmethod
    def error(flight_ids: List[str], message: str) -> "AssignmentResult":
        """Renderable "nothing assigned" outcome; every flight overflows."""
        return AssignmentResult(status=SolveStatus.ERROR, overflow=tuple(flight_ids), message=message)

    def to_wire(self) -> Dict:
        payload = {
            "status": self.status.value,
            "assignments": dict(self.assignments),
            "overflow": list(self.overflow),
            "chainBreaks": [item.to_wire() for item in self.chain_breaks],
            "objectiveValue": self.objective_value,
            "totalVariables": self.total_variables,
            "totalConstraints": self.total_constraints,
            "elapsedMs": self.elapsed_ms,
        }
        if self.message is not None:
            payload["message"] = self.message
        return payload

    @staticmethod
    def from_wire(payload: Dict) -> "AssignmentResult":
        """Decode the solver reply; raises KeyError/ValueError/TypeError when malformed."""
        return AssignmentResult(
            status=SolveStatus(payload["status"]),
            assignments=MappingProxyType(
                {str(flight_id): str(reg) for flight_id, reg in (payload.get("assignments") or {}).items()}
            ),
            overflow=tuple(str(flight_id) for flight_id in (payload.get("overflow") or [])),
            chain_breaks=tuple(ChainBreak.from_wire(item) for item in (payload.get("chainBreaks") or [])),
            objective_value=float(payload.get("objectiveValue") or 0.0),
            total_variables=int(payload.get("totalVariables") or 0),
            total_constraints=int(payload.get("totalConstraints") or 0),
            elapsed_ms=float(payload.get("elapsedMs") or 0.0),
            message=payload.get("message"),
        )
