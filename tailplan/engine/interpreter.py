"""Validation and presentation views over a solver result."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from tailplan.domain.contracts import AssignmentRequest, AssignmentResult, ChainBreak
from tailplan.errors import DataIntegrityWarning
from tailplan.log import get_logger

logger = get_logger(__name__)


@dataclass
class InterpretedResult:
    result: AssignmentResult
    flights_by_registration: Dict[str, List[str]] = field(default_factory=dict)
    chain_breaks_by_flight: Dict[str, ChainBreak] = field(default_factory=dict)
    assignments: Dict[str, str] = field(default_factory=dict)
    overflow: List[str] = field(default_factory=list)
    unaccounted: List[str] = field(default_factory=list)
    warnings: List[DataIntegrityWarning] = field(default_factory=list)

    @property
    def overflow_count(self) -> int:
        return len(self.overflow)

    @property
    def assigned_count(self) -> int:
        return len(self.assignments)

    def summary(self) -> Dict:
        return {
            "status": self.result.status.value,
            "assigned": self.assigned_count,
            "overflow": self.overflow_count,
            "chain_breaks": len(self.chain_breaks_by_flight),
            "unaccounted": len(self.unaccounted),
            "objective_value": self.result.objective_value,
            "elapsed_ms": self.result.elapsed_ms,
            "message": self.result.message,
            "warnings": [str(item) for item in self.warnings],
        }


class ResultInterpreter:
    """
    Derives views from a raw result against the request that produced it.

    The solver reply is treated as authoritative: ids the request never
    contained are reported as data-integrity warnings and dropped, never
    raised.
    """

    def __init__(self, request: AssignmentRequest) -> None:
        self.request = request
        self.flights = {flight.flight_id: flight for flight in request.flights}

    def interpret(self, result: AssignmentResult) -> InterpretedResult:
        view = InterpretedResult(result=result)

        for flight_id, registration in result.assignments.items():
            if flight_id not in self.flights:
                self._warn(view, f"Assignment references unknown flight {flight_id} ({registration})")
                continue
            view.assignments[flight_id] = registration
            pinned = self.flights[flight_id]
            if pinned.pinned and pinned.pinned_registration != registration:
                self._warn(
                    view,
                    f"Pinned flight {flight_id} assigned to {registration}, expected {pinned.pinned_registration}",
                )

        seen_overflow = set()
        for flight_id in result.overflow:
            if flight_id not in self.flights:
                self._warn(view, f"Overflow references unknown flight {flight_id}")
                continue
            if flight_id in view.assignments:
                self._warn(view, f"Flight {flight_id} is both assigned and in overflow; keeping the assignment")
                continue
            if flight_id in seen_overflow:
                continue
            seen_overflow.add(flight_id)
            view.overflow.append(flight_id)

        for item in result.chain_breaks:
            if item.flight_id not in self.flights:
                self._warn(view, f"Chain break references unknown flight {item.flight_id}")
                continue
            view.chain_breaks_by_flight[item.flight_id] = item

        view.flights_by_registration = self._group_by_registration(view.assignments)
        view.unaccounted = [
            flight_id
            for flight_id in self.flights
            if flight_id not in view.assignments and flight_id not in seen_overflow
        ]
        if view.unaccounted and not result.is_error:
            logger.warning("%d flights neither assigned nor in overflow", len(view.unaccounted))

        logger.info(
            "Interpreted %s result: %d assigned, %d overflow, %d chain breaks",
            result.status.value,
            view.assigned_count,
            view.overflow_count,
            len(view.chain_breaks_by_flight),
        )
        return view

    def _group_by_registration(self, assignments: Dict[str, str]) -> Dict[str, List[str]]:
        grouped: Dict[str, List[str]] = {}
        for flight_id, registration in assignments.items():
            grouped.setdefault(registration, []).append(flight_id)
        for flight_ids in grouped.values():
            flight_ids.sort(key=lambda fid: (self.flights[fid].start, fid))
        return dict(sorted(grouped.items()))

    @staticmethod
    def _warn(view: InterpretedResult, message: str) -> None:
        logger.warning("Data integrity: %s", message)
        view.warnings.append(DataIntegrityWarning(message))
