"""Result interpretation checks."""
from __future__ import annotations

import unittest
from datetime import date
from types import MappingProxyType

from tailplan.domain.contracts import AssignmentResult, ChainBreak, SolveStatus
from tailplan.engine.interpreter import ResultInterpreter
from tailplan.tests.helpers import make_flight, make_request


class ResultInterpreterTest(unittest.TestCase):
    def setUp(self) -> None:
        self.late = make_flight("T-VJ121", hour=15)
        self.early = make_flight("T-VJ120", hour=6)
        self.other = make_flight("T-VJ123", hour=9)
        self.request = make_request([self.late, self.early, self.other])
        self.interpreter = ResultInterpreter(self.request)

    def _result(self, **fields) -> AssignmentResult:
        fields.setdefault("status", SolveStatus.OPTIMAL)
        if "assignments" in fields:
            fields["assignments"] = MappingProxyType(fields["assignments"])
        return AssignmentResult(**fields)

    def test_groups_by_registration_in_time_order(self) -> None:
        view = self.interpreter.interpret(
            self._result(
                assignments={
                    self.late.flight_id: "VN-A123",
                    self.early.flight_id: "VN-A123",
                    self.other.flight_id: "VN-A124",
                }
            )
        )
        self.assertEqual(view.flights_by_registration["VN-A123"], [self.early.flight_id, self.late.flight_id])
        self.assertEqual(view.flights_by_registration["VN-A124"], [self.other.flight_id])
        self.assertEqual(view.unaccounted, [])
        self.assertEqual(view.warnings, [])

    def test_unknown_ids_are_dropped_with_warning(self) -> None:
        view = self.interpreter.interpret(
            self._result(
                assignments={self.early.flight_id: "VN-A123", "GHOST:2024-01-05": "VN-A124"},
                overflow=("PHANTOM:2024-01-05", self.late.flight_id, self.other.flight_id),
                chain_breaks=(ChainBreak("NOPE:2024-01-05", "HAN", "SGN"),),
            )
        )
        self.assertEqual(view.assignments, {self.early.flight_id: "VN-A123"})
        self.assertEqual(view.overflow, [self.late.flight_id, self.other.flight_id])
        self.assertEqual(view.chain_breaks_by_flight, {})
        self.assertEqual(len(view.warnings), 3)

    def test_duplicate_overflow_is_counted_once(self) -> None:
        view = self.interpreter.interpret(
            self._result(overflow=(self.late.flight_id, self.late.flight_id, self.early.flight_id))
        )
        self.assertEqual(view.overflow_count, 2)
        self.assertEqual(view.unaccounted, [self.other.flight_id])

    def test_assignment_wins_over_overflow(self) -> None:
        view = self.interpreter.interpret(
            self._result(assignments={self.early.flight_id: "VN-A123"}, overflow=(self.early.flight_id,))
        )
        self.assertIn(self.early.flight_id, view.assignments)
        self.assertNotIn(self.early.flight_id, view.overflow)
        self.assertEqual(len(view.warnings), 1)

    def test_chain_breaks_indexed_by_flight(self) -> None:
        item = ChainBreak(self.late.flight_id, "SGN", "HAN")
        view = self.interpreter.interpret(
            self._result(assignments={self.late.flight_id: "VN-A123"}, chain_breaks=(item,))
        )
        self.assertEqual(view.chain_breaks_by_flight, {self.late.flight_id: item})
        self.assertEqual(view.summary()["chain_breaks"], 1)

    def test_pinned_mismatch_is_reported(self) -> None:
        pinned = make_flight("T-VJ500", day=date(2024, 1, 6)).pinned_to("VN-A124")
        interpreter = ResultInterpreter(make_request([pinned]))
        view = interpreter.interpret(self._result(assignments={pinned.flight_id: "VN-A123"}))
        self.assertEqual(view.assignments, {pinned.flight_id: "VN-A123"})
        self.assertIn("Pinned", str(view.warnings[0]))

    def test_error_result_overflows_everything(self) -> None:
        result = AssignmentResult.error(self.request.flight_ids, "solver not configured")
        view = self.interpreter.interpret(result)
        self.assertEqual(view.overflow_count, 3)
        self.assertEqual(view.assigned_count, 0)
        self.assertEqual(view.flights_by_registration, {})
        summary = view.summary()
        self.assertEqual(summary["status"], "Error")
        self.assertEqual(summary["message"], "solver not configured")


if __name__ == "__main__":
    unittest.main()
