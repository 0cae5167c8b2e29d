"""Fleet utilization aggregation checks."""
from __future__ import annotations

import unittest
from datetime import date, time

from tailplan.domain.context import OperatorContext
from tailplan.engine.utilization import TailAssignmentTable, UtilizationAggregator, UtilizationRow, to_frame
from tailplan.models.template import TemplateStatus
from tailplan.tests.helpers import make_flight, make_template

DAY = date(2024, 1, 5)


class UtilizationTest(unittest.TestCase):
    def setUp(self) -> None:
        self.outbound = make_template(
            template_id="T-VJ120", flight_number="VJ120", block_minutes=90, departure_time=time(6, 0),
            arrival_time=time(7, 30), operator_id="VJ",
        )
        self.inbound = make_template(
            template_id="T-VJ121", flight_number="VJ121", block_minutes=95, departure_time=time(9, 0),
            arrival_time=time(10, 35), departure="HAN", arrival="SGN", operator_id="VJ",
        )
        self.unassigned = make_template(template_id="T-VJ122", flight_number="VJ122", operator_id="VJ")

    def test_scenario_two_sectors_one_tail(self) -> None:
        table = TailAssignmentTable({("T-VJ120", DAY): "VN-A123", ("T-VJ121", DAY): "VN-A123"})
        rows = UtilizationAggregator([self.outbound, self.inbound, self.unassigned], table).compute(DAY, DAY)
        self.assertEqual(rows, [UtilizationRow("VN-A123", "A321", DAY, 185, 2)])

    def test_rows_ordered_by_registration_then_date(self) -> None:
        table = TailAssignmentTable(
            {
                ("T-VJ120", date(2024, 1, 6)): "VN-A124",
                ("T-VJ120", DAY): "VN-A124",
                ("T-VJ121", DAY): "VN-A123",
            }
        )
        rows = UtilizationAggregator([self.outbound, self.inbound], table).compute(DAY, date(2024, 1, 6))
        self.assertEqual(
            [(row.registration, row.date) for row in rows],
            [("VN-A123", DAY), ("VN-A124", DAY), ("VN-A124", date(2024, 1, 6))],
        )

    def test_other_operators_are_ignored(self) -> None:
        foreign = make_template(template_id="T-QH200", flight_number="QH200", operator_id="QH")
        table = TailAssignmentTable({("T-VJ120", DAY): "VN-A123", ("T-QH200", DAY): "VN-A123"})
        aggregator = UtilizationAggregator(
            [self.outbound, foreign], table, context=OperatorContext(operator_id="VJ")
        )
        self.assertEqual(aggregator.compute(DAY, DAY), [UtilizationRow("VN-A123", "A321", DAY, 90, 1)])

    def test_cancelled_templates_do_not_count(self) -> None:
        cancelled = make_template(template_id="T-VJ999", status=TemplateStatus.CANCELLED)
        table = TailAssignmentTable({("T-VJ999", DAY): "VN-A123"})
        self.assertEqual(UtilizationAggregator([cancelled], table).compute(DAY, DAY), [])

    def test_no_assignments_gives_no_rows(self) -> None:
        rows = UtilizationAggregator([self.outbound], TailAssignmentTable()).compute(DAY, date(2024, 1, 7))
        self.assertEqual(rows, [])

    def test_table_from_solver_assignments(self) -> None:
        flights = [make_flight("T-VJ120"), make_flight("T-VJ121", hour=9)]
        table = TailAssignmentTable.from_solver(flights, {"T-VJ120:2024-01-05": "VN-A124"})
        self.assertEqual(len(table), 1)
        self.assertEqual(table.registration_for("T-VJ120", DAY), "VN-A124")
        self.assertIsNone(table.registration_for("T-VJ121", DAY))

    def test_frame_and_dict_views(self) -> None:
        row = UtilizationRow("VN-A123", "A321", DAY, 185, 2)
        frame = to_frame([row])
        self.assertEqual(list(frame.columns), ["registration", "aircraft_type", "date", "block_minutes", "sector_count"])
        self.assertEqual(int(frame.loc[0, "block_minutes"]), 185)
        self.assertEqual(row.to_dict()["date"], "2024-01-05")


if __name__ == "__main__":
    unittest.main()
