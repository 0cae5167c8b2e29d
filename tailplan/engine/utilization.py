"""Per-registration daily utilization built from calendar expansion."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Tuple

import pandas as pd

from tailplan.domain.context import OperatorContext
from tailplan.engine.calendar import DEFAULT_STATUSES, expand_templates
from tailplan.log import get_logger
from tailplan.models.flight import ScheduledFlightInstance
from tailplan.models.template import FlightNumberTemplate, Season, TemplateStatus

logger = get_logger(__name__)

GROUP_KEYS = ["registration", "aircraft_type", "flight_date"]


@dataclass(frozen=True)
class UtilizationRow:
    registration: str
    aircraft_type: str
    date: date
    block_minutes: int
    sector_count: int

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data


class TailAssignmentSource(Protocol):
    def registration_for(self, template_id: str, flight_date: date) -> Optional[str]:
        ...


class TailAssignmentTable:
    """In-memory tail assignments keyed by (template id, flight date)."""

    def __init__(self, entries: Optional[Mapping[Tuple[str, date], str]] = None) -> None:
        self.entries: Dict[Tuple[str, date], str] = dict(entries or {})

    def registration_for(self, template_id: str, flight_date: date) -> Optional[str]:
        return self.entries.get((template_id, flight_date))

    @classmethod
    def from_solver(
        cls, flights: Iterable[ScheduledFlightInstance], assignments: Mapping[str, str]
    ) -> "TailAssignmentTable":
        """Join solver assignments (flight id -> registration) back to template days."""
        entries = {
            (flight.template_id, flight.flight_date): assignments[flight.flight_id]
            for flight in flights
            if flight.flight_id in assignments
        }
        return cls(entries)

    def __len__(self) -> int:
        return len(self.entries)


class UtilizationAggregator:
    """Block minutes and sector counts per tail and day; unassigned flights are left out."""

    def __init__(
        self,
        templates: Iterable[FlightNumberTemplate],
        assignments: TailAssignmentSource,
        context: Optional[OperatorContext] = None,
        allowed_statuses: Iterable[TemplateStatus] = DEFAULT_STATUSES,
        seasons: Optional[Mapping[str, Season]] = None,
    ) -> None:
        self.context = context or OperatorContext()
        self.templates = [tpl for tpl in templates if self.context.owns(tpl.operator_id)]
        self.assignments = assignments
        self.allowed_statuses = frozenset(allowed_statuses)
        self.seasons = seasons

    def compute(self, start: date, end: date) -> List[UtilizationRow]:
        records = []
        instances = expand_templates(
            self.templates, start, end, allowed_statuses=self.allowed_statuses, seasons=self.seasons
        )
        for instance in instances:
            registration = self.assignments.registration_for(instance.template_id, instance.flight_date)
            if not registration:
                continue
            records.append(
                {
                    "registration": registration,
                    "aircraft_type": instance.aircraft_type,
                    "flight_date": instance.flight_date,
                    "block_minutes": instance.block_minutes,
                    "flight_id": instance.flight_id,
                }
            )

        logger.info(
            "Utilization %s..%s operator=%s: %d of %d instances assigned",
            start,
            end,
            self.context.operator_id,
            len(records),
            len(instances),
        )
        if not records:
            return []

        frame = pd.DataFrame.from_records(records)
        grouped = (
            frame.groupby(GROUP_KEYS, as_index=False, sort=False)
            .agg(block_minutes=("block_minutes", "sum"), sector_count=("flight_id", "count"))
            .sort_values(["registration", "flight_date", "aircraft_type"], kind="mergesort")
        )
        return [
            UtilizationRow(
                registration=str(row.registration),
                aircraft_type=str(row.aircraft_type),
                date=row.flight_date,
                block_minutes=int(row.block_minutes),
                sector_count=int(row.sector_count),
            )
            for row in grouped.itertuples(index=False)
        ]


def to_frame(rows: Iterable[UtilizationRow]) -> pd.DataFrame:
    """Tabular view of utilization rows for export or display."""
    columns = ["registration", "aircraft_type", "date", "block_minutes", "sector_count"]
    return pd.DataFrame([asdict(row) for row in rows], columns=columns)
