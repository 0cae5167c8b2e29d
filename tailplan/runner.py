"""Planning runner wiring repositories, pipeline stages and the solver gateway."""
from __future__ import annotations

import argparse
import json
from datetime import date
from typing import List, Mapping, Optional

from tailplan.config import HOME_COUNTRY, OPERATOR_ID
from tailplan.domain.context import OperatorContext
from tailplan.domain.contracts import AssignmentRequest, OptimizerSettings
from tailplan.engine.calendar import DEFAULT_STATUSES, expand_templates
from tailplan.engine.horizon import HorizonWindow, horizon_windows
from tailplan.engine.interpreter import InterpretedResult, ResultInterpreter
from tailplan.engine.request_builder import AssignmentRequestBuilder
from tailplan.engine.turnaround import RouteClassifier, TurnaroundPolicyResolver
from tailplan.engine.utilization import TailAssignmentSource, UtilizationAggregator, UtilizationRow, to_frame
from tailplan.infra.data_loader import DatasetLoader
from tailplan.infra.solver_api import SolverGateway
from tailplan.log import get_logger
from tailplan.models.flight import ScheduledFlightInstance

logger = get_logger(__name__)


class PlanningRunner:
    """Coordinates one operator's expansion, solve and utilization runs."""

    def __init__(
        self,
        loader: Optional[DatasetLoader] = None,
        gateway: Optional[SolverGateway] = None,
        settings: Optional[OptimizerSettings] = None,
        context: Optional[OperatorContext] = None,
    ) -> None:
        self.loader = loader or DatasetLoader()
        self.gateway = gateway or SolverGateway()
        self.context = context or OperatorContext(operator_id=OPERATOR_ID, home_country=HOME_COUNTRY)

        self.templates = [tpl for tpl in self.loader.load_templates() if self.context.owns(tpl.operator_id)]
        self.seasons = self.loader.load_seasons()
        self.fleet = self.loader.load_fleet()
        countries, self.timezones = self.loader.load_airports()
        self.classifier = RouteClassifier(countries, self.context)
        self.resolver = TurnaroundPolicyResolver(
            self.loader.load_turnaround_policies(), self.loader.load_airport_tat_overrides()
        )
        self.settings = settings or OptimizerSettings(family_map=self.loader.load_family_map())

    def expand(self, start: date, end: date) -> List[ScheduledFlightInstance]:
        instances = expand_templates(
            self.templates,
            start,
            end,
            allowed_statuses=DEFAULT_STATUSES,
            seasons=self.seasons,
            timezones=self.timezones,
            tier_of=self.classifier,
        )
        logger.info("Expanded %d templates into %d flights for %s..%s", len(self.templates), len(instances), start, end)
        return instances

    def build_request(
        self,
        instances: List[ScheduledFlightInstance],
        window: Optional[HorizonWindow] = None,
        pins: Optional[Mapping[str, str]] = None,
        settings: Optional[OptimizerSettings] = None,
    ) -> AssignmentRequest:
        types = {flight.aircraft_type for flight in instances} | {unit.aircraft_type for unit in self.fleet}
        builder = AssignmentRequestBuilder(settings or self.settings, self.context, classify=self.classifier)
        return builder.build(instances, self.fleet, self.resolver.tat_maps(types), window=window, pins=pins)

    def solve(
        self,
        start: date,
        end: date,
        window_days: Optional[int] = None,
        overlap_days: int = 0,
        pins: Optional[Mapping[str, str]] = None,
    ) -> List[InterpretedResult]:
        """Solve the range in one go, or window by window when window_days is set."""
        instances = self.expand(start, end)
        if window_days is None:
            windows = [HorizonWindow(start, end)]
        else:
            windows = list(horizon_windows(start, end, window_days, overlap_days))

        outcomes: List[InterpretedResult] = []
        for window in windows:
            request = self.build_request(instances, window=window, pins=pins)
            result = self.gateway.solve(request)
            outcomes.append(ResultInterpreter(request).interpret(result))
        return outcomes

    def utilization(
        self, start: date, end: date, assignments: Optional[TailAssignmentSource] = None
    ) -> List[UtilizationRow]:
        aggregator = UtilizationAggregator(
            self.templates,
            assignments or self.loader.load_tail_assignments(),
            self.context,
            seasons=self.seasons,
        )
        return aggregator.compute(start, end)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Tail-assignment planning core")
    parser.add_argument("command", choices=["expand", "solve", "utilization"])
    parser.add_argument("--start", type=date.fromisoformat, required=True)
    parser.add_argument("--end", type=date.fromisoformat, required=True)
    parser.add_argument("--window-days", type=int, default=None)
    parser.add_argument("--overlap-days", type=int, default=0)
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    runner = PlanningRunner()
    if args.command == "expand":
        payload: object = [flight.to_dict() for flight in runner.expand(args.start, args.end)]
    elif args.command == "solve":
        outcomes = runner.solve(args.start, args.end, args.window_days, args.overlap_days)
        payload = [outcome.summary() for outcome in outcomes]
    else:
        rows = runner.utilization(args.start, args.end)
        print(to_frame(rows).to_string(index=False))
        return 0
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
