"""Pure planning pipeline stages."""

from .calendar import DEFAULT_STATUSES, expand_templates
from .horizon import HorizonWindow, horizon_windows
from .interpreter import InterpretedResult, ResultInterpreter
from .request_builder import AssignmentRequestBuilder
from .turnaround import RouteClassifier, TurnaroundPolicyResolver
from .utilization import TailAssignmentTable, UtilizationAggregator, UtilizationRow

__all__ = [
    "DEFAULT_STATUSES",
    "expand_templates",
    "HorizonWindow",
    "horizon_windows",
    "InterpretedResult",
    "ResultInterpreter",
    "AssignmentRequestBuilder",
    "RouteClassifier",
    "TurnaroundPolicyResolver",
    "TailAssignmentTable",
    "UtilizationAggregator",
    "UtilizationRow",
]
