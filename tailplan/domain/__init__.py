"""Contracts crossing the solver boundary and the explicit operator context."""

from .context import OperatorContext
from .contracts import (
    AssignmentRequest,
    AssignmentResult,
    ChainBreak,
    ChainContinuity,
    OptimizerSettings,
    SolveStatus,
)

__all__ = [
    "OperatorContext",
    "AssignmentRequest",
    "AssignmentResult",
    "ChainBreak",
    "ChainContinuity",
    "OptimizerSettings",
    "SolveStatus",
]
