"""Error taxonomy for the planning core.

Only ``ConfigurationError`` is meant to reach callers as an exception: it is
raised before any network traffic and is fixable by the caller. The transport
family is raised inside the solver gateway and converted there into an
``Error`` result, so presentation layers always receive a renderable value.
"""
from __future__ import annotations


class TailPlanError(Exception):
    """Base class for planning-core failures."""


class ConfigurationError(TailPlanError):
    """Missing endpoint, missing TAT coverage, or an unusable pin."""


class TransportError(TailPlanError):
    """The solver could not be reached or its reply could not be read."""


class SolverTimeoutError(TransportError):
    def __init__(self, ceiling_sec: float) -> None:
        super().__init__(f"Solver timed out after {ceiling_sec:g}s")
        self.ceiling_sec = ceiling_sec


class SolverCancelledError(TransportError):
    def __init__(self) -> None:
        super().__init__("Solver request cancelled by caller")


class UpstreamHTTPError(TailPlanError):
    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Solver returned HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class DataIntegrityWarning(UserWarning):
    """The solver response references flights the request never sent."""
