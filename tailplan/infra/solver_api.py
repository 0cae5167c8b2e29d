"""HTTP gateway to the external tail-assignment solver.

This is the only place the planning core talks to the network. Every call
returns an AssignmentResult: expected failures (no endpoint, HTTP errors,
timeouts, transport problems, cancellation) come back as an Error result
with every submitted flight in overflow.
"""
from __future__ import annotations

import socket
import threading
from typing import Callable, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.connection import HTTPConnection, HTTPSConnection
from urllib3.connectionpool import HTTPConnectionPool, HTTPSConnectionPool

from tailplan.config import SOLVER_BASE_URL, SOLVER_CEILING_SEC, SOLVER_CONNECT_TIMEOUT_SEC
from tailplan.domain.contracts import AssignmentRequest, AssignmentResult
from tailplan.errors import (
    SolverCancelledError,
    SolverTimeoutError,
    TailPlanError,
    TransportError,
    UpstreamHTTPError,
)
from tailplan.log import get_logger

logger = get_logger(__name__)

# Hard client-side ceiling, independent of the solver's own time budget.
MAX_CEILING_SEC = 600.0
NOT_CONFIGURED_MESSAGE = "solver not configured (SOLVER_BASE_URL is empty)"


def _tracking_pool_classes(register: Callable, connected: Callable) -> Dict[str, type]:
    """
    Connection pools that report every new connection to ``register`` and
    again to ``connected`` once its socket exists.
    """

    class TrackedHTTPConnection(HTTPConnection):
        def connect(self):
            super().connect()
            connected(self)

    class TrackedHTTPSConnection(HTTPSConnection):
        def connect(self):
            super().connect()
            connected(self)

    class TrackedHTTPConnectionPool(HTTPConnectionPool):
        ConnectionCls = TrackedHTTPConnection

        def _new_conn(self):
            conn = super()._new_conn()
            register(conn)
            return conn

    class TrackedHTTPSConnectionPool(HTTPSConnectionPool):
        ConnectionCls = TrackedHTTPSConnection

        def _new_conn(self):
            conn = super()._new_conn()
            register(conn)
            return conn

    return {"http": TrackedHTTPConnectionPool, "https": TrackedHTTPSConnectionPool}


class AbortableAdapter(HTTPAdapter):
    """HTTPAdapter whose sockets can be shut down from another thread, including mid-connect."""

    def __init__(self, **kwargs) -> None:
        self._connections: List = []
        self._lock = threading.Lock()
        self._aborted = False
        super().__init__(**kwargs)

    def init_poolmanager(self, connections, maxsize, block=False, **pool_kwargs):
        super().init_poolmanager(connections, maxsize, block=block, **pool_kwargs)
        self.poolmanager.pool_classes_by_scheme = _tracking_pool_classes(self._register, self._connected)

    def _register(self, conn) -> None:
        with self._lock:
            self._connections.append(conn)

    def _connected(self, conn) -> None:
        # An abort that landed while the socket was still being opened found no socket to close.
        with self._lock:
            aborted = self._aborted
        if aborted:
            logger.debug("Connection finished after abort; shutting it down")
            self._shutdown(conn)

    def abort(self) -> None:
        """Shut down every socket this adapter opened; blocked reads fail at once."""
        with self._lock:
            self._aborted = True
            connections = list(self._connections)
        for conn in connections:
            self._shutdown(conn)

    @staticmethod
    def _shutdown(conn) -> None:
        sock = getattr(conn, "sock", None)
        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError as exc:
            logger.debug("Socket already closed during abort: %s", exc)


class SolveCall:
    """One solve attempt. Owns its session, so concurrent calls share nothing."""

    def __init__(
        self,
        url: str,
        request: AssignmentRequest,
        ceiling_sec: float,
        connect_timeout: float,
    ) -> None:
        self.url = url
        self.request = request
        self.ceiling_sec = ceiling_sec
        self.connect_timeout = connect_timeout
        self._adapter = AbortableAdapter()
        self._session = requests.Session()
        self._session.mount("http://", self._adapter)
        self._session.mount("https://", self._adapter)
        self._cancelled = threading.Event()
        self._expired = threading.Event()
        self._done = threading.Event()
        self._result: Optional[AssignmentResult] = None
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def completed(cls, request: AssignmentRequest, result: AssignmentResult) -> "SolveCall":
        call = cls(url="", request=request, ceiling_sec=0, connect_timeout=0)
        call._session.close()
        call._result = result
        call._done.set()
        return call

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self) -> "SolveCall":
        self._thread = threading.Thread(target=self.run, name="solver-call", daemon=True)
        self._thread.start()
        return self

    def run(self) -> AssignmentResult:
        if self._done.is_set():
            return self._result
        timer = threading.Timer(self.ceiling_sec, self._expire)
        timer.daemon = True
        timer.start()
        try:
            self._result = self._post()
        except TailPlanError as exc:
            logger.warning("POST /solve failed: %s", exc)
            self._result = AssignmentResult.error(self.request.flight_ids, str(exc))
        finally:
            timer.cancel()
            self._session.close()
            self._done.set()
        return self._result

    def result(self, timeout: Optional[float] = None) -> Optional[AssignmentResult]:
        """Wait for the outcome; None if it is not ready within ``timeout``."""
        if not self._done.wait(timeout):
            return None
        return self._result

    def cancel(self) -> None:
        """Abort the in-flight request, closing its connection."""
        if self._done.is_set():
            return
        self._cancelled.set()
        self._adapter.abort()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def _expire(self) -> None:
        self._expired.set()
        self._adapter.abort()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def _post(self) -> AssignmentResult:
        if self._cancelled.is_set():
            raise SolverCancelledError()
        try:
            response = self._session.post(
                self.url,
                json=self.request.to_wire(),
                headers={"Content-Type": "application/json"},
                timeout=(min(self.connect_timeout, self.ceiling_sec), self.ceiling_sec),
            )
        except requests.ConnectTimeout as exc:
            raise TransportError(f"Failed to reach solver: {exc}") from exc
        except requests.Timeout as exc:
            raise SolverTimeoutError(self.ceiling_sec) from exc
        except requests.RequestException as exc:
            if self._expired.is_set():
                raise SolverTimeoutError(self.ceiling_sec) from exc
            if self._cancelled.is_set():
                raise SolverCancelledError() from exc
            raise TransportError(f"Failed to reach solver: {exc}") from exc

        logger.info("[POST] /solve -> %s flights=%d", response.status_code, len(self.request.flights))
        if not response.ok:
            raise UpstreamHTTPError(response.status_code, response.text)
        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportError(f"Solver returned an unreadable body: {exc}") from exc
        try:
            return AssignmentResult.from_wire(payload)
        except (KeyError, ValueError, TypeError, AttributeError) as exc:
            raise TransportError(f"Solver returned a malformed result: {exc!r}") from exc


class SolverGateway:
    """Synchronous client for ``POST <base>/solve``. Never retries."""

    def __init__(
        self,
        base_url: Optional[str] = SOLVER_BASE_URL,
        ceiling_sec: float = SOLVER_CEILING_SEC,
        connect_timeout: float = SOLVER_CONNECT_TIMEOUT_SEC,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.ceiling_sec = min(float(ceiling_sec), MAX_CEILING_SEC)
        self.connect_timeout = connect_timeout

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    @property
    def solve_url(self) -> str:
        return f"{self.base_url}/solve"

    def solve(self, request: AssignmentRequest) -> AssignmentResult:
        """Run one solve in the calling thread."""
        return self._new_call(request).run()

    def start(self, request: AssignmentRequest) -> SolveCall:
        """Run one solve on a background thread; the handle can cancel it."""
        call = self._new_call(request)
        if call.done:
            return call
        return call.start()

    def _new_call(self, request: AssignmentRequest) -> SolveCall:
        if request.is_empty:
            logger.info("Empty request; skipping solver call")
            return SolveCall.completed(request, AssignmentResult.empty())
        if not self.configured:
            logger.error("POST /solve skipped: %s", NOT_CONFIGURED_MESSAGE)
            return SolveCall.completed(
                request, AssignmentResult.error(request.flight_ids, NOT_CONFIGURED_MESSAGE)
            )
        logger.info(
            "Submitting %d flights / %d aircraft to %s (budget %ss, ceiling %ss)",
            len(request.flights),
            len(request.aircraft),
            self.solve_url,
            request.settings.time_limit_sec,
            self.ceiling_sec,
        )
        return SolveCall(self.solve_url, request, self.ceiling_sec, self.connect_timeout)
