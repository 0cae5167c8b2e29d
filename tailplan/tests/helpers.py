"""Shared builders for planning-core tests."""
from __future__ import annotations

import socket
import threading
from datetime import date, datetime, time, timedelta, timezone
from types import MappingProxyType

from tailplan.domain.contracts import AssignmentRequest, OptimizerSettings
from tailplan.models.fleet import AircraftUnit
from tailplan.models.flight import ScheduledFlightInstance, flight_id_for
from tailplan.models.template import FlightNumberTemplate, TemplateStatus, WeeklyPattern
from tailplan.models.turnaround import TatMaps


def make_template(**overrides) -> FlightNumberTemplate:
    fields = dict(
        template_id="T-VJ123",
        season_id="W24",
        flight_number="VJ123",
        departure="SGN",
        arrival="HAN",
        departure_time=time(12, 0),
        arrival_time=time(14, 10),
        block_minutes=130,
        pattern=WeeklyPattern.parse("1234567"),
        aircraft_type="A321",
        effective_from=date(2024, 1, 1),
        effective_until=date(2024, 1, 31),
        status=TemplateStatus.READY,
    )
    fields.update(overrides)
    return FlightNumberTemplate(**fields)


def make_flight(template_id: str, day: date = date(2024, 1, 5), hour: int = 6, ac_type: str = "A321", **extra):
    start = datetime.combine(day, time(hour, 0), tzinfo=timezone.utc)
    fields = dict(
        flight_id=flight_id_for(template_id, day),
        template_id=template_id,
        flight_number=template_id,
        flight_date=day,
        departure="SGN",
        arrival="HAN",
        start=start,
        end=start + timedelta(minutes=130),
        block_minutes=130,
        aircraft_type=ac_type,
        service_type="J",
    )
    fields.update(extra)
    return ScheduledFlightInstance(**fields)


def make_tat(**scheduled) -> TatMaps:
    scheduled = scheduled or {"A321": 45}
    return TatMaps(
        scheduled=MappingProxyType(dict(scheduled)),
        minimum=MappingProxyType(dict(scheduled)),
        hard_floor=MappingProxyType(dict(scheduled)),
    )


def make_request(flights, aircraft=None) -> AssignmentRequest:
    aircraft = aircraft if aircraft is not None else [
        AircraftUnit(index=0, registration="VN-A123", aircraft_type="A321"),
        AircraftUnit(index=1, registration="VN-A124", aircraft_type="A321"),
    ]
    return AssignmentRequest(
        flights=tuple(flights),
        aircraft=tuple(aircraft),
        tat=make_tat(),
        settings=OptimizerSettings(),
    )


def closed_port() -> int:
    """A local port with nothing listening on it."""
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    return port


class HangingServer:
    """Accepts connections and never answers, like a solver stuck on a long solve."""

    def __init__(self) -> None:
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.listen(5)
        self.port = self.sock.getsockname()[1]
        self.connections = []
        self._thread = threading.Thread(target=self._accept, daemon=True)
        self._thread.start()

    @property
    def url(self) -> str:
        return f"http://127.0.0.1:{self.port}"

    def _accept(self) -> None:
        while True:
            try:
                conn, _ = self.sock.accept()
            except OSError:
                return
            self.connections.append(conn)

    def close(self) -> None:
        for conn in self.connections:
            conn.close()
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self.sock.close()
