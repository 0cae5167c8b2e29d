"""Aircraft roster entries."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class AircraftUnit:
    index: int
    registration: str
    aircraft_type: str
    family: Optional[str] = None

    def to_wire(self) -> Dict:
        return {
            "index": self.index,
            "registration": self.registration,
            "icaoType": self.aircraft_type,
            "family": self.family,
        }
