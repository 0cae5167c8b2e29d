"""Calendar expansion and tail-assignment solve orchestration for airline network planning."""

__version__ = "0.1.0"
