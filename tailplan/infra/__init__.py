"""Adapters for the outside world: the solver endpoint and CSV repositories."""
