"""Error types raised by the dispatch engine."""
from __future__ import annotations

from typing import Sequence


class DispatchError(Exception):
    """Base class for all dispatch engine errors."""


class InvalidInput(DispatchError, ValueError):
    """Out-of-range or malformed input; never clamped."""

    def __init__(self, field: str, value, message: str = "Invalid value"):
        self.field = field
        self.value = value
        super().__init__(f"{message}: {field}={value!r}")


class NoSuitableVehicle(DispatchError):
    """No candidate has enough battery for the route plus safety margin."""

    def __init__(self, required_energy: float, candidates: int = 0):
        self.required_energy = required_energy
        self.candidates = candidates
        super().__init__(
            f"No vehicle with sufficient battery for {required_energy:.1f}% "
            f"({candidates} candidates). Please try again later or choose a shorter route"
        )


class NoStationAvailable(DispatchError):
    """No active station with free capacity within the search radius."""

    def __init__(self, max_distance_km: float):
        self.max_distance_km = max_distance_km
        super().__init__(f"No charging station available within {max_distance_km:g} km")


class RestrictedRoute(DispatchError):
    """Legislative check disallowed the route."""

    def __init__(self, restrictions: Sequence[str]):
        self.restrictions = list(restrictions)
        super().__init__("Route not allowed due to legislative restrictions")


class AssignmentConflict(DispatchError):
    """A check-and-set commit lost against a concurrent claim."""

    def __init__(self, resource: str, resource_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} {resource_id} was claimed concurrently")
