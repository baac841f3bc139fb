"""Drone dispatch package with energy-aware route planning and charging allocation."""

__all__ = [
    "core",
    "routing",
    "energy",
    "dispatch",
    "api",
    "cli",
]
