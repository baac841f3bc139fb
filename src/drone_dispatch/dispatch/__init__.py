"""Trip dispatch and recharge orchestration."""

from drone_dispatch.dispatch.repositories import (
    ClaimingStationRepository,
    FleetRepository,
    InMemoryFleetRepository,
    InMemoryStationRepository,
    Snapshot,
    load_snapshot,
)
from drone_dispatch.dispatch.service import (
    Dispatcher,
    TripAssignment,
    TripRequest,
    estimate_trip_cost,
)
from drone_dispatch.dispatch.stats import FleetStatistics, fleet_statistics

__all__ = [
    "ClaimingStationRepository",
    "Dispatcher",
    "FleetRepository",
    "FleetStatistics",
    "InMemoryFleetRepository",
    "InMemoryStationRepository",
    "Snapshot",
    "TripAssignment",
    "TripRequest",
    "estimate_trip_cost",
    "fleet_statistics",
    "load_snapshot",
]
