"""Fleet-wide statistics."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Sequence

import numpy as np

from drone_dispatch.core.models import VehicleSnapshot, VehicleStatus


@dataclass(frozen=True)
class FleetStatistics:
    total: int
    by_status: Dict[str, int]
    average_battery_level: float
    min_battery_level: float


def fleet_statistics(vehicles: Sequence[VehicleSnapshot]) -> FleetStatistics:
    by_status = {status.value: 0 for status in VehicleStatus}
    for v in vehicles:
        by_status[v.status.value] += 1

    if not vehicles:
        return FleetStatistics(total=0, by_status=by_status, average_battery_level=0.0, min_battery_level=0.0)

    levels = np.array([v.battery_level for v in vehicles], dtype=float)
    return FleetStatistics(
        total=len(vehicles),
        by_status=by_status,
        average_battery_level=float(levels.mean()),
        min_battery_level=float(levels.min()),
    )
