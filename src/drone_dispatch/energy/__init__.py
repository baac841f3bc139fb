"""Battery feasibility and charging allocation."""

from drone_dispatch.energy.battery import (
    Weather,
    assess_battery,
    battery_recommendation,
    battery_status,
    calculate_solar_charging_rate,
    select_optimal_vehicle,
)
from drone_dispatch.energy.charging import (
    StationRepository,
    estimate_charging_minutes,
    find_nearest_station,
    schedule_charging,
    total_charging_power,
)
from drone_dispatch.energy.renewables import (
    GenerationStats,
    RenewableReport,
    monitor_renewable_energy,
)

__all__ = [
    "GenerationStats",
    "RenewableReport",
    "StationRepository",
    "Weather",
    "assess_battery",
    "battery_recommendation",
    "battery_status",
    "calculate_solar_charging_rate",
    "estimate_charging_minutes",
    "find_nearest_station",
    "monitor_renewable_energy",
    "schedule_charging",
    "select_optimal_vehicle",
    "total_charging_power",
]
