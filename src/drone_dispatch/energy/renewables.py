"""Renewable generation statistics for dock stations."""
from __future__ import annotations

from dataclasses import asdict, dataclass

from drone_dispatch.core.models import PowerSource, StationSnapshot


@dataclass(frozen=True)
class GenerationStats:
    current: float
    capacity: float
    efficiency: float


@dataclass(frozen=True)
class RenewableReport:
    solar: GenerationStats
    wind: GenerationStats
    total: GenerationStats

    def to_dict(self) -> dict:
        return asdict(self)


def _stats(current: float, capacity: float) -> GenerationStats:
    efficiency = (current / capacity) * 100 if capacity > 0 else 0.0
    return GenerationStats(current=current, capacity=capacity, efficiency=efficiency)


def _source_stats(source: PowerSource) -> GenerationStats:
    return _stats(source.current_output_kw, source.total_power_kw)


def monitor_renewable_energy(station: StationSnapshot) -> RenewableReport:
    """Solar, wind and combined output against installed capacity."""
    return RenewableReport(
        solar=_source_stats(station.solar),
        wind=_source_stats(station.wind),
        total=_stats(
            station.solar.current_output_kw + station.wind.current_output_kw,
            station.solar.total_power_kw + station.wind.total_power_kw,
        ),
    )
