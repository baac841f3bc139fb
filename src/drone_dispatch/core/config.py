"""Configuration loader and dataclasses for dispatch engine settings."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional
import yaml

from drone_dispatch.core.errors import InvalidInput

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DRONE_DISPATCH_CONFIG"


@dataclass
class RoutingConfig:
    """Waypoint generation and route metric configuration."""
    waypoint_spacing_km: float = 5.0
    prune_tolerance_km: float = 0.5
    default_avoidance_radius_km: float = 1.0
    base_speed_kmh: float = 60.0
    payload_speed_derate: float = 0.2
    base_consumption_pct_per_km: float = 2.0
    payload_consumption_factor: float = 0.5
    payload_reference_kg: float = 100.0
    safety_free_waypoints: int = 5
    safety_penalty_per_waypoint: float = 2.0


@dataclass
class EnergyConfig:
    """Battery feasibility thresholds, all in percent of battery."""
    charging_threshold: float = 20.0
    optimal_charge_level: float = 90.0
    safety_margin: float = 15.0
    preferred_surplus: float = 25.0
    recommended_buffer: float = 20.0
    status_probe_energy: float = 10.0
    solar_base_rate_pct_per_hour: float = 5.0
    default_sunlight_percent: float = 80.0


@dataclass
class ChargingConfig:
    """Charging station selection and time estimation."""
    max_distance_km: float = 50.0
    max_candidates: int = 5
    battery_capacity_kwh: float = 50.0
    charging_efficiency: float = 0.85


@dataclass
class PricingConfig:
    """Trip pricing (currency units per km)."""
    base_cost_per_km: float = 50.0
    level_multipliers: Dict[str, float] = field(
        default_factory=lambda: {"level1": 1.0, "level2": 1.3, "level3": 1.5}
    )


@dataclass
class DataConfig:
    """Snapshot file used by the CLI and API when no repository is injected."""
    snapshot_path: Optional[str] = None


@dataclass
class EngineConfig:
    """Complete engine configuration."""
    routing: RoutingConfig = field(default_factory=RoutingConfig)
    energy: EnergyConfig = field(default_factory=EnergyConfig)
    charging: ChargingConfig = field(default_factory=ChargingConfig)
    pricing: PricingConfig = field(default_factory=PricingConfig)
    data: DataConfig = field(default_factory=DataConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "EngineConfig":
        """Load configuration from a YAML file."""
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        unknown = set(data) - {'routing', 'energy', 'charging', 'pricing', 'data'}
        if unknown:
            raise InvalidInput("config", str(path), f"Unknown configuration sections {sorted(unknown)}")

        try:
            return cls(
                routing=RoutingConfig(**data.get('routing', {})),
                energy=EnergyConfig(**data.get('energy', {})),
                charging=ChargingConfig(**data.get('charging', {})),
                pricing=PricingConfig(**data.get('pricing', {})),
                data=DataConfig(**data.get('data', {})),
            )
        except TypeError as exc:
            raise InvalidInput("config", str(path), f"Unknown configuration key ({exc})") from exc


# Global config instance - lazily loaded
_config: Optional[EngineConfig] = None


def project_root() -> Path:
    """Get project root (4 levels up from this file)."""
    return Path(__file__).resolve().parents[3]


def default_config_path() -> Path:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return project_root() / "configs" / "dispatch_defaults.yaml"


def get_config(config_path: Optional[Path] = None) -> EngineConfig:
    """Get the global configuration, loading from file if not already loaded.

    Args:
        config_path: Path to the config file. If None, uses ``$DRONE_DISPATCH_CONFIG``
            or ``configs/dispatch_defaults.yaml``.

    Returns:
        The EngineConfig instance.
    """
    global _config

    if _config is None or config_path is not None:
        if config_path is None:
            config_path = default_config_path()

        if config_path.exists():
            _config = EngineConfig.from_yaml(config_path)
            logger.debug("Loaded engine config from %s", config_path)
        else:
            logger.debug("Config %s not found, using built-in defaults", config_path)
            _config = EngineConfig()

    return _config


def reload_config(config_path: Optional[Path] = None) -> EngineConfig:
    """Force reload of configuration from file."""
    global _config
    _config = None
    return get_config(config_path)
