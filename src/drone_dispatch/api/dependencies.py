"""Dependency wiring for API service."""
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from drone_dispatch.core.config import EngineConfig, get_config, project_root
from drone_dispatch.dispatch.repositories import (
    InMemoryFleetRepository,
    InMemoryStationRepository,
    Snapshot,
    load_snapshot,
)
from drone_dispatch.dispatch.service import Dispatcher
from drone_dispatch.routing.obstacles import StaticObstacleLookup

logger = logging.getLogger(__name__)


def get_engine_config() -> EngineConfig:
    return get_config()


def snapshot_path(cfg: EngineConfig) -> Path | None:
    if not cfg.data.snapshot_path:
        return None
    path = Path(cfg.data.snapshot_path)
    if not path.is_absolute():
        path = project_root() / path
    return path


@lru_cache(maxsize=1)
def get_snapshot() -> Snapshot:
    path = snapshot_path(get_config())
    if path is None:
        logger.info("No snapshot configured; serving an empty fleet")
        return Snapshot()
    return load_snapshot(path)


@lru_cache(maxsize=1)
def get_obstacle_lookup() -> StaticObstacleLookup:
    cfg = get_config()
    return StaticObstacleLookup(get_snapshot().no_fly_zones, cfg.routing.default_avoidance_radius_km)


@lru_cache(maxsize=1)
def get_fleet_repository() -> InMemoryFleetRepository:
    return InMemoryFleetRepository(get_snapshot().vehicles)


@lru_cache(maxsize=1)
def get_station_repository() -> InMemoryStationRepository:
    return InMemoryStationRepository(get_snapshot().stations)


@lru_cache(maxsize=1)
def get_dispatcher() -> Dispatcher:
    return Dispatcher(
        fleet=get_fleet_repository(),
        stations=get_station_repository(),
        obstacles=get_obstacle_lookup(),
        config=get_config(),
    )

