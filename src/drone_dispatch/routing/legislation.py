"""Legislative policy check collaborators."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Protocol, Sequence

from drone_dispatch.core.errors import RestrictedRoute
from drone_dispatch.core.models import GeoPoint

logger = logging.getLogger(__name__)


COMMON_RESTRICTIONS = (
    "Flight altitude must not exceed 120m",
    "Visual line of sight required",
    "No night flights without special authorization",
    "Minimum distance from airports: 5km",
    "No flights over crowds without authorization",
)


@dataclass(frozen=True)
class LegislativeVerdict:
    allowed: bool
    restrictions: List[str] = field(default_factory=list)
    requires_permit: bool = False


class LegislativeCheck(Protocol):
    def check(self, start: GeoPoint, end: GeoPoint) -> LegislativeVerdict:
        ...


class StaticLegislativeCheck:
    """Policy that allows every route and reports a fixed restriction list."""

    def __init__(
        self,
        restrictions: Sequence[str] = COMMON_RESTRICTIONS,
        allowed: bool = True,
        requires_permit: bool = False,
    ):
        self.restrictions = list(restrictions)
        self.allowed = allowed
        self.requires_permit = requires_permit

    def check(self, start: GeoPoint, end: GeoPoint) -> LegislativeVerdict:
        return LegislativeVerdict(
            allowed=self.allowed,
            restrictions=list(self.restrictions),
            requires_permit=self.requires_permit,
        )


def check_legislative_restrictions(
    start: GeoPoint,
    end: GeoPoint,
    policy: LegislativeCheck | None = None,
) -> LegislativeVerdict:
    policy = policy or StaticLegislativeCheck()
    return policy.check(start, end)


def ensure_route_allowed(verdict: LegislativeVerdict) -> LegislativeVerdict:
    """Raise RestrictedRoute unless the verdict allows the trip."""
    if not verdict.allowed:
        logger.warning("Route rejected by legislative check: %s", "; ".join(verdict.restrictions))
        raise RestrictedRoute(verdict.restrictions)
    return verdict
