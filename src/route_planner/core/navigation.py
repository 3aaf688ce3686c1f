"""Great-circle navigation: leg distance, initial bearing and ETA propagation."""
from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from math import atan2, cos, degrees, radians, sin, sqrt
from typing import Any, Iterable, List, Optional, Tuple

from route_planner.core.models import Route, RoutePoint

log = logging.getLogger(__name__)

EARTH_RADIUS_NM = 3440.065
SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600


# ---------------------------------------------------------------------------
# Geo helpers
# ---------------------------------------------------------------------------

def _haversine_nm(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in nautical miles between two points."""
    lat1r, lon1r, lat2r, lon2r = map(radians, [lat1, lon1, lat2, lon2])
    dlat = lat2r - lat1r
    dlon = lon2r - lon1r
    a = sin(dlat / 2) ** 2 + cos(lat1r) * cos(lat2r) * sin(dlon / 2) ** 2
    # rounding can push a just past 1 for near-antipodal pairs
    a = min(1.0, a)
    return EARTH_RADIUS_NM * 2 * atan2(sqrt(a), sqrt(1 - a))


def _bearing_deg(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Initial bearing (degrees clockwise from true north), in [0, 360)."""
    lat1r, lon1r, lat2r, lon2r = map(radians, [lat1, lon1, lat2, lon2])
    dlon = lon2r - lon1r
    y = sin(dlon) * cos(lat2r)
    x = cos(lat1r) * sin(lat2r) - sin(lat1r) * cos(lat2r) * cos(dlon)
    return (degrees(atan2(y, x)) + 360.0) % 360.0


def _latlon(coord: Any) -> Tuple[float, float]:
    """Accept a RoutePoint-like object (``.lat``/``.lon``) or a ``(lat, lon)`` pair."""
    if hasattr(coord, "lat") and hasattr(coord, "lon"):
        return float(coord.lat), float(coord.lon)
    lat, lon = coord
    return float(lat), float(lon)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class NavigationCalculator:
    """
    Stateless great-circle calculator on a spherical Earth.

    Instances hold no state, so one may be shared freely or created per call.
    Distances are in nautical miles, bearings in degrees true, speeds in knots.
    """

    def distance_nm(self, a: Any, b: Any) -> float:
        lat1, lon1 = _latlon(a)
        lat2, lon2 = _latlon(b)
        return _haversine_nm(lat1, lon1, lat2, lon2)

    def bearing_deg(self, a: Any, b: Any) -> float:
        lat1, lon1 = _latlon(a)
        lat2, lon2 = _latlon(b)
        return _bearing_deg(lat1, lon1, lat2, lon2)

    def total_distance_nm(self, coords: Iterable[Any]) -> float:
        """Sum of consecutive leg distances; 0.0 for fewer than two coordinates."""
        pts = [_latlon(c) for c in coords]
        if len(pts) < 2:
            return 0.0

        total = 0.0
        for (lat1, lon1), (lat2, lon2) in zip(pts, pts[1:]):
            total += _haversine_nm(lat1, lon1, lat2, lon2)

        log.debug("Total route distance: %.2f nm over %d points", total, len(pts))
        return total

    def format_duration(self, seconds: float) -> str:
        """
        Render a duration as ``"D Day(s) H hour(s)"`` when it spans at least one
        full day, otherwise as ``"H hour(s) M minute(s)"``.

        The day form never shows minutes.

        >>> NavigationCalculator().format_duration(90060)
        '1 Day 1 hour'
        >>> NavigationCalculator().format_duration(3600)
        '1 hour 0 minutes'
        """
        days = int(seconds / SECONDS_PER_DAY)
        hours = int(math.fmod(seconds, SECONDS_PER_DAY) / SECONDS_PER_HOUR)
        minutes = int(math.fmod(seconds, SECONDS_PER_HOUR) / 60)

        if days > 0:
            return f"{_plural(days, 'Day')} {_plural(hours, 'hour')}"
        return f"{_plural(hours, 'hour')} {_plural(minutes, 'minute')}"

    def calculate_distance_and_bearing(
        self,
        points: List[RoutePoint],
        average_speed_kt: float,
        start_time: Optional[datetime] = None,
    ) -> List[RoutePoint]:
        """
        Annotate *points* in place with leg distance, leg bearing and ETA.

        Parameters
        ----------
        points : list of RoutePoint
            Ordered route.  ``points[0].eta`` is the departure time unless
            *start_time* is given, in which case it is written there first.
        average_speed_kt : float
            Average speed over ground in knots; must be positive.
        start_time : datetime, optional
            Departure time.

        Returns
        -------
        list of RoutePoint
            The same list object.  Lists with fewer than two points are
            returned untouched.
        """
        if len(points) < 2:
            return points
        if average_speed_kt <= 0:
            raise ValueError(f"average speed must be positive, got {average_speed_kt!r}")

        if start_time is not None:
            points[0].eta = start_time
        if points[0].eta is None:
            raise ValueError("first route point has no eta; pass start_time or set it")

        # each ETA builds on the previous leg's arrival
        current_time = points[0].eta
        for i in range(len(points) - 1):
            here = points[i]
            nxt = points[i + 1]

            distance = _haversine_nm(here.lat, here.lon, nxt.lat, nxt.lon)
            here.distance_to_next_nm = distance
            here.bearing_to_next_deg = _bearing_deg(here.lat, here.lon, nxt.lat, nxt.lon)

            travel_s = distance / average_speed_kt * SECONDS_PER_HOUR
            current_time = current_time + timedelta(seconds=travel_s)
            nxt.eta = current_time

        log.debug(
            "Enriched %d legs at %.1f kt, arrival %s",
            len(points) - 1, average_speed_kt, current_time.isoformat(),
        )
        return points

    def enrich_route(
        self,
        route: Route,
        average_speed_kt: float,
        start_time: Optional[datetime] = None,
    ) -> Route:
        """Run :meth:`calculate_distance_and_bearing` over ``route.points``; returns *route*."""
        self.calculate_distance_and_bearing(route.points, average_speed_kt, start_time)
        return route

