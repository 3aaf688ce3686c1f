from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field

DEFAULT_ROUTE_NAME = "Route"


def _parse_local(dt_str: str, tz_name: Optional[str] = None) -> datetime:
    """Parse a local time string, optionally attaching a timezone.

    When *tz_name* is provided (e.g. ``"America/New_York"``), the returned
    datetime is timezone-aware.  Otherwise it is naive.
    """
    dt = datetime.strptime(dt_str, "%Y-%m-%d %H:%M")
    if tz_name:
        dt = dt.replace(tzinfo=ZoneInfo(tz_name))
    return dt


class RoutePoint(BaseModel):
    lat: float = Field(ge=-90.0, le=90.0, allow_inf_nan=False)
    lon: float = Field(ge=-180.0, le=180.0, allow_inf_nan=False)
    name: Optional[str] = None

    # Leg leaving this point; None until NavigationCalculator fills them in.
    # The last point of a route never gets distance/bearing.
    distance_to_next_nm: Optional[float] = None
    bearing_to_next_deg: Optional[float] = None
    eta: Optional[datetime] = None

    @property
    def coordinates(self) -> str:
        return f"{self.lat:.6f}°, {self.lon:.6f}°"

    def clear_annotations(self) -> None:
        self.distance_to_next_nm = None
        self.bearing_to_next_deg = None
        self.eta = None


class Route(BaseModel):
    name: str = DEFAULT_ROUTE_NAME
    # Order is load-bearing: it defines traversal order and leg adjacency
    points: List[RoutePoint] = Field(default_factory=list)

    @property
    def leg_count(self) -> int:
        return max(0, len(self.points) - 1)

    @property
    def total_distance_nm(self) -> float:
        """Sum of the leg distances already assigned by the calculator."""
        return sum(p.distance_to_next_nm or 0.0 for p in self.points)

    @property
    def departure(self) -> Optional[datetime]:
        return self.points[0].eta if self.points else None

    @property
    def arrival(self) -> Optional[datetime]:
        return self.points[-1].eta if self.points else None

    @property
    def duration(self) -> Optional[timedelta]:
        if self.departure is None or self.arrival is None:
            return None
        return self.arrival - self.departure

    def reversed(self) -> Route:
        """
        Return a copy travelling the opposite direction.

        Annotations are cleared because every leg changes.  When both end
        points are named the copy is named ``"<first> - <last>"``.
        """
        points = [p.model_copy() for p in reversed(self.points)]
        for p in points:
            p.clear_annotations()

        name = self.name
        if points and points[0].name and points[-1].name:
            name = f"{points[0].name} - {points[-1].name}"
        return Route(name=name, points=points)


class RouteDocument(BaseModel):
    """Parsed route file; this reduced schema keeps exactly one route."""

    route: Route
    # rtept elements dropped for missing, unparsable or out-of-range coordinates
    skipped_points: int = 0
