from __future__ import annotations

from datetime import datetime
from typing import Optional

from route_planner.core.gpx_parser import RouteDocumentParser
from route_planner.core.models import Route, RouteDocument
from route_planner.core.navigation import NavigationCalculator
from route_planner.sources.base import DocumentSource


def load_route(
    source: DocumentSource,
    parser: Optional[RouteDocumentParser] = None,
) -> RouteDocument:
    parser = parser or RouteDocumentParser()
    return parser.parse_document(source.read_bytes())


def plan_route(
    route: Route,
    average_speed_kt: float,
    start_time: datetime,
    reverse: bool = False,
    calculator: Optional[NavigationCalculator] = None,
) -> Route:
    """Optionally reverse *route*, then stamp legs and ETAs from *start_time*."""
    calculator = calculator or NavigationCalculator()
    if reverse:
        route = route.reversed()
    return calculator.enrich_route(route, average_speed_kt, start_time=start_time)
