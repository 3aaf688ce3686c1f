"""Route planning core: GPX route parsing and great-circle navigation."""

from .errors import MalformedDocument, NoRouteFound, RouteDocumentError
from .gpx_parser import ParserState, RouteDocumentParser, parse_route
from .gpx_writer import serialize_route
from .models import Route, RouteDocument, RoutePoint
from .navigation import EARTH_RADIUS_NM, NavigationCalculator

__all__ = [
    "MalformedDocument",
    "NoRouteFound",
    "RouteDocumentError",
    "ParserState",
    "RouteDocumentParser",
    "parse_route",
    "serialize_route",
    "Route",
    "RouteDocument",
    "RoutePoint",
    "EARTH_RADIUS_NM",
    "NavigationCalculator",
]
