"""Streaming GPX route parser.

Turns route-exchange bytes into a :class:`Route` without building the full
element tree.  Parser context lives in an explicit state machine driven by the
start/end events of ``xml.etree.ElementTree.XMLPullParser``.

Only the first ``<rte>`` is kept.  Tracks, top-level waypoints, metadata and
extensions are skipped.
"""
from __future__ import annotations

import logging
import math
import xml.etree.ElementTree as ET
from enum import Enum
from typing import BinaryIO, Iterable, List, Optional

from pydantic import ValidationError

from route_planner.core.errors import MalformedDocument, NoRouteFound
from route_planner.core.models import DEFAULT_ROUTE_NAME, Route, RouteDocument, RoutePoint

log = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 65536

TAG_ROUTE = "rte"
TAG_ROUTE_POINT = "rtept"
TAG_NAME = "name"


def _local_name(tag: str) -> str:
    """``{http://www.topografix.com/GPX/1/1}rte`` -> ``rte``."""
    return tag.rsplit("}", 1)[-1]


def _parse_coordinate(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


class ParserState(Enum):
    IDLE = "idle"
    IN_ROUTE = "in_route"
    IN_ROUTE_POINT = "in_route_point"
    IN_ROUTE_NAME = "in_route_name"
    IN_POINT_NAME = "in_point_name"


class RouteStateMachine:
    """
    Parser context for one document.

    ``dispatch`` receives every start/end event.  Transitions only fire for
    elements at the expected nesting (``rtept`` and ``name`` must be direct
    children of their container), so a ``<name>`` buried in an
    ``<extensions>`` block never renames anything.
    """

    def __init__(self) -> None:
        self.state = ParserState.IDLE
        self.route: Optional[Route] = None
        self.skipped_points = 0

        self._path: List[str] = []
        self._route_name: Optional[str] = None
        self._points: List[RoutePoint] = []
        self._point: Optional[RoutePoint] = None
        self._route_depth = 0
        self._point_depth = 0

    @property
    def finished(self) -> bool:
        return self.route is not None

    def dispatch(self, event: str, elem: ET.Element) -> None:
        tag = _local_name(elem.tag)
        if event == "start":
            self._path.append(tag)
            self._on_start(tag, elem)
        else:
            self._on_end(tag, elem)
            self._path.pop()

    # ------------------------------------------------------------------

    def _on_start(self, tag: str, elem: ET.Element) -> None:
        if self.state is ParserState.IDLE:
            if tag == TAG_ROUTE and not self.finished:
                self._start_route()
        elif self.state is ParserState.IN_ROUTE:
            if tag == TAG_ROUTE_POINT and len(self._path) == self._route_depth + 1:
                self._start_point(elem)
            elif tag == TAG_NAME and len(self._path) == self._route_depth + 1:
                self.state = ParserState.IN_ROUTE_NAME
        elif self.state is ParserState.IN_ROUTE_POINT:
            if tag == TAG_NAME and len(self._path) == self._point_depth + 1:
                self.state = ParserState.IN_POINT_NAME

    def _on_end(self, tag: str, elem: ET.Element) -> None:
        if self.state is ParserState.IN_ROUTE_NAME and tag == TAG_NAME:
            text = self._text(elem)
            if text:
                self._route_name = text
            self.state = ParserState.IN_ROUTE
        elif self.state is ParserState.IN_POINT_NAME and tag == TAG_NAME:
            text = self._text(elem)
            if text and self._point is not None:
                self._point.name = text
            self.state = ParserState.IN_ROUTE_POINT
        elif (
            self.state is ParserState.IN_ROUTE_POINT
            and tag == TAG_ROUTE_POINT
            and len(self._path) == self._point_depth
        ):
            if self._point is not None:
                self._points.append(self._point)
            self._point = None
            self.state = ParserState.IN_ROUTE
        elif (
            self.state is ParserState.IN_ROUTE
            and tag == TAG_ROUTE
            and len(self._path) == self._route_depth
        ):
            self.route = Route(name=self._route_name or DEFAULT_ROUTE_NAME, points=self._points)
            self.state = ParserState.IDLE

    def _start_route(self) -> None:
        self.state = ParserState.IN_ROUTE
        self._route_depth = len(self._path)
        self._route_name = None
        self._points = []

    def _start_point(self, elem: ET.Element) -> None:
        self.state = ParserState.IN_ROUTE_POINT
        self._point_depth = len(self._path)

        lat = _parse_coordinate(elem.get("lat"))
        lon = _parse_coordinate(elem.get("lon"))
        self._point = None
        if lat is None or lon is None:
            self.skipped_points += 1
            return
        try:
            self._point = RoutePoint(lat=lat, lon=lon)
        except ValidationError:
            # out of range
            self.skipped_points += 1

    @staticmethod
    def _text(elem: ET.Element) -> str:
        # direct text only; markup nested inside <name> is not part of the name
        return (elem.text or "").strip()


class RouteDocumentParser:
    """
    Parse GPX bytes into a :class:`RouteDocument`.

    Every call starts from fresh state, so one parser may serve any number of
    documents.  The parser performs no I/O of its own; callers hand it bytes
    or an already-open binary stream.
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.chunk_size = chunk_size

    def parse(self, data: bytes) -> Route:
        return self.parse_document(data).route

    def parse_document(self, data: bytes) -> RouteDocument:
        view = memoryview(data)
        chunks = (bytes(view[i:i + self.chunk_size]) for i in range(0, len(view), self.chunk_size))
        return self._run(chunks)

    def parse_stream(self, fp: BinaryIO) -> RouteDocument:
        return self._run(iter(lambda: fp.read(self.chunk_size), b""))

    # ------------------------------------------------------------------

    def _run(self, chunks: Iterable[bytes]) -> RouteDocument:
        machine = RouteStateMachine()
        pull = ET.XMLPullParser(events=("start", "end"))
        open_elems: List[ET.Element] = []

        try:
            for chunk in chunks:
                pull.feed(chunk)
                self._drain(pull, machine, open_elems)
            pull.close()
            self._drain(pull, machine, open_elems)
        except ET.ParseError as exc:
            raise MalformedDocument(f"Malformed route document: {exc}", getattr(exc, "position", None)) from exc

        if machine.route is None:
            raise NoRouteFound()

        log.debug(
            "Parsed route %r: %d points, %d skipped",
            machine.route.name, len(machine.route.points), machine.skipped_points,
        )
        return RouteDocument(route=machine.route, skipped_points=machine.skipped_points)

    @staticmethod
    def _drain(pull: ET.XMLPullParser, machine: RouteStateMachine, open_elems: List[ET.Element]) -> None:
        for event, elem in pull.read_events():
            machine.dispatch(event, elem)
            if event == "start":
                open_elems.append(elem)
                continue
            # finished elements are detached so the tree never outgrows the open path
            open_elems.pop()
            elem.clear()
            if open_elems:
                open_elems[-1].remove(elem)


def parse_route(data: bytes) -> Route:
    """Parse *data* with a default :class:`RouteDocumentParser`."""
    return RouteDocumentParser().parse(data)
