"""Serialize a Route back to a GPX 1.1 document."""
from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import datetime, timezone

from route_planner.core.models import Route

GPX_NS = "http://www.topografix.com/GPX/1/1"
DEFAULT_CREATOR = "route-planner"


def _q(tag: str) -> str:
    return f"{{{GPX_NS}}}{tag}"


def _format_time(dt: datetime) -> str:
    if dt.tzinfo is None:
        return dt.isoformat()
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def build_gpx(route: Route, creator: str = DEFAULT_CREATOR) -> ET.Element:
    """Build the ``<gpx>`` element tree holding a single ``<rte>``."""
    root = ET.Element(_q("gpx"), {"version": "1.1", "creator": creator})
    rte = ET.SubElement(root, _q("rte"))
    ET.SubElement(rte, _q("name")).text = route.name

    for p in route.points:
        # repr keeps the shortest string that round-trips the float exactly
        rtept = ET.SubElement(rte, _q("rtept"), {"lat": repr(p.lat), "lon": repr(p.lon)})
        if p.eta is not None:
            ET.SubElement(rtept, _q("time")).text = _format_time(p.eta)
        if p.name:
            ET.SubElement(rtept, _q("name")).text = p.name

    return root


def serialize_route(route: Route, creator: str = DEFAULT_CREATOR) -> bytes:
    """Return UTF-8 GPX bytes for *route*, with an XML declaration."""
    ET.register_namespace("", GPX_NS)
    root = build_gpx(route, creator=creator)
    ET.indent(root)
    xml_str = ET.tostring(root, encoding="unicode", method="xml")
    return ('<?xml version="1.0" encoding="UTF-8"?>\n' + xml_str + "\n").encode("utf-8")
