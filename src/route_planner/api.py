"""FastAPI REST surface for the route planner."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from route_planner.config import settings
from route_planner.core.errors import MalformedDocument, NoRouteFound
from route_planner.core.gpx_parser import RouteDocumentParser
from route_planner.core.models import DEFAULT_ROUTE_NAME, Route, RouteDocument, RoutePoint, _parse_local
from route_planner.core.navigation import NavigationCalculator
from route_planner.core.planner import plan_route

log = logging.getLogger(__name__)

app = FastAPI(title="Route Planner", version="0.1.0")


# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------

class RoutePointIn(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    name: Optional[str] = None


class EnrichRouteRequest(BaseModel):
    name: str = DEFAULT_ROUTE_NAME
    points: List[RoutePointIn] = Field(..., min_length=1)
    average_speed_kt: float = Field(default=settings.default_speed_kt, gt=0)
    start_time: datetime


class PlannedRouteResponse(BaseModel):
    route: Route
    total_distance_nm: float
    duration: Optional[str] = None
    skipped_points: int = 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_body(data: bytes) -> RouteDocument:
    try:
        return RouteDocumentParser(chunk_size=settings.parse_chunk_size).parse_document(data)
    except MalformedDocument as e:
        raise HTTPException(status_code=422, detail=str(e))
    except NoRouteFound as e:
        raise HTTPException(status_code=404, detail=str(e))


def _planned(route: Route, skipped_points: int = 0) -> PlannedRouteResponse:
    duration = None
    if route.duration is not None:
        duration = NavigationCalculator().format_duration(route.duration.total_seconds())
    return PlannedRouteResponse(
        route=route,
        total_distance_nm=route.total_distance_nm,
        duration=duration,
        skipped_points=skipped_points,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/routes/parse", response_model=RouteDocument)
async def parse_route_document(request: Request):
    """Parse a GPX document sent as the raw request body."""
    return _parse_body(await request.body())


@app.post("/routes/plan", response_model=PlannedRouteResponse)
async def plan_route_document(
    request: Request,
    speed_kt: float = settings.default_speed_kt,
    start_time: Optional[str] = None,
    timezone: str = settings.timezone,
    reverse: bool = False,
):
    """
    Parse a GPX body and stamp legs and ETAs.

    ``start_time`` is local to ``timezone``, e.g. ``2026-01-22 08:00``; it
    defaults to the current minute in that zone.
    """
    doc = _parse_body(await request.body())
    try:
        if start_time:
            start = _parse_local(start_time, timezone)
        else:
            start = datetime.now(ZoneInfo(timezone)).replace(second=0, microsecond=0)
        route = plan_route(doc.route, speed_kt, start, reverse=reverse)
    except ZoneInfoNotFoundError:
        raise HTTPException(status_code=400, detail=f"Unknown timezone: {timezone}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    log.info("Planned %r: %d points at %.1f kt", route.name, len(route.points), speed_kt)
    return _planned(route, doc.skipped_points)


@app.post("/routes/enrich", response_model=PlannedRouteResponse)
def enrich_route(req: EnrichRouteRequest):
    try:
        route = Route(
            name=req.name,
            points=[RoutePoint(**p.model_dump()) for p in req.points],
        )
        NavigationCalculator().enrich_route(route, req.average_speed_kt, start_time=req.start_time)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _planned(route)
