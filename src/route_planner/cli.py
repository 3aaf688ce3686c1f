from __future__ import annotations

import argparse
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import requests
from rich.console import Console
from rich.table import Table

from route_planner.config import settings
from route_planner.core.errors import MalformedDocument, NoRouteFound
from route_planner.core.gpx_parser import RouteDocumentParser
from route_planner.core.gpx_writer import serialize_route
from route_planner.core.models import Route, RouteDocument, _parse_local
from route_planner.core.navigation import NavigationCalculator
from route_planner.core.planner import load_route, plan_route
from route_planner.sources import source_for

log = logging.getLogger(__name__)

EXIT_NO_ROUTE = 1
EXIT_MALFORMED = 2
EXIT_BAD_INPUT = 3


def _save_json(path: Path, obj) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, indent=2), encoding="utf-8")


def _fmt(value: Optional[float], pattern: str) -> str:
    return "" if value is None else format(value, pattern)


def _start_time(args: argparse.Namespace) -> datetime:
    if args.start:
        return _parse_local(args.start, args.timezone)
    return datetime.now(ZoneInfo(args.timezone)).replace(second=0, microsecond=0)


def _load(args: argparse.Namespace) -> RouteDocument:
    source = source_for(args.file)
    log.info("Loading route from %s", source.label)
    return load_route(source, RouteDocumentParser(chunk_size=settings.parse_chunk_size))


def _route_table(route: Route, title: str) -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Position")
    table.add_column("Dist nm", justify="right")
    table.add_column("Brg °T", justify="right")
    table.add_column("ETA")

    for i, p in enumerate(route.points, start=1):
        table.add_row(
            str(i),
            p.name or f"Waypoint {i}",
            p.coordinates,
            _fmt(p.distance_to_next_nm, ".1f"),
            _fmt(p.bearing_to_next_deg, "03.0f"),
            p.eta.strftime("%m/%d/%y %H:%M") if p.eta else "",
        )
    return table


def _cmd_show(args: argparse.Namespace, console: Console) -> int:
    doc = _load(args)
    route = doc.route
    console.print(_route_table(route, f"{route.name} ({len(route.points)} points)"))
    total = NavigationCalculator().total_distance_nm(route.points)
    console.print(f"Total distance: {total:.1f} nm")
    if doc.skipped_points:
        console.print(f"[yellow]Skipped {doc.skipped_points} point(s) without usable coordinates[/yellow]")
    return 0


def _cmd_plan(args: argparse.Namespace, console: Console) -> int:
    doc = _load(args)
    calculator = NavigationCalculator()
    route = plan_route(
        doc.route,
        args.speed,
        _start_time(args),
        reverse=args.reverse,
        calculator=calculator,
    )

    console.print(_route_table(route, f"{route.name} @ {args.speed:g} kts"))
    console.print(f"Total distance: {route.total_distance_nm:.1f} nm")
    if route.duration is not None:
        console.print(f"Duration: {calculator.format_duration(route.duration.total_seconds())}")

    if args.json:
        out = Path(args.json)
        _save_json(out, route.model_dump(mode="json"))
        console.print(f"Saved: {out.resolve()}")
    return 0


def _cmd_export(args: argparse.Namespace, console: Console) -> int:
    doc = _load(args)
    route = doc.route.reversed() if args.reverse else doc.route
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(serialize_route(route, creator=settings.gpx_creator))
    console.print(f"Saved: {out.resolve()}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="route-planner")
    ap.add_argument("--debug", action="store_true")
    sub = ap.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="List the points of a route file")
    show.add_argument("file", help="Path or http(s) URL of a GPX file")
    show.set_defaults(func=_cmd_show)

    plan = sub.add_parser("plan", help="Compute legs and ETAs for a route file")
    plan.add_argument("file", help="Path or http(s) URL of a GPX file")
    plan.add_argument("--speed", type=float, default=settings.default_speed_kt, help="Average speed in knots")
    plan.add_argument("--start", default=None, help="Departure, e.g. '2026-01-22 08:00' (default: now)")
    plan.add_argument("--timezone", default=settings.timezone)
    plan.add_argument("--reverse", action="store_true", help="Travel the route end to start")
    plan.add_argument("--json", default=None, help="Write the enriched route to this JSON file")
    plan.set_defaults(func=_cmd_plan)

    export = sub.add_parser("export", help="Rewrite the first route as a clean GPX 1.1 file")
    export.add_argument("file", help="Path or http(s) URL of a GPX file")
    export.add_argument("--out", required=True)
    export.add_argument("--reverse", action="store_true")
    export.set_defaults(func=_cmd_export)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else settings.log_level,
        format="%(asctime)s [route-planner] %(levelname)s %(message)s",
    )

    console = Console()
    try:
        return args.func(args, console)
    except NoRouteFound as e:
        console.print(str(e), style="red", markup=False)
        return EXIT_NO_ROUTE
    except MalformedDocument as e:
        console.print(str(e), style="red", markup=False)
        return EXIT_MALFORMED
    except ValueError as e:
        console.print(str(e), style="red", markup=False)
        return EXIT_BAD_INPUT
    except ZoneInfoNotFoundError:
        console.print(f"Unknown timezone: {args.timezone}", style="red", markup=False)
        return EXIT_BAD_INPUT
    except (OSError, requests.RequestException) as e:
        console.print(str(e), style="red", markup=False)
        return EXIT_BAD_INPUT


if __name__ == "__main__":
    raise SystemExit(main())
