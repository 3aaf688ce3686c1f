import json

import pytest
import requests

from route_planner.cli import EXIT_BAD_INPUT, EXIT_MALFORMED, EXIT_NO_ROUTE, main
from route_planner.core.gpx_parser import parse_route


def test_show(sample_gpx_file, capsys):
    assert main(["show", str(sample_gpx_file)]) == 0
    out = capsys.readouterr().out
    assert "Tampa Bay Run" in out
    assert "Total distance:" in out


def test_plan_writes_json(sample_gpx_file, tmp_path, capsys):
    out_path = tmp_path / "out" / "plan.json"
    rc = main([
        "plan", str(sample_gpx_file),
        "--speed", "10",
        "--start", "2026-01-22 08:00",
        "--timezone", "UTC",
        "--json", str(out_path),
    ])
    assert rc == 0

    printed = capsys.readouterr().out
    assert "Duration:" in printed

    data = json.loads(out_path.read_text(encoding="utf-8"))
    assert data["name"] == "Tampa Bay Run"
    points = data["points"]
    assert len(points) == 3
    assert points[0]["eta"].startswith("2026-01-22T08:00:00")
    assert points[0]["distance_to_next_nm"] > 0
    assert points[-1]["distance_to_next_nm"] is None
    assert points[-1]["bearing_to_next_deg"] is None


def test_plan_reverse(sample_gpx_file, tmp_path):
    out_path = tmp_path / "rev.json"
    rc = main(["plan", str(sample_gpx_file), "--start", "2026-01-22 08:00", "--timezone", "UTC",
               "--reverse", "--json", str(out_path)])
    assert rc == 0
    data = json.loads(out_path.read_text(encoding="utf-8"))
    assert [p["name"] for p in data["points"]] == ["Anna Maria", "Skyway", "St. Petersburg"]


def test_export_round_trips(sample_gpx_file, tmp_path):
    out_path = tmp_path / "clean.gpx"
    assert main(["export", str(sample_gpx_file), "--out", str(out_path)]) == 0

    route = parse_route(out_path.read_bytes())
    assert route.name == "Tampa Bay Run"
    assert len(route.points) == 3


def test_malformed_file_exit_code(tmp_path):
    path = tmp_path / "bad.gpx"
    path.write_bytes(b"<gpx><rte>")
    assert main(["show", str(path)]) == EXIT_MALFORMED


def test_no_route_exit_code(tmp_path):
    path = tmp_path / "empty.gpx"
    path.write_bytes(b"<gpx><wpt lat='1' lon='1'/></gpx>")
    assert main(["show", str(path)]) == EXIT_NO_ROUTE


def test_bad_speed_exit_code(sample_gpx_file):
    assert main(["plan", str(sample_gpx_file), "--speed", "0", "--start", "2026-01-22 08:00",
                 "--timezone", "UTC"]) == EXIT_BAD_INPUT


def test_missing_file_exit_code(tmp_path, capsys):
    assert main(["show", str(tmp_path / "nope.gpx")]) == EXIT_BAD_INPUT
    assert "No such file" in capsys.readouterr().out


@pytest.mark.parametrize("start", [None, "2026-01-22 08:00"])
def test_unknown_timezone_exit_code(sample_gpx_file, capsys, start):
    argv = ["plan", str(sample_gpx_file), "--timezone", "Not/AZone"]
    if start:
        argv += ["--start", start]
    assert main(argv) == EXIT_BAD_INPUT
    assert "Unknown timezone: Not/AZone" in capsys.readouterr().out


def test_http_error_exit_code(monkeypatch):
    class _FailingSource:
        label = "https://example.com/route.gpx"

        def read_bytes(self):
            raise requests.HTTPError("404 Client Error: Not Found")

    monkeypatch.setattr("route_planner.cli.source_for", lambda location: _FailingSource())
    assert main(["show", "https://example.com/route.gpx"]) == EXIT_BAD_INPUT
