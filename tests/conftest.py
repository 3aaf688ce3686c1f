from __future__ import annotations

from typing import Iterable, Optional, Tuple

import pytest

GPX_HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">\n'
)


def make_gpx(points: Iterable[Tuple[float, float, Optional[str]]], name: Optional[str] = None) -> bytes:
    """Build a minimal single-route GPX document."""
    body = ["<rte>"]
    if name is not None:
        body.append(f"<name>{name}</name>")
    for lat, lon, pname in points:
        if pname:
            body.append(f'<rtept lat="{lat!r}" lon="{lon!r}"><name>{pname}</name></rtept>')
        else:
            body.append(f'<rtept lat="{lat!r}" lon="{lon!r}"/>')
    body.append("</rte>")
    return (GPX_HEADER + "\n".join(body) + "\n</gpx>\n").encode("utf-8")


SAMPLE_GPX = b"""<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
  <metadata>
    <name>Chart export</name>
  </metadata>
  <wpt lat="27.0" lon="-82.0"><name>Loose waypoint</name></wpt>
  <trk>
    <name>Old track</name>
    <trkseg><trkpt lat="27.1" lon="-82.1"/></trkseg>
  </trk>
  <rte>
    <name>  Tampa Bay Run  </name>
    <rtept lat="27.7676" lon="-82.6403">
      <name>St. Petersburg</name>
      <extensions><name>ignored</name></extensions>
    </rtept>
    <rtept lat="27.6089" lon="-82.6546">
      <ele>0</ele>
      <name>Skyway</name>
    </rtept>
    <rtept lat="27.4989" lon="-82.7154">
      <name>Anna Maria</name>
    </rtept>
  </rte>
</gpx>
"""


@pytest.fixture
def sample_gpx() -> bytes:
    return SAMPLE_GPX


@pytest.fixture
def sample_gpx_file(tmp_path):
    path = tmp_path / "tampa.gpx"
    path.write_bytes(SAMPLE_GPX)
    return path
