import pytest
from pydantic import ValidationError

from route_planner.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("ROUTE_PLANNER_PARSE_CHUNK_SIZE", raising=False)
    monkeypatch.delenv("ROUTE_PLANNER_DEFAULT_SPEED_KT", raising=False)
    s = Settings()
    assert s.parse_chunk_size == 65536
    assert s.default_speed_kt == 10.0


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("ROUTE_PLANNER_PARSE_CHUNK_SIZE", "1024")
    assert Settings().parse_chunk_size == 1024


@pytest.mark.parametrize("value", ["0", "-4096"])
def test_non_positive_chunk_size_is_rejected(monkeypatch, value):
    monkeypatch.setenv("ROUTE_PLANNER_PARSE_CHUNK_SIZE", value)
    with pytest.raises(ValidationError):
        Settings()
