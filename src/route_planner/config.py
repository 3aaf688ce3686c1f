"""Centralized settings for the route planner."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "ROUTE_PLANNER_"}

    # Planning defaults used by the CLI and API when the caller gives none
    default_speed_kt: float = 10.0
    timezone: str = "America/New_York"

    # Streaming parser feed size in bytes
    parse_chunk_size: int = Field(default=65536, gt=0)

    # HTTP byte source
    http_user_agent: str = "RoutePlanner/0.1.0"
    http_timeout_s: int = 25
    http_tries: int = 4
    http_backoff_s: float = 0.8

    # Written to the <gpx creator="..."> attribute on export
    gpx_creator: str = "route-planner"

    log_level: str = "INFO"


settings = Settings()
