from typing import Literal

from pydantic import BaseModel


class HealthCheckResponse(BaseModel):
    """Liveness plus database reachability."""

    status: Literal["ok", "degraded"]
    version: str
    database: Literal["ok", "unavailable"]
    timestamp: str
