"""Health probe response."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Body of GET /health; database is a live probe of the shared pool."""

    status: Literal["ok"] = "ok"
    version: str = Field(description="Service version")
    environment: Literal["dev", "prod"]
    database: Literal["connected", "disconnected"]
