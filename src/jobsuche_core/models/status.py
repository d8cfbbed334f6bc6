"""Server status model."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ServerStatus(BaseModel):
    """Server status and upstream connectivity."""

    server_name: str = Field(description="Server name")
    version: str = Field(description="Server version")
    uptime_seconds: int = Field(description="Seconds since start-up")
    api_url: str = Field(description="Upstream API base URL")
    api_connection_status: str = Field(description="'Connected' or the connection error")
    tools_count: int = Field(description="Number of tools exposed")
