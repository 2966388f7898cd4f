"""
Animal Rescue API — Health Check Schema
========================================
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    What:  Service and database status.
    Who:   Returned by GET /health for monitoring and load balancer probes.
    """
    caller: str = Field(description="Client address the probe came from")
    status: str = Field(description="Overall service status: ok, degraded")
    database: str = Field(description="Database connectivity: ok, not_connected")
    version: str = Field(description="Application version")
    uptime_seconds: float = Field(description="Seconds since service started")
