"""Core schemas for API responses."""

from diff_dragon.core.schemas.responses import ErrorResponse, HealthResponse

__all__ = ["ErrorResponse", "HealthResponse"]
