"""Schemas for interaction metrics."""
from pydantic import BaseModel, Field


class CopyRequest(BaseModel):
    """Request schema for /api/metrics/copy endpoint."""
    formulaId: str = Field(..., min_length=1, description="Formula that was copied")


class CopyResponse(BaseModel):
    """Response schema for /api/metrics/copy endpoint."""
    success: bool
    recorded: bool  # False when the copy was dropped by the rate limiter
    message: str
