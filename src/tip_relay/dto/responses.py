"""Response DTOs for API endpoints."""

from pydantic import BaseModel, Field


class Annotations(BaseModel):
    """Static provenance block attached to every tip response."""

    repository: str = Field(..., description="Source repository of this service")
    author: str = Field(..., description="Author of this service")
    language: str = Field(..., description="Implementation language")
    subscribed_to: str = Field(..., description="Upstream stream URL the data comes from")


class TipResponse(BaseModel):
    """Response DTO for the current tip record."""

    time: str = Field(..., description="Timestamp label of the snapshot")
    landed_tips_25th_percentile: float
    landed_tips_50th_percentile: float
    landed_tips_75th_percentile: float
    landed_tips_95th_percentile: float
    landed_tips_99th_percentile: float
    annotations: Annotations


class ErrorResponse(BaseModel):
    """Response DTO returned when the cache is empty or unreadable."""

    error: str = Field(..., description="The underlying error message")
    description: str = Field(..., description="Human-readable hint about the failure")
