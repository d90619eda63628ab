"""Upstream message DTOs."""

from pydantic import BaseModel, ConfigDict, Field


class TipRecordMessage(BaseModel):
    """One record inside an upstream tip stream message.

    The upstream sends a JSON array of these objects per message.
    Unknown fields are ignored. Percentiles must be finite JSON numbers;
    strings and booleans are not coerced.
    """

    model_config = ConfigDict(strict=True, allow_inf_nan=False)

    time: str = Field(..., description="Timestamp label of the snapshot")
    landed_tips_25th_percentile: float
    landed_tips_50th_percentile: float
    landed_tips_75th_percentile: float
    landed_tips_95th_percentile: float
    landed_tips_99th_percentile: float
