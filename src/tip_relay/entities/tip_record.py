"""Tip record domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TipRecord:
    """One snapshot of landed-tip percentiles from the upstream stream.

    Records are produced only by decoding upstream messages and are never
    mutated afterwards.

    Attributes:
        time: Timestamp label exactly as sent by the upstream
        landed_tips_25th_percentile: 25th percentile of landed tips
        landed_tips_50th_percentile: Median of landed tips
        landed_tips_75th_percentile: 75th percentile of landed tips
        landed_tips_95th_percentile: 95th percentile of landed tips
        landed_tips_99th_percentile: 99th percentile of landed tips
    """

    time: str
    landed_tips_25th_percentile: float
    landed_tips_50th_percentile: float
    landed_tips_75th_percentile: float
    landed_tips_95th_percentile: float
    landed_tips_99th_percentile: float
