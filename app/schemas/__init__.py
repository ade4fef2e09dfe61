"""
app/schemas package marker.
"""

from app.schemas.speed import (
    DateRangeSpec,
    SpeedKPIsResponse,
    SpeedRunRequest,
    SpeedRunSummaryResponse,
)

__all__ = [
    "DateRangeSpec",
    "SpeedKPIsResponse",
    "SpeedRunRequest",
    "SpeedRunSummaryResponse",
]
