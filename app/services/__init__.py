"""
app/services package marker.
"""

from app.services.contribution_store import ContributionStore, DatabaseContributionStore
from app.services.custom_range_service import CustomRangeEngine
from app.services.run_control import exclusive_run, request_shutdown, shutdown_token
from app.services.speed_orchestrator import (
    CancellationToken,
    ProfileOutcome,
    ProfileStatus,
    RunSummary,
    SpeedRunLoop,
)
from app.services.speed_report_service import SpeedReportBuilder

__all__ = [
    "CancellationToken",
    "ContributionStore",
    "CustomRangeEngine",
    "DatabaseContributionStore",
    "ProfileOutcome",
    "ProfileStatus",
    "RunSummary",
    "SpeedReportBuilder",
    "SpeedRunLoop",
    "exclusive_run",
    "request_shutdown",
    "shutdown_token",
]
