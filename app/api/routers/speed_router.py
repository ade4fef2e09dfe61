"""
app/api/routers/speed_router.py

Speed KPI endpoints.

    GET  /profiles/{login}/speed-kpis   latest stored bundle for one profile
    POST /speed-runs                     run one synchronous recomputation pass

Invalid custom ranges are rejected with HTTP 422 before any profile is
touched. HTTP 409 means another speed run (scheduled or HTTP) holds the
run slot. A lost store connection surfaces as HTTP 503; bundles persisted
before the failure are kept.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_contribution_store, get_profile_repository
from app.config import SpeedSettings, get_speed_settings
from app.schemas.speed import SpeedKPIsResponse, SpeedRunRequest, SpeedRunSummaryResponse
from app.services.contribution_store import ContributionStore
from app.services.run_control import exclusive_run, shutdown_token
from app.services.speed_orchestrator import SpeedRunLoop
from app.validators.range_validator import InvalidRangeError
from db.repositories.errors import ContributionStoreError
from db.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["speed"])


@router.get(
    "/profiles/{login}/speed-kpis",
    response_model=SpeedKPIsResponse,
    status_code=status.HTTP_200_OK,
)
def get_speed_kpis(
    login: str,
    profiles: ProfileRepository = Depends(get_profile_repository),
) -> SpeedKPIsResponse:
    """
    Return the stored speed bundle for *login*.

    Raises HTTP 404 when the profile is unknown or has never been computed.
    """
    profile = profiles.get_by_login(login)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown profile: {login}",
        )
    if profile.speed_kpis is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No speed KPIs computed yet for profile: {login}",
        )
    return SpeedKPIsResponse(
        login=profile.login,
        last_updated=profile.last_updated,
        speed_kpis=profile.speed_kpis,
    )


@router.post(
    "/speed-runs",
    response_model=SpeedRunSummaryResponse,
    status_code=status.HTTP_200_OK,
)
def trigger_speed_run(
    body: SpeedRunRequest,
    store: ContributionStore = Depends(get_contribution_store),
    settings: SpeedSettings = Depends(get_speed_settings),
) -> SpeedRunSummaryResponse:
    """
    Recompute speed bundles for every flagged profile with new data.

    ``custom_ranges`` in the body replaces the configured ranges for this
    run only.
    """
    loop = SpeedRunLoop(store)
    ranges = body.custom_ranges if body.custom_ranges is not None else settings.custom_ranges
    try:
        loop.set_custom_ranges(ranges)
    except InvalidRangeError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.to_dict(),
        ) from exc

    with exclusive_run() as acquired:
        if not acquired:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A speed run is already in progress.",
            )
        try:
            summary = loop.run(cancel_token=shutdown_token())
        except ContributionStoreError as exc:
            logger.error("Speed run aborted: %s", exc)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Contribution store unavailable: {exc}",
            ) from exc

    return SpeedRunSummaryResponse(**summary.as_dict())
