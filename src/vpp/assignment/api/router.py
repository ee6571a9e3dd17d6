"""FastAPI router for App Store (VPP) license endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from ...api.query_cache import QueryCache
from ..adapters import RecordingNavigator, RecordingNotifier
from ..domain.ports import IVppRepository
from ..use_cases import AppStoreVppSession, ViewState
from .dependencies import (
    get_query_cache,
    get_vpp_repository,
    is_fleet_client_ready,
    verify_api_key,
)
from .schemas import AssignRequest, AssignResponse, VppViewResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/app-store-vpp", tags=["App Store VPP"])


@router.get("/view", response_model=VppViewResponse)
async def get_view(
    team_id: int = Query(..., ge=0, description="Team to list App Store apps for"),
    repository: IVppRepository = Depends(get_vpp_repository),
    cache: QueryCache = Depends(get_query_cache),
    _auth: bool = Depends(verify_api_key),
):
    """Return what the "add App Store app" view shows for a team.

    ``state`` is one of ``loading``, ``enable_vpp``, ``error``, ``empty``
    or ``list``.
    """
    session = AppStoreVppSession.create(
        team_id,
        repository,
        RecordingNotifier(),
        RecordingNavigator(),
        cache=cache,
    )
    view = await session.load()
    session.cancel()
    return VppViewResponse.from_view(team_id, view)


@router.post("/assign", response_model=AssignResponse)
async def assign_app(
    request: AssignRequest,
    repository: IVppRepository = Depends(get_vpp_repository),
    cache: QueryCache = Depends(get_query_cache),
    _auth: bool = Depends(verify_api_key),
):
    """Add a purchased App Store app to a team.

    The app must be listed for the team. Backend failures do not produce an
    HTTP error: they come back as an ``outcome`` with an error notification,
    exactly as the view would show them.
    """
    notifier = RecordingNotifier()
    navigator = RecordingNavigator()
    session = AppStoreVppSession.create(
        request.team_id,
        repository,
        notifier,
        navigator,
        cache=cache,
    )

    view = await session.load()
    if view.state != ViewState.LIST:
        session.cancel()
        raise HTTPException(
            status_code=409,
            detail=f"App Store apps are not available for this team (state: {view.state.value})",
        )

    try:
        session.select(request.app_store_id)
    except KeyError:
        session.cancel()
        raise HTTPException(
            status_code=422,
            detail=f"App Store app {request.app_store_id} is not available for team {request.team_id}",
        )

    outcome = await session.submit()
    return AssignResponse.from_outcome(
        outcome,
        notifications=notifier.notifications,
        redirect_url=navigator.current_url,
        exited=session.result.exited,
    )


@router.get("/health")
async def health():
    """Health check for the App Store VPP API."""
    return {
        "status": "healthy" if is_fleet_client_ready() else "degraded",
        "fleet_client": is_fleet_client_ready(),
    }
