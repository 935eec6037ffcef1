from fastapi import APIRouter, Depends

from matchday.config import config
from matchday.logic.lifecycle.matches import (
    assign_officials,
    change_match_status,
    get_lifecycle_statistics,
    get_match_details,
    get_match_history,
    get_matches_by_status,
    schedule_match,
    submit_referee_report,
    update_lineup_status,
)
from matchday.models.auth import AuthContext
from matchday.models.db.match import (
    AssignOfficialsBody,
    LineupStatusBody,
    MatchChangeStatusBody,
    MatchCreateBody,
    MatchStatus,
    RefereeReportBody,
)
from matchday.routes.auth import auth_context
from matchday.routes.models import (
    MatchDetailsResponse,
    MatchesResponse,
    MatchHistoryResponse,
    MatchLifecycleStatisticsResponse,
    StandingsResponse,
)
from matchday.sql.standings import get_season_standings
from matchday.utils.id_types import MatchId, SeasonId

router = APIRouter(prefix=config.api_prefix)


@router.get("/matches/{match_id}/details", response_model=MatchDetailsResponse)
async def get_match(
    match_id: MatchId, _: AuthContext = Depends(auth_context)
) -> MatchDetailsResponse:
    return MatchDetailsResponse(data=await get_match_details(match_id))


@router.post("/matches/{match_id}/change-status", response_model=MatchDetailsResponse)
async def change_status(
    match_id: MatchId,
    body: MatchChangeStatusBody,
    auth: AuthContext = Depends(auth_context),
) -> MatchDetailsResponse:
    return MatchDetailsResponse(
        data=await change_match_status(match_id, body.status, auth, body.note)
    )


@router.post("/matches/{match_id}/assign-officials", response_model=MatchDetailsResponse)
async def assign_match_officials(
    match_id: MatchId,
    body: AssignOfficialsBody,
    auth: AuthContext = Depends(auth_context),
) -> MatchDetailsResponse:
    return MatchDetailsResponse(data=await assign_officials(match_id, body, auth))


@router.post("/matches/{match_id}/lineup-status", response_model=MatchDetailsResponse)
async def change_lineup_status(
    match_id: MatchId,
    body: LineupStatusBody,
    auth: AuthContext = Depends(auth_context),
) -> MatchDetailsResponse:
    return MatchDetailsResponse(
        data=await update_lineup_status(
            match_id, body.team_type, body.status, auth, body.rejection_reason
        )
    )


@router.get("/matches/{match_id}/history", response_model=MatchHistoryResponse)
async def match_history(
    match_id: MatchId, _: AuthContext = Depends(auth_context)
) -> MatchHistoryResponse:
    return MatchHistoryResponse(data=await get_match_history(match_id))


@router.post("/matches/{match_id}/referee-report", response_model=MatchDetailsResponse)
async def create_referee_report(
    match_id: MatchId,
    body: RefereeReportBody,
    auth: AuthContext = Depends(auth_context),
) -> MatchDetailsResponse:
    return MatchDetailsResponse(data=await submit_referee_report(match_id, body, auth))


@router.post("/seasons/{season_id}/matches", response_model=MatchDetailsResponse)
async def create_match(
    season_id: SeasonId,
    body: MatchCreateBody,
    auth: AuthContext = Depends(auth_context),
) -> MatchDetailsResponse:
    return MatchDetailsResponse(data=await schedule_match(season_id, body, auth))


@router.get("/seasons/{season_id}/matches/by-status", response_model=MatchesResponse)
async def matches_by_status(
    season_id: SeasonId,
    status: MatchStatus,
    _: AuthContext = Depends(auth_context),
) -> MatchesResponse:
    return MatchesResponse(data=await get_matches_by_status(season_id, status))


@router.get(
    "/seasons/{season_id}/matches/lifecycle-statistics",
    response_model=MatchLifecycleStatisticsResponse,
)
async def lifecycle_statistics(
    season_id: SeasonId, _: AuthContext = Depends(auth_context)
) -> MatchLifecycleStatisticsResponse:
    return MatchLifecycleStatisticsResponse(data=await get_lifecycle_statistics(season_id))


@router.get("/seasons/{season_id}/standings", response_model=StandingsResponse)
async def season_standings(
    season_id: SeasonId, _: AuthContext = Depends(auth_context)
) -> StandingsResponse:
    return StandingsResponse(data=await get_season_standings(season_id))
