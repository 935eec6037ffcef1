from fastapi import APIRouter, Depends, Query

from matchday.config import config
from matchday.logic.lifecycle.supervisor_reports import (
    create_supervisor_report,
    get_report_statistics,
    get_supervisor_report,
    list_all_reports,
    list_disciplinary_reports,
    list_my_reports,
    review_supervisor_report,
)
from matchday.models.auth import AuthContext
from matchday.models.db.supervisor_report import SupervisorReportBody, SupervisorReportReviewBody
from matchday.routes.auth import auth_context
from matchday.routes.models import (
    SupervisorReportResponse,
    SupervisorReportsResponse,
    SupervisorReportStatisticsResponse,
)
from matchday.utils.id_types import MatchId, SeasonId, SupervisorReportId

router = APIRouter(prefix=config.api_prefix)


@router.post("/matches/{match_id}/supervisor-report", response_model=SupervisorReportResponse)
async def submit_report(
    match_id: MatchId,
    body: SupervisorReportBody,
    auth: AuthContext = Depends(auth_context),
) -> SupervisorReportResponse:
    return SupervisorReportResponse(data=await create_supervisor_report(match_id, body, auth))


@router.get("/matches/{match_id}/supervisor-report", response_model=SupervisorReportResponse)
async def match_report(
    match_id: MatchId, auth: AuthContext = Depends(auth_context)
) -> SupervisorReportResponse:
    return SupervisorReportResponse(data=await get_supervisor_report(match_id, auth))


@router.get("/supervisor/my-reports", response_model=SupervisorReportsResponse)
async def my_reports(
    season_id: SeasonId | None = Query(default=None, alias="seasonId"),
    auth: AuthContext = Depends(auth_context),
) -> SupervisorReportsResponse:
    return SupervisorReportsResponse(data=await list_my_reports(auth, season_id))


@router.get("/admin/supervisor-reports", response_model=SupervisorReportsResponse)
async def all_reports(
    season_id: SeasonId | None = Query(default=None, alias="seasonId"),
    auth: AuthContext = Depends(auth_context),
) -> SupervisorReportsResponse:
    return SupervisorReportsResponse(data=await list_all_reports(auth, season_id))


@router.get("/admin/supervisor-reports/disciplinary", response_model=SupervisorReportsResponse)
async def disciplinary_reports(
    season_id: SeasonId | None = Query(default=None, alias="seasonId"),
    auth: AuthContext = Depends(auth_context),
) -> SupervisorReportsResponse:
    return SupervisorReportsResponse(data=await list_disciplinary_reports(auth, season_id))


@router.post(
    "/admin/supervisor-reports/{report_id}/review", response_model=SupervisorReportResponse
)
async def review_report(
    report_id: SupervisorReportId,
    body: SupervisorReportReviewBody,
    auth: AuthContext = Depends(auth_context),
) -> SupervisorReportResponse:
    return SupervisorReportResponse(
        data=await review_supervisor_report(report_id, body.action, auth, body.feedback)
    )


@router.get(
    "/seasons/{season_id}/supervisor-reports/statistics",
    response_model=SupervisorReportStatisticsResponse,
)
async def report_statistics(
    season_id: SeasonId, auth: AuthContext = Depends(auth_context)
) -> SupervisorReportStatisticsResponse:
    return SupervisorReportStatisticsResponse(data=await get_report_statistics(season_id, auth))
