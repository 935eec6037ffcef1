from matchday.logic.lifecycle.matches import get_match_details, mark_supervisor_report_submitted
from matchday.logic.lifecycle.notifications import notify_supervisor_report_reviewed
from matchday.models.auth import MANAGE_DISCIPLINE, MANAGE_MATCHES, AuthContext
from matchday.models.db.match import MatchStatus
from matchday.models.db.supervisor_report import (
    ReportReviewAction,
    ReportReviewStatus,
    SupervisorReport,
    SupervisorReportBody,
    SupervisorReportStatistics,
)
from matchday.sql.supervisor_reports import (
    get_supervisor_report_by_id,
    get_supervisor_report_for_match,
    get_supervisor_report_statistics,
    get_supervisor_reports,
    sql_create_supervisor_report,
    sql_resubmit_supervisor_report,
    sql_review_supervisor_report,
)
from matchday.utils.errors import (
    AuthorizationError,
    ConcurrentUpdateError,
    NotFoundError,
    TransitionError,
    UniqueIndex,
    ValidationError,
    check_unique_violation,
)
from matchday.utils.id_types import MatchId, SeasonId, SupervisorReportId
from matchday.utils.logging import logger

REPORTABLE_MATCH_STATUSES = frozenset(
    {
        MatchStatus.IN_PROGRESS,
        MatchStatus.FINISHED,
        MatchStatus.REPORTED,
        MatchStatus.COMPLETED,
    }
)


def _require_any_permission(auth: AuthContext, *permissions: str) -> None:
    if not auth.has_any_permission(*permissions):
        raise AuthorizationError("Insufficient permissions to view supervisor reports")


async def create_supervisor_report(
    match_id: MatchId, body: SupervisorReportBody, auth: AuthContext
) -> SupervisorReport:
    """
    Store the match supervisor's report and flag it on the match.

    A supervisor files one report per match. The only way to file again is after an admin sent
    the report back with `request_changes`, in which case the existing report is overwritten and
    goes back into the review queue.
    """
    match = await get_match_details(match_id)
    if auth.sub is None or auth.sub != match.supervisor_id:
        raise AuthorizationError("User is not the assigned supervisor for this match")

    if match.status not in REPORTABLE_MATCH_STATUSES:
        raise TransitionError(f"Cannot submit report while match is {match.status.value}")

    existing = await get_supervisor_report_for_match(match.id, auth.sub)
    if existing is None:
        with check_unique_violation({UniqueIndex.supervisor_reports_match_id_supervisor_id_key}):
            report = await sql_create_supervisor_report(match.id, auth.sub, body)
    elif existing.review_status is ReportReviewStatus.changes_requested:
        report = await sql_resubmit_supervisor_report(existing.id, body)
    else:
        raise ValidationError("A supervisor report was already submitted for this match")

    logger.info(f"Supervisor report {report.id} for match {match.id} submitted by {auth.sub}")
    if report.send_to_disciplinary:
        logger.info(f"Supervisor report {report.id} was flagged for the disciplinary committee")

    await mark_supervisor_report_submitted(match.id)
    return report


async def review_supervisor_report(
    report_id: SupervisorReportId,
    action: ReportReviewAction,
    auth: AuthContext,
    feedback: str | None = None,
) -> SupervisorReport:
    if not auth.has_permission(MANAGE_MATCHES):
        raise AuthorizationError("Insufficient permissions to review supervisor reports")

    report = await get_supervisor_report_by_id(report_id)
    if report is None:
        raise NotFoundError(f"Supervisor report {report_id} not found")

    if report.review_status is not None and report.review_status.is_final:
        raise TransitionError(
            f"Supervisor report {report_id} was already reviewed ({report.review_status.value})"
        )
    if report.review_status is not None:
        raise TransitionError(
            f"Supervisor report {report_id} is waiting for the supervisor to resubmit"
        )

    if action is ReportReviewAction.request_changes and not feedback:
        raise ValidationError("feedback is required when requesting changes")

    review_status = action.to_review_status()
    reviewed = await sql_review_supervisor_report(report.id, review_status, feedback, auth.sub)
    if reviewed is None:
        raise ConcurrentUpdateError(
            f"Supervisor report {report_id} was reviewed by another request"
        )

    logger.info(f"Supervisor report {report.id} reviewed as {review_status.value} by {auth.sub}")
    await notify_supervisor_report_reviewed(reviewed, review_status, feedback)
    return reviewed


async def get_supervisor_report(match_id: MatchId, auth: AuthContext) -> SupervisorReport:
    match = await get_match_details(match_id)
    report = await get_supervisor_report_for_match(match.id)
    if report is None:
        raise NotFoundError(f"No supervisor report found for match {match_id}")

    if auth.sub is None or auth.sub != report.supervisor_id:
        _require_any_permission(auth, MANAGE_MATCHES, MANAGE_DISCIPLINE)

    return report


async def list_my_reports(
    auth: AuthContext, season_id: SeasonId | None = None
) -> list[SupervisorReport]:
    if auth.sub is None:
        return []

    return await get_supervisor_reports(season_id, supervisor_id=auth.sub)


async def list_all_reports(
    auth: AuthContext, season_id: SeasonId | None = None
) -> list[SupervisorReport]:
    _require_any_permission(auth, MANAGE_MATCHES)
    return await get_supervisor_reports(season_id)


async def list_disciplinary_reports(
    auth: AuthContext, season_id: SeasonId | None = None
) -> list[SupervisorReport]:
    _require_any_permission(auth, MANAGE_MATCHES, MANAGE_DISCIPLINE)
    return await get_supervisor_reports(season_id, disciplinary_only=True)


async def get_report_statistics(
    season_id: SeasonId, auth: AuthContext
) -> SupervisorReportStatistics:
    _require_any_permission(auth, MANAGE_MATCHES, MANAGE_DISCIPLINE)
    return await get_supervisor_report_statistics(season_id)
