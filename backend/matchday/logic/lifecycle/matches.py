from matchday.database import database
from matchday.logic.lifecycle.guards import check_match_transition
from matchday.logic.lifecycle.notifications import notify_match_status_change
from matchday.logic.standings import recalculate_season_standings
from matchday.models.auth import MANAGE_MATCHES, AuthContext
from matchday.models.db.match import (
    AssignOfficialsBody,
    LineupStatus,
    MatchCreateBody,
    MatchDetails,
    MatchStatus,
    MatchStatusHistoryEntry,
    RefereeReportBody,
    TeamType,
)
from matchday.sql.matches import (
    get_match_by_id,
    get_match_status_counts,
    get_match_status_history,
    get_matches_in_season_by_status,
    sql_create_match,
    sql_create_referee_report,
    sql_insert_match_status_history,
    sql_set_referee_report_submitted,
    sql_set_supervisor_report_submitted,
    sql_update_lineup_status,
    sql_update_match_officials,
    sql_update_match_status,
)
from matchday.sql.seasons import get_season_by_id
from matchday.utils.errors import (
    AuthorizationError,
    ConcurrentUpdateError,
    NotFoundError,
    TransitionError,
    UniqueIndex,
    ValidationError,
    check_unique_violation,
)
from matchday.utils.id_types import MatchId, SeasonId
from matchday.utils.logging import logger

LINEUP_REVIEW_STATUSES = frozenset({MatchStatus.PREPARING, MatchStatus.READY})


def _concurrent_update(match_id: MatchId) -> ConcurrentUpdateError:
    return ConcurrentUpdateError(
        f"Match {match_id} was changed by another request, reload it and try again"
    )


async def get_match_details(match_id: MatchId) -> MatchDetails:
    match = await get_match_by_id(match_id)
    if match is None:
        raise NotFoundError(f"Match {match_id} not found")

    return match


async def _write_transition(
    match: MatchDetails, target: MatchStatus, auth: AuthContext, note: str | None
) -> MatchDetails:
    updated = await sql_update_match_status(match, target)
    if updated is None:
        raise _concurrent_update(match.id)

    await sql_insert_match_status_history(match.id, match.status, target, auth.sub, note)
    logger.info(
        f"Match {match.id} moved from {match.status.value} to {target.value} by {auth.sub}"
    )
    return updated


async def _after_transition(match: MatchDetails, target: MatchStatus) -> None:
    """Side effects of a committed transition, a failure here never undoes the transition."""
    await notify_match_status_change(match, target)

    if target is MatchStatus.COMPLETED:
        try:
            await recalculate_season_standings(match.season_id)
        except Exception as exc:
            logger.error(
                f"Could not recalculate standings of season {match.season_id} "
                f"after completing match {match.id}: {exc}"
            )


async def change_match_status(
    match_id: MatchId, target: MatchStatus, auth: AuthContext, note: str | None = None
) -> MatchDetails:
    match = await get_match_details(match_id)
    check_match_transition(match, target, auth).raise_if_denied()

    async with database.transaction():
        updated = await _write_transition(match, target, auth, note)

    await _after_transition(updated, target)
    return updated


async def assign_officials(
    match_id: MatchId, body: AssignOfficialsBody, auth: AuthContext
) -> MatchDetails:
    """
    Store the officials of a scheduled match and move it to PREPARING.

    Both writes happen in one database transaction, so a match never ends up with officials
    while still being SCHEDULED.
    """
    if not auth.has_permission(MANAGE_MATCHES):
        raise AuthorizationError("Insufficient permissions to assign officials")

    if body.main_referee_id is None:
        raise ValidationError("mainRefereeId is required")

    officials = body.assigned_official_ids()
    if len(set(officials)) != len(officials):
        raise ValidationError("The same official cannot be assigned to more than one role")

    match = await get_match_details(match_id)
    if match.status is not MatchStatus.SCHEDULED:
        raise TransitionError(
            f"Can only assign officials when match is SCHEDULED (current: {match.status.value})"
        )

    async with database.transaction():
        with_officials = await sql_update_match_officials(match, body)
        if with_officials is None:
            raise _concurrent_update(match.id)

        check_match_transition(with_officials, MatchStatus.PREPARING, auth).raise_if_denied()
        updated = await _write_transition(
            with_officials, MatchStatus.PREPARING, auth, "Officials assigned"
        )

    await _after_transition(updated, MatchStatus.PREPARING)
    return updated


async def update_lineup_status(
    match_id: MatchId,
    team_type: TeamType,
    status: LineupStatus,
    auth: AuthContext,
    rejection_reason: str | None = None,
) -> MatchDetails:
    if not auth.has_permission(MANAGE_MATCHES):
        raise AuthorizationError("Insufficient permissions to review lineups")

    if status is LineupStatus.REJECTED and not rejection_reason:
        raise ValidationError("rejectionReason is required when rejecting a lineup")

    match = await get_match_details(match_id)
    if match.status not in LINEUP_REVIEW_STATUSES:
        raise TransitionError(
            "Lineups can only be reviewed while match is PREPARING or READY "
            f"(current: {match.status.value})"
        )

    updated = await sql_update_lineup_status(
        match,
        team_type,
        status,
        rejection_reason if status is LineupStatus.REJECTED else None,
    )
    if updated is None:
        raise _concurrent_update(match.id)

    logger.info(f"Match {match.id} {team_type} lineup set to {status.value} by {auth.sub}")
    return updated


async def check_and_transition_to_reported(match_id: MatchId) -> MatchDetails:
    """Move a FINISHED match to REPORTED once both the referee and supervisor reports are in."""
    match = await get_match_details(match_id)
    if (
        match.status is not MatchStatus.FINISHED
        or not match.referee_report_submitted
        or not match.supervisor_report_submitted
    ):
        return match

    try:
        return await change_match_status(
            match_id, MatchStatus.REPORTED, AuthContext.system(), "Both reports submitted"
        )
    except ConcurrentUpdateError:
        logger.info(f"Match {match_id} was moved by a concurrent request while reporting")
        return await get_match_details(match_id)


async def submit_referee_report(
    match_id: MatchId, body: RefereeReportBody, auth: AuthContext
) -> MatchDetails:
    match = await get_match_details(match_id)
    is_main_referee = auth.sub is not None and auth.sub == match.main_referee_id
    if not is_main_referee and not auth.has_permission(MANAGE_MATCHES):
        raise AuthorizationError("User is not the assigned main referee for this match")

    if match.status is not MatchStatus.FINISHED:
        raise TransitionError(
            f"Cannot submit referee report while match is {match.status.value}"
        )

    if match.referee_report_submitted:
        raise ValidationError("A referee report was already submitted for this match")

    referee_id = match.main_referee_id if match.main_referee_id is not None else auth.sub
    if referee_id is None:
        raise ValidationError("Match has no main referee assigned")

    async with database.transaction():
        with check_unique_violation({UniqueIndex.match_referee_reports_match_id_key}):
            await sql_create_referee_report(match.id, referee_id, body)

        await sql_set_referee_report_submitted(match.id, body.home_score, body.away_score)

    logger.info(f"Referee report for match {match.id} submitted by {auth.sub}")
    return await check_and_transition_to_reported(match.id)


async def mark_supervisor_report_submitted(match_id: MatchId) -> MatchDetails:
    await sql_set_supervisor_report_submitted(match_id)
    return await check_and_transition_to_reported(match_id)


async def get_matches_by_status(season_id: SeasonId, status: MatchStatus) -> list[MatchDetails]:
    return await get_matches_in_season_by_status(season_id, status)


async def get_lifecycle_statistics(season_id: SeasonId) -> dict[MatchStatus, int]:
    counts = await get_match_status_counts(season_id)
    return {status: counts.get(status, 0) for status in MatchStatus}


async def get_match_history(match_id: MatchId) -> list[MatchStatusHistoryEntry]:
    await get_match_details(match_id)
    return await get_match_status_history(match_id)


async def schedule_match(
    season_id: SeasonId, body: MatchCreateBody, auth: AuthContext
) -> MatchDetails:
    if not auth.has_permission(MANAGE_MATCHES):
        raise AuthorizationError("Insufficient permissions to schedule matches")

    if body.home_team_id == body.away_team_id:
        raise ValidationError("A team cannot play a match against itself")

    if await get_season_by_id(season_id) is None:
        raise NotFoundError(f"Season {season_id} not found")

    match = await sql_create_match(season_id, body)
    logger.info(f"Scheduled match {match.id} in season {season_id} by {auth.sub}")
    return await get_match_details(match.id)
