from typing import Any, NamedTuple

from matchday.config import config
from matchday.database import database
from matchday.logic.lifecycle.guards import check_registration_transition, may_act_for_team
from matchday.logic.lifecycle.notifications import notify_registration_status_change
from matchday.models.auth import MANAGE_SEASONS, AuthContext
from matchday.models.db.registration import (
    REVIEW_STATUSES,
    Registration,
    RegistrationStatus,
    RegistrationStatusHistoryEntry,
    RegistrationStatusUpdate,
    SchedulingReadiness,
)
from matchday.sql.registrations import (
    count_approved_registrations,
    get_registration_by_id,
    get_registration_status_counts,
    get_registration_status_history,
    get_registrations_for_season,
    get_registrations_for_team,
    sql_create_registration,
    sql_insert_registration_status_history,
    sql_update_registration_status,
)
from matchday.sql.seasons import get_season_by_id
from matchday.utils.errors import (
    AuthorizationError,
    ConcurrentUpdateError,
    LifecycleError,
    NotFoundError,
    UniqueIndex,
    ValidationError,
    check_unique_violation,
)
from matchday.utils.id_types import RegistrationId, SeasonId, TeamId
from matchday.utils.logging import logger

INITIAL_STATUSES = frozenset({RegistrationStatus.DRAFT_INVITE, RegistrationStatus.INVITED})


class InvitationResponse(NamedTuple):
    registration: Registration
    already_responded: bool


class ApprovalResult(NamedTuple):
    registration: Registration
    readiness: SchedulingReadiness


class InvitationBatchResult(NamedTuple):
    sent: int
    failed: int


async def get_registration(registration_id: RegistrationId) -> Registration:
    registration = await get_registration_by_id(registration_id)
    if registration is None:
        raise NotFoundError(f"Registration {registration_id} not found")

    return registration


async def list_season_registrations(
    season_id: SeasonId, status: RegistrationStatus | None = None
) -> list[Registration]:
    return await get_registrations_for_season(season_id, status)


async def list_team_registrations(team_id: TeamId, auth: AuthContext) -> list[Registration]:
    if not auth.has_permission(MANAGE_SEASONS) and not auth.manages_team(team_id):
        raise AuthorizationError("Only an admin of this team can view its registrations")

    return await get_registrations_for_team(team_id)


async def create_registration(
    season_id: SeasonId,
    team_id: TeamId,
    auth: AuthContext,
    status: RegistrationStatus = RegistrationStatus.DRAFT_INVITE,
) -> Registration:
    if not auth.has_permission(MANAGE_SEASONS):
        raise AuthorizationError("Insufficient permissions to register teams")

    if status not in INITIAL_STATUSES:
        raise ValidationError("A new registration must start as DRAFT_INVITE or INVITED")

    if await get_season_by_id(season_id) is None:
        raise NotFoundError(f"Season {season_id} not found")

    with check_unique_violation({UniqueIndex.season_team_registrations_season_id_team_id_key}):
        registration = await sql_create_registration(season_id, team_id, status)

    logger.info(
        f"Registered team {team_id} for season {season_id} as {status.value} by {auth.sub}"
    )
    await notify_registration_status_change(registration, status)
    return registration


async def _apply_transition(
    registration: Registration,
    target: RegistrationStatus,
    auth: AuthContext,
    note: str | None = None,
    submission_data: dict[str, Any] | None = None,
) -> Registration:
    check_registration_transition(registration, target, auth, submission_data).raise_if_denied()

    is_review = target in REVIEW_STATUSES
    update = RegistrationStatusUpdate(
        status=target,
        reviewer_note=note,
        submission_data=submission_data,
        mark_submitted=target is RegistrationStatus.SUBMITTED,
        mark_reviewed=is_review,
        reviewed_by=auth.sub if is_review else None,
    )

    async with database.transaction():
        updated = await sql_update_registration_status(registration, update)
        if updated is None:
            raise ConcurrentUpdateError(
                f"Registration {registration.id} was changed by another request, "
                "reload it and try again"
            )

        await sql_insert_registration_status_history(
            registration.id, registration.status, target, auth.sub, note
        )

    logger.info(
        f"Registration {registration.id} of team {registration.team_id} moved from "
        f"{registration.status.value} to {target.value} by {auth.sub}"
    )
    await notify_registration_status_change(updated, target, note)
    return updated


async def change_registration_status(
    registration_id: RegistrationId,
    target: RegistrationStatus,
    auth: AuthContext,
    note: str | None = None,
    submission_data: dict[str, Any] | None = None,
) -> Registration:
    registration = await get_registration(registration_id)
    return await _apply_transition(registration, target, auth, note, submission_data)


async def _respond_to_invitation(
    registration_id: RegistrationId,
    target: RegistrationStatus,
    auth: AuthContext,
    note: str | None,
) -> InvitationResponse:
    registration = await get_registration(registration_id)
    if registration.status is target:
        # Repeating the same answer is harmless, the first response stays the recorded one
        if not may_act_for_team(registration, auth):
            raise AuthorizationError("Only an admin of this team can update its registration")

        return InvitationResponse(registration, already_responded=True)

    updated = await _apply_transition(registration, target, auth, note)
    return InvitationResponse(updated, already_responded=False)


async def accept_invitation(
    registration_id: RegistrationId, auth: AuthContext, note: str | None = None
) -> InvitationResponse:
    return await _respond_to_invitation(
        registration_id, RegistrationStatus.ACCEPTED, auth, note
    )


async def decline_invitation(
    registration_id: RegistrationId, auth: AuthContext, note: str | None = None
) -> InvitationResponse:
    return await _respond_to_invitation(
        registration_id, RegistrationStatus.DECLINED, auth, note
    )


async def submit_registration(
    registration_id: RegistrationId,
    submission_data: dict[str, Any] | None,
    auth: AuthContext,
) -> Registration:
    return await change_registration_status(
        registration_id,
        RegistrationStatus.SUBMITTED,
        auth,
        submission_data=submission_data,
    )


async def check_ready_for_scheduling(season_id: SeasonId) -> SchedulingReadiness:
    season = await get_season_by_id(season_id)
    if season is None:
        raise NotFoundError(f"Season {season_id} not found")

    required_count = (
        season.required_team_count
        if season.required_team_count is not None
        else config.required_team_count
    )
    approved_count = await count_approved_registrations(season_id)
    return SchedulingReadiness(
        ready=approved_count >= required_count,
        approved_count=approved_count,
        required_count=required_count,
    )


async def approve_registration(
    registration_id: RegistrationId, auth: AuthContext, note: str | None = None
) -> ApprovalResult:
    updated = await change_registration_status(
        registration_id, RegistrationStatus.APPROVED, auth, note
    )
    readiness = await check_ready_for_scheduling(updated.season_id)
    if readiness.ready:
        logger.info(
            f"Season {updated.season_id} is ready for scheduling "
            f"({readiness.approved_count}/{readiness.required_count} teams approved)"
        )

    return ApprovalResult(updated, readiness)


def _require_note(note: str | None, action: str) -> str:
    if note is None or note.strip() == "":
        raise ValidationError(f"A note is required when {action} a registration")

    return note.strip()


async def reject_registration(
    registration_id: RegistrationId, auth: AuthContext, note: str | None
) -> Registration:
    return await change_registration_status(
        registration_id, RegistrationStatus.REJECTED, auth, _require_note(note, "rejecting")
    )


async def request_change(
    registration_id: RegistrationId, auth: AuthContext, note: str | None
) -> Registration:
    return await change_registration_status(
        registration_id,
        RegistrationStatus.REQUEST_CHANGE,
        auth,
        _require_note(note, "requesting changes to"),
    )


async def batch_send_invitations(season_id: SeasonId, auth: AuthContext) -> InvitationBatchResult:
    if not auth.has_permission(MANAGE_SEASONS):
        raise AuthorizationError("Insufficient permissions to send invitations")

    drafts = await get_registrations_for_season(season_id, RegistrationStatus.DRAFT_INVITE)
    sent = 0
    failed = 0
    for registration in drafts:
        try:
            await _apply_transition(registration, RegistrationStatus.INVITED, auth)
            sent += 1
        except LifecycleError as exc:
            logger.warning(f"Could not invite team {registration.team_id}: {exc.message}")
            failed += 1

    logger.info(f"Sent {sent} invitations for season {season_id}, {failed} failed")
    return InvitationBatchResult(sent=sent, failed=failed)


async def get_status_statistics(season_id: SeasonId) -> dict[RegistrationStatus, int]:
    counts = await get_registration_status_counts(season_id)
    return {status: counts.get(status, 0) for status in RegistrationStatus}


async def get_registration_history(
    registration_id: RegistrationId,
) -> list[RegistrationStatusHistoryEntry]:
    await get_registration(registration_id)
    return await get_registration_status_history(registration_id)
