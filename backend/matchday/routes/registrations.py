from fastapi import APIRouter, Depends

from matchday.config import config
from matchday.logic.lifecycle.registrations import (
    accept_invitation,
    approve_registration,
    batch_send_invitations,
    change_registration_status,
    check_ready_for_scheduling,
    create_registration,
    decline_invitation,
    get_registration,
    get_registration_history,
    get_status_statistics,
    list_season_registrations,
    list_team_registrations,
    reject_registration,
    request_change,
    submit_registration,
)
from matchday.models.auth import AuthContext
from matchday.models.db.registration import (
    RegistrationChangeStatusBody,
    RegistrationCreateBody,
    RegistrationNoteBody,
    RegistrationStatus,
    RegistrationSubmitBody,
)
from matchday.routes.auth import auth_context
from matchday.routes.models import (
    InvitationAcceptedResponse,
    InvitationBatchResponse,
    InvitationBatchView,
    InvitationDeclinedResponse,
    RegistrationApprovedResponse,
    RegistrationHistoryResponse,
    RegistrationResponse,
    RegistrationsResponse,
    RegistrationStatisticsResponse,
    RegistrationStatisticsView,
)
from matchday.utils.id_types import RegistrationId, SeasonId, TeamId

router = APIRouter(prefix=config.api_prefix)


@router.get("/seasons/{season_id}/registrations", response_model=RegistrationsResponse)
async def season_registrations(
    season_id: SeasonId,
    status: RegistrationStatus | None = None,
    _: AuthContext = Depends(auth_context),
) -> RegistrationsResponse:
    return RegistrationsResponse(data=await list_season_registrations(season_id, status))


@router.post("/seasons/{season_id}/registrations", response_model=RegistrationResponse)
async def register_team(
    season_id: SeasonId,
    body: RegistrationCreateBody,
    auth: AuthContext = Depends(auth_context),
) -> RegistrationResponse:
    return RegistrationResponse(
        data=await create_registration(season_id, body.team_id, auth, body.status)
    )


@router.post(
    "/seasons/{season_id}/registrations/send-invitations",
    response_model=InvitationBatchResponse,
)
async def send_invitations(
    season_id: SeasonId, auth: AuthContext = Depends(auth_context)
) -> InvitationBatchResponse:
    result = await batch_send_invitations(season_id, auth)
    return InvitationBatchResponse(
        data=InvitationBatchView(sent=result.sent, failed=result.failed)
    )


@router.get(
    "/seasons/{season_id}/registrations/statistics",
    response_model=RegistrationStatisticsResponse,
)
async def registration_statistics(
    season_id: SeasonId, _: AuthContext = Depends(auth_context)
) -> RegistrationStatisticsResponse:
    readiness = await check_ready_for_scheduling(season_id)
    return RegistrationStatisticsResponse(
        data=RegistrationStatisticsView(
            status_counts=await get_status_statistics(season_id),
            scheduling_ready=readiness.ready,
            approved_count=readiness.approved_count,
            required_count=readiness.required_count,
        )
    )


@router.get("/registrations/{registration_id}", response_model=RegistrationResponse)
async def registration_details(
    registration_id: RegistrationId, _: AuthContext = Depends(auth_context)
) -> RegistrationResponse:
    return RegistrationResponse(data=await get_registration(registration_id))


@router.get(
    "/registrations/{registration_id}/history", response_model=RegistrationHistoryResponse
)
async def registration_history(
    registration_id: RegistrationId, _: AuthContext = Depends(auth_context)
) -> RegistrationHistoryResponse:
    return RegistrationHistoryResponse(data=await get_registration_history(registration_id))


@router.post(
    "/registrations/{registration_id}/change-status", response_model=RegistrationResponse
)
async def change_status(
    registration_id: RegistrationId,
    body: RegistrationChangeStatusBody,
    auth: AuthContext = Depends(auth_context),
) -> RegistrationResponse:
    return RegistrationResponse(
        data=await change_registration_status(
            registration_id, body.status, auth, body.note, body.submission_data
        )
    )


@router.post(
    "/registrations/{registration_id}/accept", response_model=InvitationAcceptedResponse
)
async def accept(
    registration_id: RegistrationId,
    body: RegistrationNoteBody | None = None,
    auth: AuthContext = Depends(auth_context),
) -> InvitationAcceptedResponse:
    result = await accept_invitation(registration_id, auth, body.note if body else None)
    return InvitationAcceptedResponse(
        data=result.registration, already_accepted=result.already_responded
    )


@router.post(
    "/registrations/{registration_id}/decline", response_model=InvitationDeclinedResponse
)
async def decline(
    registration_id: RegistrationId,
    body: RegistrationNoteBody | None = None,
    auth: AuthContext = Depends(auth_context),
) -> InvitationDeclinedResponse:
    result = await decline_invitation(registration_id, auth, body.note if body else None)
    return InvitationDeclinedResponse(
        data=result.registration, already_declined=result.already_responded
    )


@router.post("/registrations/{registration_id}/submit", response_model=RegistrationResponse)
async def submit(
    registration_id: RegistrationId,
    body: RegistrationSubmitBody,
    auth: AuthContext = Depends(auth_context),
) -> RegistrationResponse:
    return RegistrationResponse(
        data=await submit_registration(registration_id, body.submission_data, auth)
    )


@router.post(
    "/registrations/{registration_id}/approve", response_model=RegistrationApprovedResponse
)
async def approve(
    registration_id: RegistrationId,
    body: RegistrationNoteBody | None = None,
    auth: AuthContext = Depends(auth_context),
) -> RegistrationApprovedResponse:
    result = await approve_registration(registration_id, auth, body.note if body else None)
    return RegistrationApprovedResponse(
        data=result.registration,
        scheduling_ready=result.readiness.ready,
        approved_count=result.readiness.approved_count,
        required_count=result.readiness.required_count,
    )


@router.post("/registrations/{registration_id}/reject", response_model=RegistrationResponse)
async def reject(
    registration_id: RegistrationId,
    body: RegistrationNoteBody,
    auth: AuthContext = Depends(auth_context),
) -> RegistrationResponse:
    return RegistrationResponse(data=await reject_registration(registration_id, auth, body.note))


@router.post(
    "/registrations/{registration_id}/request-change", response_model=RegistrationResponse
)
async def ask_for_changes(
    registration_id: RegistrationId,
    body: RegistrationNoteBody,
    auth: AuthContext = Depends(auth_context),
) -> RegistrationResponse:
    return RegistrationResponse(data=await request_change(registration_id, auth, body.note))


@router.get("/teams/{team_id}/registrations", response_model=RegistrationsResponse)
async def team_registrations(
    team_id: TeamId, auth: AuthContext = Depends(auth_context)
) -> RegistrationsResponse:
    return RegistrationsResponse(data=await list_team_registrations(team_id, auth))
