from typing import Any

from matchday.logic.lifecycle.state_machine import StateMachine, TransitionVerdict
from matchday.models.auth import MANAGE_MATCHES, MANAGE_SEASONS, AuthContext
from matchday.models.db.match import Match, MatchStatus
from matchday.models.db.registration import (
    Registration,
    RegistrationStatus,
    submission_is_complete,
)

MATCH_LIFECYCLE = StateMachine[MatchStatus](
    "match",
    [
        (MatchStatus.SCHEDULED, MatchStatus.PREPARING),
        (MatchStatus.PREPARING, MatchStatus.READY),
        (MatchStatus.READY, MatchStatus.IN_PROGRESS),
        (MatchStatus.IN_PROGRESS, MatchStatus.FINISHED),
        (MatchStatus.FINISHED, MatchStatus.REPORTED),
        (MatchStatus.REPORTED, MatchStatus.COMPLETED),
    ],
)

REGISTRATION_LIFECYCLE = StateMachine[RegistrationStatus](
    "registration",
    [
        (RegistrationStatus.DRAFT_INVITE, RegistrationStatus.INVITED),
        (RegistrationStatus.INVITED, RegistrationStatus.ACCEPTED),
        (RegistrationStatus.INVITED, RegistrationStatus.DECLINED),
        (RegistrationStatus.ACCEPTED, RegistrationStatus.SUBMITTED),
        (RegistrationStatus.SUBMITTED, RegistrationStatus.APPROVED),
        (RegistrationStatus.SUBMITTED, RegistrationStatus.REJECTED),
        (RegistrationStatus.SUBMITTED, RegistrationStatus.REQUEST_CHANGE),
        (RegistrationStatus.REQUEST_CHANGE, RegistrationStatus.SUBMITTED),
    ],
)

# Targets a team admin may move its own registration into. Everything else is league staff only.
TEAM_OWNED_REGISTRATION_TARGETS = frozenset(
    {
        RegistrationStatus.ACCEPTED,
        RegistrationStatus.DECLINED,
        RegistrationStatus.SUBMITTED,
    }
)


def may_act_for_team(registration: Registration, auth: AuthContext) -> bool:
    return auth.has_permission(MANAGE_SEASONS) or auth.manages_team(registration.team_id)


def check_match_transition(
    match: Match, target: MatchStatus, auth: AuthContext
) -> TransitionVerdict:
    if not auth.has_permission(MANAGE_MATCHES):
        return TransitionVerdict.deny(
            "authorization", "Insufficient permissions to change match status"
        )

    verdict = MATCH_LIFECYCLE.check(match.status, target)
    if not verdict.allowed:
        return verdict

    if target is MatchStatus.PREPARING and not match.has_officials:
        return TransitionVerdict.deny(
            "transition", "Cannot move to PREPARING without assigning main referee"
        )

    if target is MatchStatus.REPORTED and not match.reports_complete:
        return TransitionVerdict.deny(
            "transition", "Cannot move to REPORTED without both referee and supervisor reports"
        )

    return TransitionVerdict.permit()


def check_registration_transition(
    registration: Registration,
    target: RegistrationStatus,
    auth: AuthContext,
    submission_data: dict[str, Any] | None = None,
) -> TransitionVerdict:
    """
    Decide whether `auth` may move `registration` into `target`.

    The caller's role is checked first, then the edge table, then the submission payload when
    the target is SUBMITTED. The payload may come with the request or already be stored on the
    registration from an earlier submission that was sent back with REQUEST_CHANGE.
    """
    if target in TEAM_OWNED_REGISTRATION_TARGETS:
        if not may_act_for_team(registration, auth):
            return TransitionVerdict.deny(
                "authorization", "Only an admin of this team can update its registration"
            )
    elif not auth.has_permission(MANAGE_SEASONS):
        return TransitionVerdict.deny(
            "authorization", "Insufficient permissions to review registrations"
        )

    verdict = REGISTRATION_LIFECYCLE.check(registration.status, target)
    if not verdict.allowed:
        return verdict

    if target is RegistrationStatus.SUBMITTED and not submission_is_complete(
        submission_data if submission_data is not None else registration.submission_data
    ):
        return TransitionVerdict.deny("validation", "Stadium and kits information are required")

    return TransitionVerdict.permit()
