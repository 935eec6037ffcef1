from matchday.models.db.match import Match, MatchStatus
from matchday.models.db.notification import NotificationInsertable
from matchday.models.db.registration import Registration, RegistrationStatus
from matchday.models.db.supervisor_report import ReportReviewStatus, SupervisorReport
from matchday.sql.notifications import get_team_admin_user_ids, sql_create_notification
from matchday.utils.id_types import UserId
from matchday.utils.logging import logger

MATCH_STATUS_MESSAGES: dict[MatchStatus, tuple[str, str]] = {
    MatchStatus.PREPARING: (
        "Match assignment",
        "You have been assigned to a match that is now being prepared.",
    ),
    MatchStatus.READY: (
        "Match ready",
        "The match you are officiating is ready for kickoff.",
    ),
    MatchStatus.FINISHED: (
        "Report required",
        "The match has finished, please submit your report.",
    ),
    MatchStatus.COMPLETED: (
        "Match completed",
        "The match has been completed and the result is final.",
    ),
}

REGISTRATION_STATUS_MESSAGES: dict[RegistrationStatus, tuple[str, str]] = {
    RegistrationStatus.INVITED: (
        "Season invitation",
        "Your team has been invited to take part in the season.",
    ),
    RegistrationStatus.ACCEPTED: (
        "Invitation accepted",
        "Your team accepted the season invitation, please submit the registration details.",
    ),
    RegistrationStatus.REQUEST_CHANGE: (
        "Registration changes requested",
        "The league asked for changes to your season registration.",
    ),
    RegistrationStatus.APPROVED: (
        "Registration approved",
        "Your season registration has been approved.",
    ),
    RegistrationStatus.REJECTED: (
        "Registration rejected",
        "Your season registration has been rejected.",
    ),
}


def match_notification_recipients(match: Match, status: MatchStatus) -> list[UserId]:
    """Officials that need to hear about `status`, team admins are resolved separately."""
    match status:
        case MatchStatus.PREPARING | MatchStatus.FINISHED:
            recipients = [match.main_referee_id, match.supervisor_id]
        case MatchStatus.READY:
            recipients = [match.main_referee_id]
        case _:
            recipients = []

    return list(dict.fromkeys(user_id for user_id in recipients if user_id is not None))


async def _send_to_all(user_ids: list[UserId], template: NotificationInsertable) -> None:
    for user_id in user_ids:
        await sql_create_notification(template.model_copy(update={"user_id": user_id}))


async def notify_match_status_change(match: Match, status: MatchStatus) -> None:
    if status not in MATCH_STATUS_MESSAGES:
        return

    title, message = MATCH_STATUS_MESSAGES[status]
    try:
        recipients = match_notification_recipients(match, status)
        if status is MatchStatus.COMPLETED:
            recipients = await get_team_admin_user_ids(match.team_ids)

        template = NotificationInsertable(
            user_id=UserId(0),
            type=f"match_{status.value.lower()}",
            title=title,
            message=message,
            related_entity="match",
            related_id=match.id,
            action_url=f"/matches/{match.id}",
        )
        await _send_to_all(recipients, template)
    except Exception as exc:
        logger.warning(f"Could not notify about match {match.id} moving to {status.value}: {exc}")


async def notify_registration_status_change(
    registration: Registration, status: RegistrationStatus, note: str | None = None
) -> None:
    if status not in REGISTRATION_STATUS_MESSAGES:
        return

    title, message = REGISTRATION_STATUS_MESSAGES[status]
    if note:
        message = f"{message}\n\n{note}"

    try:
        template = NotificationInsertable(
            user_id=UserId(0),
            type=f"registration_{status.value.lower()}",
            title=title,
            message=message,
            related_entity="season_registration",
            related_id=registration.id,
            action_url=f"/registrations/{registration.id}",
        )
        await _send_to_all(await get_team_admin_user_ids([registration.team_id]), template)
    except Exception as exc:
        logger.warning(
            f"Could not notify team {registration.team_id} about registration "
            f"{registration.id} moving to {status.value}: {exc}"
        )


async def notify_supervisor_report_reviewed(
    report: SupervisorReport, review_status: ReportReviewStatus, feedback: str | None
) -> None:
    message = f"Your supervisor report was reviewed: {review_status.value.replace('_', ' ')}."
    if feedback:
        message = f"{message}\n\n{feedback}"

    try:
        await sql_create_notification(
            NotificationInsertable(
                user_id=report.supervisor_id,
                type="supervisor_report_reviewed",
                title="Supervisor report reviewed",
                message=message,
                related_entity="supervisor_report",
                related_id=report.id,
                action_url=f"/matches/{report.match_id}/supervisor-report",
            )
        )
    except Exception as exc:
        logger.warning(f"Could not notify supervisor about report {report.id}: {exc}")
