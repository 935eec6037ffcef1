import pytest

from matchday.logic.lifecycle.supervisor_reports import (
    create_supervisor_report,
    get_report_statistics,
    get_supervisor_report,
    list_all_reports,
    list_disciplinary_reports,
    list_my_reports,
    review_supervisor_report,
)
from matchday.models.db.match import MatchDetails, MatchStatus
from matchday.models.db.supervisor_report import (
    ReportReviewAction,
    ReportReviewStatus,
    SupervisorReportBody,
)
from matchday.utils.errors import (
    AuthorizationError,
    NotFoundError,
    TransitionError,
    ValidationError,
)
from matchday.utils.id_types import SupervisorReportId
from tests.unit_tests.fakes import FakeStore
from tests.unit_tests.mocks import (
    ANONYMOUS_FAN,
    DISCIPLINE_OFFICER,
    LEAGUE_ADMIN,
    MAIN_REFEREE,
    MAIN_REFEREE_ID,
    SUPERVISOR,
    SUPERVISOR_ID,
)

REPORT = SupervisorReportBody(
    organization_rating=8,
    security_rating=6,
    incident_report="Flares thrown from the away end in the 70th minute",
    has_serious_violation=True,
    send_to_disciplinary=True,
)


def _finished_match(store: FakeStore, **fields: object) -> MatchDetails:
    season = store.add_season()
    return store.add_match(
        season.id,
        MatchStatus.FINISHED,
        main_referee_id=MAIN_REFEREE_ID,
        supervisor_id=SUPERVISOR_ID,
        **fields,
    )


@pytest.mark.asyncio
async def test_only_the_assigned_supervisor_may_file(store: FakeStore) -> None:
    match = _finished_match(store)

    with pytest.raises(AuthorizationError, match="not the assigned supervisor"):
        await create_supervisor_report(match.id, REPORT, MAIN_REFEREE)
    with pytest.raises(AuthorizationError):
        await create_supervisor_report(match.id, REPORT, LEAGUE_ADMIN)

    assert store.supervisor_reports == {}


@pytest.mark.asyncio
async def test_report_cannot_be_filed_before_kickoff(store: FakeStore) -> None:
    season = store.add_season()
    match = store.add_match(season.id, MatchStatus.READY, supervisor_id=SUPERVISOR_ID)

    with pytest.raises(TransitionError, match="Cannot submit report while match is READY"):
        await create_supervisor_report(match.id, REPORT, SUPERVISOR)


@pytest.mark.asyncio
async def test_report_flags_match_without_moving_it(store: FakeStore) -> None:
    match = _finished_match(store)

    report = await create_supervisor_report(match.id, REPORT, SUPERVISOR)

    assert report.supervisor_id == SUPERVISOR_ID
    assert report.send_to_disciplinary
    assert report.review_status is None
    assert store.matches[match.id].supervisor_report_submitted
    assert store.matches[match.id].status is MatchStatus.FINISHED


@pytest.mark.asyncio
async def test_second_report_moves_match_to_reported(store: FakeStore) -> None:
    match = _finished_match(store, referee_report_submitted=True)

    await create_supervisor_report(match.id, REPORT, SUPERVISOR)

    assert store.matches[match.id].status is MatchStatus.REPORTED
    assert store.match_history[-1].changed_by is None
    assert store.match_history[-1].note == "Both reports submitted"


@pytest.mark.asyncio
async def test_duplicate_report_is_rejected(store: FakeStore) -> None:
    match = _finished_match(store)
    await create_supervisor_report(match.id, REPORT, SUPERVISOR)

    with pytest.raises(ValidationError, match="already submitted for this match"):
        await create_supervisor_report(match.id, REPORT, SUPERVISOR)


@pytest.mark.asyncio
async def test_report_may_be_resubmitted_after_changes_are_requested(store: FakeStore) -> None:
    match = _finished_match(store)
    report = await create_supervisor_report(match.id, REPORT, SUPERVISOR)
    await review_supervisor_report(
        report.id, ReportReviewAction.request_changes, LEAGUE_ADMIN, "Add the steward count"
    )

    resubmitted = await create_supervisor_report(
        match.id,
        REPORT.model_copy(update={"recommendations": "Eighty stewards were on duty"}),
        SUPERVISOR,
    )

    assert resubmitted.id == report.id
    assert resubmitted.review_status is None
    assert resubmitted.review_feedback is None
    assert resubmitted.recommendations == "Eighty stewards were on duty"


@pytest.mark.asyncio
async def test_requested_changes_cannot_be_reviewed_again_before_resubmission(
    store: FakeStore,
) -> None:
    match = _finished_match(store)
    report = await create_supervisor_report(match.id, REPORT, SUPERVISOR)
    await review_supervisor_report(
        report.id, ReportReviewAction.request_changes, LEAGUE_ADMIN, "Add the steward count"
    )

    for action in ReportReviewAction:
        with pytest.raises(TransitionError, match="waiting for the supervisor to resubmit"):
            await review_supervisor_report(report.id, action, LEAGUE_ADMIN, "Never mind")

    assert store.supervisor_reports[report.id].review_feedback == "Add the steward count"

    await create_supervisor_report(match.id, REPORT, SUPERVISOR)
    approved = await review_supervisor_report(report.id, ReportReviewAction.approve, LEAGUE_ADMIN)
    assert approved.review_status is ReportReviewStatus.approved


@pytest.mark.asyncio
async def test_review_rules(store: FakeStore) -> None:
    match = _finished_match(store)
    report = await create_supervisor_report(match.id, REPORT, SUPERVISOR)

    with pytest.raises(AuthorizationError):
        await review_supervisor_report(report.id, ReportReviewAction.approve, DISCIPLINE_OFFICER)
    with pytest.raises(ValidationError, match="feedback is required"):
        await review_supervisor_report(report.id, ReportReviewAction.request_changes, LEAGUE_ADMIN)
    with pytest.raises(NotFoundError):
        await review_supervisor_report(
            SupervisorReportId(999), ReportReviewAction.approve, LEAGUE_ADMIN
        )

    reviewed = await review_supervisor_report(
        report.id, ReportReviewAction.approve, LEAGUE_ADMIN, "Thorough, thanks"
    )
    assert reviewed.review_status is ReportReviewStatus.approved
    assert reviewed.reviewed_by == LEAGUE_ADMIN.sub
    assert store.notified_user_ids("supervisor_report_reviewed") == [SUPERVISOR_ID]

    with pytest.raises(TransitionError, match="already reviewed"):
        await review_supervisor_report(report.id, ReportReviewAction.rejected, LEAGUE_ADMIN)


@pytest.mark.asyncio
async def test_review_survives_notification_failure(store: FakeStore) -> None:
    match = _finished_match(store)
    report = await create_supervisor_report(match.id, REPORT, SUPERVISOR)
    store.fail_notifications = True

    reviewed = await review_supervisor_report(report.id, ReportReviewAction.rejected, LEAGUE_ADMIN)

    assert reviewed.review_status is ReportReviewStatus.rejected
    assert store.notifications == []


@pytest.mark.asyncio
async def test_report_visibility(store: FakeStore) -> None:
    match = _finished_match(store)
    report = await create_supervisor_report(match.id, REPORT, SUPERVISOR)

    assert (await get_supervisor_report(match.id, SUPERVISOR)).id == report.id
    assert (await get_supervisor_report(match.id, DISCIPLINE_OFFICER)).id == report.id
    with pytest.raises(AuthorizationError):
        await get_supervisor_report(match.id, ANONYMOUS_FAN)

    other_match = _finished_match(store)
    with pytest.raises(NotFoundError, match="No supervisor report found"):
        await get_supervisor_report(other_match.id, LEAGUE_ADMIN)


@pytest.mark.asyncio
async def test_report_listings(store: FakeStore) -> None:
    flagged_match = _finished_match(store)
    quiet_match = _finished_match(store)
    await create_supervisor_report(flagged_match.id, REPORT, SUPERVISOR)
    await create_supervisor_report(
        quiet_match.id, SupervisorReportBody(organization_rating=4), SUPERVISOR
    )

    assert len(await list_my_reports(SUPERVISOR)) == 2
    assert await list_my_reports(MAIN_REFEREE) == []
    assert len(await list_all_reports(LEAGUE_ADMIN)) == 2

    disciplinary = await list_disciplinary_reports(DISCIPLINE_OFFICER)
    assert [report.match_id for report in disciplinary] == [flagged_match.id]

    with pytest.raises(AuthorizationError):
        await list_all_reports(DISCIPLINE_OFFICER)
    with pytest.raises(AuthorizationError):
        await list_disciplinary_reports(SUPERVISOR)


@pytest.mark.asyncio
async def test_report_statistics(store: FakeStore) -> None:
    match = _finished_match(store)
    report = await create_supervisor_report(match.id, REPORT, SUPERVISOR)
    await review_supervisor_report(report.id, ReportReviewAction.approve, LEAGUE_ADMIN)

    statistics = await get_report_statistics(match.season_id, DISCIPLINE_OFFICER)

    assert statistics.total_reports == 1
    assert statistics.reviewed_reports == 1
    assert statistics.pending_reports == 0
    assert statistics.disciplinary_flags == 1
    assert statistics.serious_violations == 1
    assert statistics.average_organization_rating == 8.0

    with pytest.raises(AuthorizationError):
        await get_report_statistics(match.season_id, ANONYMOUS_FAN)
