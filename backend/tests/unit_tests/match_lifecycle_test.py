import itertools

import pytest

from matchday.logic.lifecycle import matches as match_lifecycle
from matchday.logic.lifecycle.matches import (
    assign_officials,
    change_match_status,
    get_lifecycle_statistics,
    get_match_history,
    mark_supervisor_report_submitted,
    schedule_match,
    submit_referee_report,
    update_lineup_status,
)
from matchday.models.db.match import (
    AssignOfficialsBody,
    LineupStatus,
    MatchCreateBody,
    MatchStatus,
    RefereeReportBody,
)
from matchday.utils.errors import (
    AuthorizationError,
    ConcurrentUpdateError,
    NotFoundError,
    TransitionError,
    ValidationError,
)
from matchday.utils.id_types import MatchId, SeasonId, UserId
from tests.unit_tests.fakes import FakeStore
from tests.unit_tests.mocks import (
    ANONYMOUS_FAN,
    ASSISTANT_REFEREE_ID,
    LEAGUE_ADMIN,
    MAIN_REFEREE,
    MAIN_REFEREE_ID,
    MATCH_EDGES,
    MOCK_NOW,
    SUPERVISOR_ID,
)

NON_EDGES = [
    pair for pair in itertools.product(MatchStatus, MatchStatus) if pair not in MATCH_EDGES
]


@pytest.mark.asyncio
@pytest.mark.parametrize(("current", "target"), sorted(MATCH_EDGES))
async def test_every_edge_succeeds(
    store: FakeStore, current: MatchStatus, target: MatchStatus
) -> None:
    season = store.add_season()
    reports = {"referee_report_submitted": True} if target is MatchStatus.REPORTED else {}
    match = store.add_match(season.id, current, main_referee_id=MAIN_REFEREE_ID, **reports)

    updated = await change_match_status(match.id, target, LEAGUE_ADMIN, note="moving on")

    assert updated.status is target
    assert updated.version == match.version + 1
    assert store.matches[match.id].status is target

    history = await get_match_history(match.id)
    assert [(entry.from_status, entry.to_status) for entry in history] == [(current, target)]
    assert history[0].changed_by == LEAGUE_ADMIN.sub
    assert history[0].note == "moving on"


@pytest.mark.asyncio
@pytest.mark.parametrize(("current", "target"), NON_EDGES)
async def test_every_non_edge_fails_and_leaves_status(
    store: FakeStore, current: MatchStatus, target: MatchStatus
) -> None:
    season = store.add_season()
    match = store.add_match(season.id, current, main_referee_id=MAIN_REFEREE_ID)

    with pytest.raises(TransitionError, match="Invalid state transition") as exc_info:
        await change_match_status(match.id, target, LEAGUE_ADMIN)

    assert exc_info.value.status_code == 400
    assert store.matches[match.id].status is current
    assert store.match_history == []


@pytest.mark.asyncio
async def test_preparing_requires_main_referee(store: FakeStore) -> None:
    match = store.add_match(store.add_season().id)

    with pytest.raises(TransitionError, match="without assigning main referee"):
        await change_match_status(match.id, MatchStatus.PREPARING, LEAGUE_ADMIN)

    assert store.matches[match.id].status is MatchStatus.SCHEDULED


@pytest.mark.asyncio
async def test_reported_requires_referee_report(store: FakeStore) -> None:
    match = store.add_match(
        store.add_season().id, MatchStatus.FINISHED, main_referee_id=MAIN_REFEREE_ID
    )

    with pytest.raises(TransitionError, match="without both referee and supervisor reports"):
        await change_match_status(match.id, MatchStatus.REPORTED, LEAGUE_ADMIN)

    assert store.matches[match.id].status is MatchStatus.FINISHED
    assert store.match_history == []

    # The referee can still file, which carries the scores into the standings
    reported = await submit_referee_report(
        match.id, RefereeReportBody(home_score=2, away_score=0), MAIN_REFEREE
    )
    assert reported.status is MatchStatus.FINISHED
    assert (reported.home_score, reported.away_score) == (2, 0)

    moved = await change_match_status(match.id, MatchStatus.REPORTED, LEAGUE_ADMIN)
    assert moved.status is MatchStatus.REPORTED


@pytest.mark.asyncio
async def test_reported_waits_for_assigned_supervisor(store: FakeStore) -> None:
    match = store.add_match(
        store.add_season().id,
        MatchStatus.FINISHED,
        main_referee_id=MAIN_REFEREE_ID,
        supervisor_id=SUPERVISOR_ID,
        referee_report_submitted=True,
    )

    with pytest.raises(TransitionError, match="without both referee and supervisor reports"):
        await change_match_status(match.id, MatchStatus.REPORTED, LEAGUE_ADMIN)

    assert store.matches[match.id].status is MatchStatus.FINISHED


@pytest.mark.asyncio
async def test_change_status_requires_manage_matches(store: FakeStore) -> None:
    match = store.add_match(store.add_season().id, MatchStatus.READY)

    with pytest.raises(AuthorizationError) as exc_info:
        await change_match_status(match.id, MatchStatus.IN_PROGRESS, ANONYMOUS_FAN)

    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_unknown_match_is_not_found(store: FakeStore) -> None:
    with pytest.raises(NotFoundError, match="Match 404 not found"):
        await change_match_status(MatchId(404), MatchStatus.READY, LEAGUE_ADMIN)


@pytest.mark.asyncio
async def test_stale_version_is_a_conflict(
    store: FakeStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    match = store.add_match(store.add_season().id, MatchStatus.READY)
    stale_read = store.get_match_by_id

    async def concurrent_winner(match_id: MatchId) -> object:
        snapshot = await stale_read(match_id)
        # Another request wins the race between our read and our write
        store.matches[match_id] = store.matches[match_id].model_copy(
            update={"status": MatchStatus.IN_PROGRESS, "version": match.version + 1}
        )
        return snapshot

    monkeypatch.setattr(match_lifecycle, "get_match_by_id", concurrent_winner)

    with pytest.raises(ConcurrentUpdateError) as exc_info:
        await change_match_status(match.id, MatchStatus.IN_PROGRESS, LEAGUE_ADMIN)

    assert exc_info.value.status_code == 409
    assert store.match_history == []


@pytest.mark.asyncio
async def test_assign_officials_without_main_referee_leaves_row_untouched(
    store: FakeStore,
) -> None:
    match = store.add_match(store.add_season().id)
    before = store.matches[match.id]

    with pytest.raises(ValidationError, match="mainRefereeId is required") as exc_info:
        await assign_officials(
            match.id, AssignOfficialsBody(supervisor_id=SUPERVISOR_ID), LEAGUE_ADMIN
        )

    assert exc_info.value.status_code == 400
    assert store.matches[match.id] == before


@pytest.mark.asyncio
async def test_assign_officials_only_when_scheduled(store: FakeStore) -> None:
    match = store.add_match(
        store.add_season().id, MatchStatus.READY, main_referee_id=MAIN_REFEREE_ID
    )

    with pytest.raises(
        TransitionError,
        match=r"Can only assign officials when match is SCHEDULED \(current: READY\)",
    ):
        await assign_officials(
            match.id, AssignOfficialsBody(main_referee_id=UserId(70)), LEAGUE_ADMIN
        )


@pytest.mark.asyncio
async def test_assign_officials_rejects_double_roles(store: FakeStore) -> None:
    match = store.add_match(store.add_season().id)

    with pytest.raises(ValidationError, match="more than one role"):
        await assign_officials(
            match.id,
            AssignOfficialsBody(main_referee_id=MAIN_REFEREE_ID, supervisor_id=MAIN_REFEREE_ID),
            LEAGUE_ADMIN,
        )

    assert store.matches[match.id].status is MatchStatus.SCHEDULED


@pytest.mark.asyncio
async def test_assign_officials_moves_to_preparing_and_notifies(store: FakeStore) -> None:
    match = store.add_match(store.add_season().id)

    updated = await assign_officials(
        match.id,
        AssignOfficialsBody(
            main_referee_id=MAIN_REFEREE_ID,
            assistant_referee_1_id=ASSISTANT_REFEREE_ID,
            supervisor_id=SUPERVISOR_ID,
        ),
        LEAGUE_ADMIN,
    )

    assert updated.status is MatchStatus.PREPARING
    assert updated.main_referee_id == MAIN_REFEREE_ID
    assert updated.officials_assigned_at is not None
    assert store.match_history[-1].note == "Officials assigned"
    assert store.notified_user_ids("match_preparing") == [MAIN_REFEREE_ID, SUPERVISOR_ID]
    assert store.database.transactions == 1


@pytest.mark.asyncio
async def test_assign_then_walk_forward_then_back_fails(store: FakeStore) -> None:
    match = store.add_match(store.add_season().id)

    await assign_officials(
        match.id, AssignOfficialsBody.model_validate({"mainRefereeId": 7}), LEAGUE_ADMIN
    )
    await change_match_status(match.id, MatchStatus.READY, LEAGUE_ADMIN)
    in_progress = await change_match_status(match.id, MatchStatus.IN_PROGRESS, LEAGUE_ADMIN)
    assert in_progress.status is MatchStatus.IN_PROGRESS

    with pytest.raises(TransitionError, match="Invalid state transition") as exc_info:
        await change_match_status(match.id, MatchStatus.SCHEDULED, LEAGUE_ADMIN)

    assert exc_info.value.status_code == 400
    assert store.matches[match.id].status is MatchStatus.IN_PROGRESS


@pytest.mark.asyncio
async def test_notification_failure_keeps_transition(store: FakeStore) -> None:
    match = store.add_match(
        store.add_season().id, MatchStatus.PREPARING, main_referee_id=MAIN_REFEREE_ID
    )
    store.fail_notifications = True

    updated = await change_match_status(match.id, MatchStatus.READY, LEAGUE_ADMIN)

    assert updated.status is MatchStatus.READY
    assert store.matches[match.id].status is MatchStatus.READY
    assert store.notifications == []


@pytest.mark.asyncio
async def test_completing_a_match_recalculates_standings(store: FakeStore) -> None:
    season = store.add_season()
    match = store.add_match(
        season.id, MatchStatus.REPORTED, home_score=2, away_score=1
    )

    await change_match_status(match.id, MatchStatus.COMPLETED, LEAGUE_ADMIN)

    table = store.standings[season.id]
    assert [row.team_id for row in table] == [match.home_team_id, match.away_team_id]
    assert table[0].points == 3
    assert table[1].points == 0
    assert sorted(store.notified_user_ids("match_completed")) == [UserId(60), UserId(61)]


@pytest.mark.asyncio
async def test_standings_failure_does_not_undo_completion(store: FakeStore) -> None:
    season = store.add_season()
    match = store.add_match(season.id, MatchStatus.REPORTED, home_score=0, away_score=0)
    store.fail_standings = True

    updated = await change_match_status(match.id, MatchStatus.COMPLETED, LEAGUE_ADMIN)

    assert updated.status is MatchStatus.COMPLETED
    assert season.id not in store.standings


@pytest.mark.asyncio
async def test_lineup_rejection_requires_reason(store: FakeStore) -> None:
    match = store.add_match(
        store.add_season().id, MatchStatus.PREPARING, main_referee_id=MAIN_REFEREE_ID
    )

    with pytest.raises(ValidationError, match="rejectionReason"):
        await update_lineup_status(match.id, "home", LineupStatus.REJECTED, LEAGUE_ADMIN)

    updated = await update_lineup_status(
        match.id, "away", LineupStatus.REJECTED, LEAGUE_ADMIN, "Goalkeeper missing"
    )
    assert updated.away_lineup_status is LineupStatus.REJECTED
    assert updated.away_lineup_rejection_reason == "Goalkeeper missing"
    assert updated.home_lineup_status is LineupStatus.PENDING
    assert updated.status is MatchStatus.PREPARING


@pytest.mark.asyncio
async def test_lineups_cannot_be_reviewed_after_kickoff(store: FakeStore) -> None:
    match = store.add_match(store.add_season().id, MatchStatus.IN_PROGRESS)

    with pytest.raises(TransitionError, match="PREPARING or READY"):
        await update_lineup_status(match.id, "home", LineupStatus.APPROVED, LEAGUE_ADMIN)


@pytest.mark.asyncio
async def test_referee_report_then_supervisor_flag_moves_to_reported(store: FakeStore) -> None:
    match = store.add_match(
        store.add_season().id,
        MatchStatus.FINISHED,
        main_referee_id=MAIN_REFEREE_ID,
        supervisor_id=SUPERVISOR_ID,
    )

    after_referee = await submit_referee_report(
        match.id, RefereeReportBody(home_score=3, away_score=2), MAIN_REFEREE
    )
    assert after_referee.status is MatchStatus.FINISHED
    assert after_referee.referee_report_submitted
    assert (after_referee.home_score, after_referee.away_score) == (3, 2)

    reported = await mark_supervisor_report_submitted(match.id)

    assert reported.status is MatchStatus.REPORTED
    assert store.match_history[-1].note == "Both reports submitted"
    assert store.match_history[-1].changed_by is None


@pytest.mark.asyncio
async def test_referee_report_rules(store: FakeStore) -> None:
    match = store.add_match(
        store.add_season().id, MatchStatus.IN_PROGRESS, main_referee_id=MAIN_REFEREE_ID
    )
    body = RefereeReportBody(home_score=1, away_score=1)

    with pytest.raises(AuthorizationError):
        await submit_referee_report(match.id, body, ANONYMOUS_FAN)

    with pytest.raises(TransitionError, match="while match is IN_PROGRESS"):
        await submit_referee_report(match.id, body, MAIN_REFEREE)

    await change_match_status(match.id, MatchStatus.FINISHED, LEAGUE_ADMIN)
    await submit_referee_report(match.id, body, MAIN_REFEREE)

    with pytest.raises(ValidationError, match="already submitted"):
        await submit_referee_report(match.id, body, MAIN_REFEREE)


@pytest.mark.asyncio
async def test_schedule_match(store: FakeStore) -> None:
    season = store.add_season()
    home = store.add_team("Harbour FC")
    away = store.add_team("Mill Town")

    with pytest.raises(ValidationError, match="against itself"):
        await schedule_match(
            season.id,
            MatchCreateBody(home_team_id=home, away_team_id=home, scheduled_kickoff=MOCK_NOW),
            LEAGUE_ADMIN,
        )

    with pytest.raises(NotFoundError):
        await schedule_match(
            SeasonId(999),
            MatchCreateBody(home_team_id=home, away_team_id=away, scheduled_kickoff=MOCK_NOW),
            LEAGUE_ADMIN,
        )

    match = await schedule_match(
        season.id,
        MatchCreateBody(home_team_id=home, away_team_id=away, scheduled_kickoff=MOCK_NOW),
        LEAGUE_ADMIN,
    )
    assert match.status is MatchStatus.SCHEDULED
    assert match.home_team_name == "Harbour FC"


@pytest.mark.asyncio
async def test_lifecycle_statistics_lists_every_status(store: FakeStore) -> None:
    season = store.add_season()
    store.add_match(season.id, MatchStatus.SCHEDULED)
    store.add_match(season.id, MatchStatus.SCHEDULED)
    store.add_match(season.id, MatchStatus.COMPLETED)

    statistics = await get_lifecycle_statistics(season.id)

    assert set(statistics) == set(MatchStatus)
    assert statistics[MatchStatus.SCHEDULED] == 2
    assert statistics[MatchStatus.COMPLETED] == 1
    assert statistics[MatchStatus.READY] == 0
