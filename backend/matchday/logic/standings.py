from collections.abc import Iterable

from pydantic import BaseModel

from matchday.models.db.registration import RegistrationStatus
from matchday.models.db.season import MatchResult, StandingsRowInsertable
from matchday.sql.matches import get_completed_match_results
from matchday.sql.registrations import get_registrations_for_season
from matchday.sql.standings import sql_replace_season_standings
from matchday.utils.id_types import SeasonId, TeamId
from matchday.utils.logging import logger

POINTS_FOR_WIN = 3
POINTS_FOR_DRAW = 1


class TeamRecord(BaseModel):
    team_id: TeamId
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against

    @property
    def points(self) -> int:
        return self.won * POINTS_FOR_WIN + self.drawn * POINTS_FOR_DRAW

    def add_result(self, scored: int, conceded: int) -> None:
        self.played += 1
        self.goals_for += scored
        self.goals_against += conceded
        if scored > conceded:
            self.won += 1
        elif scored == conceded:
            self.drawn += 1
        else:
            self.lost += 1


def calculate_standings(
    results: Iterable[MatchResult], team_ids: Iterable[TeamId] = ()
) -> list[StandingsRowInsertable]:
    """
    Build the league table from completed match results.

    Teams in `team_ids` are listed even when they have not played yet. Ordering is points, goal
    difference, goals scored and finally team id so the table is deterministic.
    """
    records: dict[TeamId, TeamRecord] = {
        team_id: TeamRecord(team_id=team_id) for team_id in team_ids
    }

    for result in results:
        home = records.setdefault(result.home_team_id, TeamRecord(team_id=result.home_team_id))
        away = records.setdefault(result.away_team_id, TeamRecord(team_id=result.away_team_id))
        home.add_result(result.home_score, result.away_score)
        away.add_result(result.away_score, result.home_score)

    ranked = sorted(
        records.values(),
        key=lambda record: (
            -record.points,
            -record.goal_difference,
            -record.goals_for,
            record.team_id,
        ),
    )
    return [
        StandingsRowInsertable(
            team_id=record.team_id,
            position=position,
            played=record.played,
            won=record.won,
            drawn=record.drawn,
            lost=record.lost,
            goals_for=record.goals_for,
            goals_against=record.goals_against,
            goal_difference=record.goal_difference,
            points=record.points,
        )
        for position, record in enumerate(ranked, start=1)
    ]


async def recalculate_season_standings(season_id: SeasonId) -> list[StandingsRowInsertable]:
    approved = await get_registrations_for_season(season_id, RegistrationStatus.APPROVED)
    rows = calculate_standings(
        await get_completed_match_results(season_id),
        [registration.team_id for registration in approved],
    )
    await sql_replace_season_standings(season_id, rows)
    logger.info(f"Recalculated standings of season {season_id} ({len(rows)} teams)")
    return rows
