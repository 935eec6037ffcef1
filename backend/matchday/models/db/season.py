import datetime

from heliclockter import datetime_utc

from matchday.models.db.shared import BaseModelORM
from matchday.utils.id_types import SeasonId, StandingsRowId, TeamId


class Season(BaseModelORM):
    id: SeasonId
    name: str
    start_date: datetime.date | None = None
    end_date: datetime.date | None = None
    required_team_count: int | None = None
    created: datetime_utc


class MatchResult(BaseModelORM):
    home_team_id: TeamId
    away_team_id: TeamId
    home_score: int
    away_score: int


class StandingsRowInsertable(BaseModelORM):
    team_id: TeamId
    position: int
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0


class StandingsRow(StandingsRowInsertable):
    id: StandingsRowId
    season_id: SeasonId
    team_name: str | None = None
    updated: datetime_utc
