from enum import auto
from typing import Literal

from heliclockter import datetime_utc
from pydantic import Field

from matchday.models.db.shared import BaseModelORM, CamelModel
from matchday.utils.id_types import (
    MatchId,
    RefereeReportId,
    SeasonId,
    StatusHistoryId,
    TeamId,
    UserId,
)
from matchday.utils.types import EnumAutoStr


class MatchStatus(EnumAutoStr):
    SCHEDULED = auto()
    PREPARING = auto()
    READY = auto()
    IN_PROGRESS = auto()
    FINISHED = auto()
    REPORTED = auto()
    COMPLETED = auto()


class LineupStatus(EnumAutoStr):
    PENDING = auto()
    APPROVED = auto()
    REJECTED = auto()


TeamType = Literal["home", "away"]


class Match(BaseModelORM):
    id: MatchId
    season_id: SeasonId
    home_team_id: TeamId
    away_team_id: TeamId
    scheduled_kickoff: datetime_utc
    status: MatchStatus
    home_score: int | None = None
    away_score: int | None = None
    main_referee_id: UserId | None = None
    assistant_referee_1_id: UserId | None = None
    assistant_referee_2_id: UserId | None = None
    fourth_official_id: UserId | None = None
    supervisor_id: UserId | None = None
    officials_assigned_at: datetime_utc | None = None
    home_lineup_status: LineupStatus = LineupStatus.PENDING
    away_lineup_status: LineupStatus = LineupStatus.PENDING
    home_lineup_rejection_reason: str | None = None
    away_lineup_rejection_reason: str | None = None
    referee_report_submitted: bool = False
    supervisor_report_submitted: bool = False
    version: int = 1
    created: datetime_utc
    updated: datetime_utc | None = None

    @property
    def has_officials(self) -> bool:
        return self.main_referee_id is not None

    @property
    def reports_complete(self) -> bool:
        """The supervisor report only counts when a supervisor is assigned."""
        return self.referee_report_submitted and (
            self.supervisor_id is None or self.supervisor_report_submitted
        )

    @property
    def team_ids(self) -> list[TeamId]:
        return [self.home_team_id, self.away_team_id]


class MatchDetails(Match):
    home_team_name: str
    away_team_name: str


class MatchCreateBody(CamelModel):
    home_team_id: TeamId
    away_team_id: TeamId
    scheduled_kickoff: datetime_utc


class MatchChangeStatusBody(CamelModel):
    status: MatchStatus
    note: str | None = None


class AssignOfficialsBody(CamelModel):
    # Optional here so a missing referee is reported as a 400 by the service, not a 422.
    main_referee_id: UserId | None = None
    assistant_referee_1_id: UserId | None = None
    assistant_referee_2_id: UserId | None = None
    fourth_official_id: UserId | None = None
    supervisor_id: UserId | None = None

    def assigned_official_ids(self) -> list[UserId]:
        return [
            official_id
            for official_id in [
                self.main_referee_id,
                self.assistant_referee_1_id,
                self.assistant_referee_2_id,
                self.fourth_official_id,
                self.supervisor_id,
            ]
            if official_id is not None
        ]


class LineupStatusBody(CamelModel):
    team_type: TeamType
    status: LineupStatus
    rejection_reason: str | None = None


class MatchStatusHistoryEntry(BaseModelORM):
    id: StatusHistoryId
    match_id: MatchId
    from_status: MatchStatus
    to_status: MatchStatus
    changed_by: UserId | None = None
    note: str | None = None
    created: datetime_utc


class RefereeReportBody(CamelModel):
    home_score: int = Field(ge=0)
    away_score: int = Field(ge=0)
    match_summary: str | None = None
    notes: str | None = None
    total_yellow_cards: int = Field(default=0, ge=0)
    total_red_cards: int = Field(default=0, ge=0)


class RefereeReport(BaseModelORM):
    id: RefereeReportId
    match_id: MatchId
    referee_id: UserId
    home_score: int
    away_score: int
    match_summary: str | None = None
    notes: str | None = None
    total_yellow_cards: int = 0
    total_red_cards: int = 0
    submitted_at: datetime_utc
