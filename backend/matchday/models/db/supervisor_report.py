from enum import auto
from typing import Annotated

from heliclockter import datetime_utc
from pydantic import Field

from matchday.models.db.shared import BaseModelORM, CamelModel
from matchday.utils.id_types import MatchId, SeasonId, SupervisorReportId, UserId
from matchday.utils.types import EnumAutoStr


class ReportReviewAction(EnumAutoStr):
    approve = auto()
    rejected = auto()
    request_changes = auto()

    def to_review_status(self) -> "ReportReviewStatus":
        return {
            ReportReviewAction.approve: ReportReviewStatus.approved,
            ReportReviewAction.rejected: ReportReviewStatus.rejected,
            ReportReviewAction.request_changes: ReportReviewStatus.changes_requested,
        }[self]


class ReportReviewStatus(EnumAutoStr):
    approved = auto()
    rejected = auto()
    changes_requested = auto()

    @property
    def is_final(self) -> bool:
        return self is not ReportReviewStatus.changes_requested


Rating = Annotated[int | None, Field(ge=1, le=10)]


class SupervisorReportBody(CamelModel):
    organization_rating: Rating = None
    home_team_rating: Rating = None
    away_team_rating: Rating = None
    stadium_condition_rating: Rating = None
    security_rating: Rating = None
    incident_report: str | None = None
    has_serious_violation: bool = False
    send_to_disciplinary: bool = False
    recommendations: str | None = None


class SupervisorReport(BaseModelORM):
    id: SupervisorReportId
    match_id: MatchId
    season_id: SeasonId | None = None
    supervisor_id: UserId
    organization_rating: int | None = None
    home_team_rating: int | None = None
    away_team_rating: int | None = None
    stadium_condition_rating: int | None = None
    security_rating: int | None = None
    incident_report: str | None = None
    has_serious_violation: bool = False
    send_to_disciplinary: bool = False
    recommendations: str | None = None
    review_status: ReportReviewStatus | None = None
    review_feedback: str | None = None
    reviewed_by: UserId | None = None
    reviewed_at: datetime_utc | None = None
    submitted_at: datetime_utc


class SupervisorReportReviewBody(CamelModel):
    action: ReportReviewAction = ReportReviewAction.approve
    feedback: str | None = None


class SupervisorReportStatistics(CamelModel):
    total_reports: int = 0
    reviewed_reports: int = 0
    pending_reports: int = 0
    disciplinary_flags: int = 0
    serious_violations: int = 0
    average_organization_rating: float | None = None
