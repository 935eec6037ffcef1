import json
from enum import auto
from typing import Any

from heliclockter import datetime_utc
from pydantic import field_validator

from matchday.models.db.shared import BaseModelORM, CamelModel
from matchday.utils.id_types import (
    RegistrationId,
    SeasonId,
    StatusHistoryId,
    TeamId,
    UserId,
)
from matchday.utils.types import EnumAutoStr


class RegistrationStatus(EnumAutoStr):
    DRAFT_INVITE = auto()
    INVITED = auto()
    ACCEPTED = auto()
    DECLINED = auto()
    SUBMITTED = auto()
    REQUEST_CHANGE = auto()
    APPROVED = auto()
    REJECTED = auto()


REVIEW_STATUSES = frozenset(
    {
        RegistrationStatus.REQUEST_CHANGE,
        RegistrationStatus.APPROVED,
        RegistrationStatus.REJECTED,
    }
)


def submission_is_complete(submission_data: dict[str, Any] | None) -> bool:
    """A submission must at least describe the home stadium and the kits."""
    if not submission_data:
        return False
    return bool(submission_data.get("stadium")) and bool(submission_data.get("kits"))


class Registration(BaseModelORM):
    id: RegistrationId
    season_id: SeasonId
    team_id: TeamId
    team_name: str | None = None
    status: RegistrationStatus
    submission_data: dict[str, Any] | None = None
    reviewer_note: str | None = None
    submitted_at: datetime_utc | None = None
    reviewed_at: datetime_utc | None = None
    reviewed_by: UserId | None = None
    version: int = 1
    created: datetime_utc
    updated: datetime_utc | None = None

    @field_validator("submission_data", mode="before")
    @classmethod
    def parse_submission_data(cls, value: object) -> object:
        # asyncpg hands JSON columns back as text
        if isinstance(value, str):
            return json.loads(value)
        return value


class RegistrationStatusUpdate(BaseModelORM):
    status: RegistrationStatus
    reviewer_note: str | None = None
    submission_data: dict[str, Any] | None = None
    mark_submitted: bool = False
    mark_reviewed: bool = False
    reviewed_by: UserId | None = None


class RegistrationStatusHistoryEntry(BaseModelORM):
    id: StatusHistoryId
    registration_id: RegistrationId
    from_status: RegistrationStatus
    to_status: RegistrationStatus
    changed_by: UserId | None = None
    note: str | None = None
    created: datetime_utc


class SchedulingReadiness(BaseModelORM):
    ready: bool
    approved_count: int
    required_count: int


class RegistrationCreateBody(CamelModel):
    team_id: TeamId
    status: RegistrationStatus = RegistrationStatus.DRAFT_INVITE


class RegistrationChangeStatusBody(CamelModel):
    status: RegistrationStatus
    note: str | None = None
    submission_data: dict[str, Any] | None = None


class RegistrationNoteBody(CamelModel):
    note: str | None = None


class RegistrationSubmitBody(CamelModel):
    submission_data: dict[str, Any] | None = None
