from typing import Generic, TypeVar

from pydantic import BaseModel

from matchday.models.db.match import MatchDetails, MatchStatus, MatchStatusHistoryEntry
from matchday.models.db.notification import Notification
from matchday.models.db.registration import (
    Registration,
    RegistrationStatus,
    RegistrationStatusHistoryEntry,
)
from matchday.models.db.season import StandingsRow
from matchday.models.db.shared import CamelModel
from matchday.models.db.supervisor_report import SupervisorReport, SupervisorReportStatistics


DataT = TypeVar("DataT")


class DataResponse(BaseModel, Generic[DataT]):
    data: DataT


class MatchDetailsResponse(DataResponse[MatchDetails]):
    pass


class MatchesResponse(DataResponse[list[MatchDetails]]):
    pass


class MatchHistoryResponse(DataResponse[list[MatchStatusHistoryEntry]]):
    pass


class MatchLifecycleStatisticsResponse(DataResponse[dict[MatchStatus, int]]):
    pass


class StandingsResponse(DataResponse[list[StandingsRow]]):
    pass


class RegistrationResponse(DataResponse[Registration]):
    pass


class RegistrationsResponse(DataResponse[list[Registration]]):
    pass


class RegistrationHistoryResponse(DataResponse[list[RegistrationStatusHistoryEntry]]):
    pass


class InvitationAcceptedResponse(CamelModel):
    data: Registration
    already_accepted: bool


class InvitationDeclinedResponse(CamelModel):
    data: Registration
    already_declined: bool


class RegistrationApprovedResponse(CamelModel):
    data: Registration
    scheduling_ready: bool
    approved_count: int
    required_count: int


class RegistrationStatisticsView(CamelModel):
    status_counts: dict[RegistrationStatus, int]
    scheduling_ready: bool
    approved_count: int
    required_count: int


class RegistrationStatisticsResponse(DataResponse[RegistrationStatisticsView]):
    pass


class InvitationBatchView(CamelModel):
    sent: int
    failed: int


class InvitationBatchResponse(DataResponse[InvitationBatchView]):
    pass


class SupervisorReportResponse(DataResponse[SupervisorReport]):
    pass


class SupervisorReportsResponse(DataResponse[list[SupervisorReport]]):
    pass


class SupervisorReportStatisticsResponse(DataResponse[SupervisorReportStatistics]):
    pass


class NotificationsResponse(DataResponse[list[Notification]]):
    pass
