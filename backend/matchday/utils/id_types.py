from typing import NewType

SeasonId = NewType("SeasonId", int)
TeamId = NewType("TeamId", int)
MatchId = NewType("MatchId", int)
RegistrationId = NewType("RegistrationId", int)
SupervisorReportId = NewType("SupervisorReportId", int)
RefereeReportId = NewType("RefereeReportId", int)
NotificationId = NewType("NotificationId", int)
StatusHistoryId = NewType("StatusHistoryId", int)
StandingsRowId = NewType("StandingsRowId", int)
UserId = NewType("UserId", int)
