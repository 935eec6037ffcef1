from matchday.database import database
from matchday.models.db.supervisor_report import (
    ReportReviewStatus,
    SupervisorReport,
    SupervisorReportBody,
    SupervisorReportStatistics,
)
from matchday.utils.db import fetch_all_parsed, fetch_one_parsed
from matchday.utils.id_types import MatchId, SeasonId, SupervisorReportId, UserId


def _with_season(source: str) -> str:
    return f"""
        SELECT {source}.*, matches.season_id
        FROM {source}
        JOIN matches ON matches.id = {source}.match_id
        """


async def get_supervisor_report_by_id(report_id: SupervisorReportId) -> SupervisorReport | None:
    query = f"""
        {_with_season("supervisor_reports")}
        WHERE supervisor_reports.id = :report_id
        """
    return await fetch_one_parsed(database, SupervisorReport, query, {"report_id": report_id})


async def get_supervisor_report_for_match(
    match_id: MatchId, supervisor_id: UserId | None = None
) -> SupervisorReport | None:
    supervisor_filter = (
        "AND supervisor_reports.supervisor_id = :supervisor_id" if supervisor_id else ""
    )
    query = f"""
        {_with_season("supervisor_reports")}
        WHERE supervisor_reports.match_id = :match_id
        {supervisor_filter}
        ORDER BY supervisor_reports.submitted_at DESC
        LIMIT 1
        """
    values: dict[str, object] = {"match_id": match_id}
    if supervisor_id:
        values["supervisor_id"] = supervisor_id

    return await fetch_one_parsed(database, SupervisorReport, query, values)


async def get_supervisor_reports(
    season_id: SeasonId | None = None,
    *,
    supervisor_id: UserId | None = None,
    disciplinary_only: bool = False,
) -> list[SupervisorReport]:
    filters = []
    values: dict[str, object] = {}
    if season_id is not None:
        filters.append("matches.season_id = :season_id")
        values["season_id"] = season_id
    if supervisor_id is not None:
        filters.append("supervisor_reports.supervisor_id = :supervisor_id")
        values["supervisor_id"] = supervisor_id
    if disciplinary_only:
        filters.append("supervisor_reports.send_to_disciplinary = true")

    where_clause = f"WHERE {' AND '.join(filters)}" if len(filters) > 0 else ""
    query = f"""
        {_with_season("supervisor_reports")}
        {where_clause}
        ORDER BY supervisor_reports.submitted_at DESC, supervisor_reports.id DESC
        """
    return await fetch_all_parsed(database, SupervisorReport, query, values)


async def sql_create_supervisor_report(
    match_id: MatchId, supervisor_id: UserId, body: SupervisorReportBody
) -> SupervisorReport:
    query = f"""
        WITH inserted AS (
            INSERT INTO supervisor_reports (
                match_id, supervisor_id, organization_rating, home_team_rating,
                away_team_rating, stadium_condition_rating, security_rating, incident_report,
                has_serious_violation, send_to_disciplinary, recommendations
            )
            VALUES (
                :match_id, :supervisor_id, :organization_rating, :home_team_rating,
                :away_team_rating, :stadium_condition_rating, :security_rating, :incident_report,
                :has_serious_violation, :send_to_disciplinary, :recommendations
            )
            RETURNING *
        )
        {_with_season("inserted")}
        """
    result = await fetch_one_parsed(
        database,
        SupervisorReport,
        query,
        {"match_id": match_id, "supervisor_id": supervisor_id, **body.model_dump()},
    )
    if result is None:
        raise ValueError("Could not create supervisor report")

    return result


async def sql_resubmit_supervisor_report(
    report_id: SupervisorReportId, body: SupervisorReportBody
) -> SupervisorReport:
    """Overwrite a report that was sent back for changes and put it back in the review queue."""
    query = f"""
        WITH updated AS (
            UPDATE supervisor_reports
            SET organization_rating = :organization_rating,
                home_team_rating = :home_team_rating,
                away_team_rating = :away_team_rating,
                stadium_condition_rating = :stadium_condition_rating,
                security_rating = :security_rating,
                incident_report = :incident_report,
                has_serious_violation = :has_serious_violation,
                send_to_disciplinary = :send_to_disciplinary,
                recommendations = :recommendations,
                review_status = NULL,
                review_feedback = NULL,
                reviewed_by = NULL,
                reviewed_at = NULL,
                submitted_at = NOW()
            WHERE id = :report_id
            RETURNING *
        )
        {_with_season("updated")}
        """
    result = await fetch_one_parsed(
        database, SupervisorReport, query, {"report_id": report_id, **body.model_dump()}
    )
    if result is None:
        raise ValueError("Could not update supervisor report")

    return result


async def sql_review_supervisor_report(
    report_id: SupervisorReportId,
    review_status: ReportReviewStatus,
    feedback: str | None,
    reviewed_by: UserId | None,
) -> SupervisorReport | None:
    # Resubmitting clears the review, so only unreviewed reports may be updated
    query = f"""
        WITH updated AS (
            UPDATE supervisor_reports
            SET review_status = :review_status,
                review_feedback = :feedback,
                reviewed_by = :reviewed_by,
                reviewed_at = NOW()
            WHERE id = :report_id
              AND review_status IS NULL
            RETURNING *
        )
        {_with_season("updated")}
        """
    return await fetch_one_parsed(
        database,
        SupervisorReport,
        query,
        {
            "report_id": report_id,
            "review_status": review_status.value,
            "feedback": feedback,
            "reviewed_by": reviewed_by,
        },
    )


async def get_supervisor_report_statistics(season_id: SeasonId) -> SupervisorReportStatistics:
    query = """
        SELECT
            COUNT(*) AS total_reports,
            COUNT(*) FILTER (WHERE review_status IS NOT NULL) AS reviewed_reports,
            COUNT(*) FILTER (WHERE review_status IS NULL) AS pending_reports,
            COUNT(*) FILTER (WHERE send_to_disciplinary) AS disciplinary_flags,
            COUNT(*) FILTER (WHERE has_serious_violation) AS serious_violations,
            CAST(AVG(organization_rating) AS float) AS average_organization_rating
        FROM supervisor_reports
        JOIN matches ON matches.id = supervisor_reports.match_id
        WHERE matches.season_id = :season_id
        """
    result = await fetch_one_parsed(
        database, SupervisorReportStatistics, query, {"season_id": season_id}
    )
    return result if result is not None else SupervisorReportStatistics()
