from matchday.database import database
from matchday.models.db.match import (
    AssignOfficialsBody,
    LineupStatus,
    Match,
    MatchCreateBody,
    MatchDetails,
    MatchStatus,
    MatchStatusHistoryEntry,
    RefereeReport,
    RefereeReportBody,
    TeamType,
)
from matchday.models.db.season import MatchResult
from matchday.utils.db import fetch_all_parsed, fetch_one_parsed
from matchday.utils.id_types import MatchId, SeasonId, UserId

MATCH_DETAILS_COLUMNS = """
    home.name AS home_team_name,
    away.name AS away_team_name
"""


def _details_from(source: str) -> str:
    return f"""
        SELECT {source}.*, {MATCH_DETAILS_COLUMNS}
        FROM {source}
        JOIN teams home ON home.id = {source}.home_team_id
        JOIN teams away ON away.id = {source}.away_team_id
        """


async def get_match_by_id(match_id: MatchId) -> MatchDetails | None:
    query = f"""
        {_details_from("matches")}
        WHERE matches.id = :match_id
        """
    return await fetch_one_parsed(database, MatchDetails, query, {"match_id": match_id})


async def get_matches_in_season_by_status(
    season_id: SeasonId, status: MatchStatus
) -> list[MatchDetails]:
    query = f"""
        {_details_from("matches")}
        WHERE matches.season_id = :season_id
          AND matches.status = :status
        ORDER BY matches.scheduled_kickoff, matches.id
        """
    return await fetch_all_parsed(
        database, MatchDetails, query, {"season_id": season_id, "status": status.value}
    )


async def get_match_status_counts(season_id: SeasonId) -> dict[MatchStatus, int]:
    query = """
        SELECT status, COUNT(*) AS count
        FROM matches
        WHERE season_id = :season_id
        GROUP BY status
        """
    rows = await database.fetch_all(query=query, values={"season_id": season_id})
    return {MatchStatus(row._mapping["status"]): int(row._mapping["count"]) for row in rows}


async def get_completed_match_results(season_id: SeasonId) -> list[MatchResult]:
    query = """
        SELECT home_team_id, away_team_id, home_score, away_score
        FROM matches
        WHERE season_id = :season_id
          AND status = 'COMPLETED'
          AND home_score IS NOT NULL
          AND away_score IS NOT NULL
        """
    return await fetch_all_parsed(database, MatchResult, query, {"season_id": season_id})


async def sql_create_match(season_id: SeasonId, body: MatchCreateBody) -> Match:
    query = """
        INSERT INTO matches (season_id, home_team_id, away_team_id, scheduled_kickoff, status)
        VALUES (:season_id, :home_team_id, :away_team_id, :scheduled_kickoff, 'SCHEDULED')
        RETURNING *
        """
    result = await fetch_one_parsed(
        database,
        Match,
        query,
        {
            "season_id": season_id,
            "home_team_id": body.home_team_id,
            "away_team_id": body.away_team_id,
            "scheduled_kickoff": body.scheduled_kickoff,
        },
    )
    if result is None:
        raise ValueError("Could not create match")

    return result


async def sql_update_match_status(
    match: Match, status: MatchStatus
) -> MatchDetails | None:
    """
    Move the match into `status` if nobody changed it since `match` was read.

    Returns `None` when the stored version no longer equals `match.version`.
    """
    query = f"""
        WITH updated AS (
            UPDATE matches
            SET status = :status,
                version = version + 1,
                updated = NOW()
            WHERE id = :match_id
              AND version = :version
            RETURNING *
        )
        {_details_from("updated")}
        """
    return await fetch_one_parsed(
        database,
        MatchDetails,
        query,
        {"match_id": match.id, "version": match.version, "status": status.value},
    )


async def sql_update_match_officials(
    match: Match, body: AssignOfficialsBody
) -> MatchDetails | None:
    query = f"""
        WITH updated AS (
            UPDATE matches
            SET main_referee_id = :main_referee_id,
                assistant_referee_1_id = :assistant_referee_1_id,
                assistant_referee_2_id = :assistant_referee_2_id,
                fourth_official_id = :fourth_official_id,
                supervisor_id = :supervisor_id,
                officials_assigned_at = NOW(),
                version = version + 1,
                updated = NOW()
            WHERE id = :match_id
              AND version = :version
            RETURNING *
        )
        {_details_from("updated")}
        """
    return await fetch_one_parsed(
        database,
        MatchDetails,
        query,
        {
            "match_id": match.id,
            "version": match.version,
            "main_referee_id": body.main_referee_id,
            "assistant_referee_1_id": body.assistant_referee_1_id,
            "assistant_referee_2_id": body.assistant_referee_2_id,
            "fourth_official_id": body.fourth_official_id,
            "supervisor_id": body.supervisor_id,
        },
    )


async def sql_update_lineup_status(
    match: Match,
    team_type: TeamType,
    status: LineupStatus,
    rejection_reason: str | None,
) -> MatchDetails | None:
    status_column, reason_column = {
        "home": ("home_lineup_status", "home_lineup_rejection_reason"),
        "away": ("away_lineup_status", "away_lineup_rejection_reason"),
    }[team_type]
    query = f"""
        WITH updated AS (
            UPDATE matches
            SET {status_column} = :status,
                {reason_column} = :rejection_reason,
                version = version + 1,
                updated = NOW()
            WHERE id = :match_id
              AND version = :version
            RETURNING *
        )
        {_details_from("updated")}
        """
    return await fetch_one_parsed(
        database,
        MatchDetails,
        query,
        {
            "match_id": match.id,
            "version": match.version,
            "status": status.value,
            "rejection_reason": rejection_reason,
        },
    )


async def sql_set_referee_report_submitted(
    match_id: MatchId, home_score: int, away_score: int
) -> None:
    query = """
        UPDATE matches
        SET referee_report_submitted = true,
            home_score = :home_score,
            away_score = :away_score,
            version = version + 1,
            updated = NOW()
        WHERE id = :match_id
        """
    await database.execute(
        query=query,
        values={"match_id": match_id, "home_score": home_score, "away_score": away_score},
    )


async def sql_set_supervisor_report_submitted(match_id: MatchId) -> None:
    query = """
        UPDATE matches
        SET supervisor_report_submitted = true,
            version = version + 1,
            updated = NOW()
        WHERE id = :match_id
        """
    await database.execute(query=query, values={"match_id": match_id})


async def sql_insert_match_status_history(
    match_id: MatchId,
    from_status: MatchStatus,
    to_status: MatchStatus,
    changed_by: UserId | None,
    note: str | None,
) -> None:
    query = """
        INSERT INTO match_status_history (match_id, from_status, to_status, changed_by, note)
        VALUES (:match_id, :from_status, :to_status, :changed_by, :note)
        """
    await database.execute(
        query=query,
        values={
            "match_id": match_id,
            "from_status": from_status.value,
            "to_status": to_status.value,
            "changed_by": changed_by,
            "note": note,
        },
    )


async def get_match_status_history(match_id: MatchId) -> list[MatchStatusHistoryEntry]:
    query = """
        SELECT *
        FROM match_status_history
        WHERE match_id = :match_id
        ORDER BY created, id
        """
    return await fetch_all_parsed(
        database, MatchStatusHistoryEntry, query, {"match_id": match_id}
    )


async def sql_create_referee_report(
    match_id: MatchId, referee_id: UserId, body: RefereeReportBody
) -> RefereeReport:
    query = """
        INSERT INTO match_referee_reports (
            match_id, referee_id, home_score, away_score, match_summary, notes,
            total_yellow_cards, total_red_cards
        )
        VALUES (
            :match_id, :referee_id, :home_score, :away_score, :match_summary, :notes,
            :total_yellow_cards, :total_red_cards
        )
        RETURNING *
        """
    result = await fetch_one_parsed(
        database,
        RefereeReport,
        query,
        {"match_id": match_id, "referee_id": referee_id, **body.model_dump()},
    )
    if result is None:
        raise ValueError("Could not create referee report")

    return result
