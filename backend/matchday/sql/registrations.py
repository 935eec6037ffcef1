import json

from matchday.database import database
from matchday.models.db.registration import (
    Registration,
    RegistrationStatus,
    RegistrationStatusHistoryEntry,
    RegistrationStatusUpdate,
)
from matchday.utils.db import fetch_all_parsed, fetch_one_parsed
from matchday.utils.id_types import RegistrationId, SeasonId, TeamId, UserId


def _with_team_name(source: str) -> str:
    return f"""
        SELECT {source}.*, teams.name AS team_name
        FROM {source}
        JOIN teams ON teams.id = {source}.team_id
        """


async def get_registration_by_id(registration_id: RegistrationId) -> Registration | None:
    query = f"""
        {_with_team_name("season_team_registrations")}
        WHERE season_team_registrations.id = :registration_id
        """
    return await fetch_one_parsed(
        database, Registration, query, {"registration_id": registration_id}
    )


async def get_registrations_for_season(
    season_id: SeasonId, status: RegistrationStatus | None = None
) -> list[Registration]:
    status_filter = "AND season_team_registrations.status = :status" if status else ""
    query = f"""
        {_with_team_name("season_team_registrations")}
        WHERE season_team_registrations.season_id = :season_id
        {status_filter}
        ORDER BY teams.name, season_team_registrations.id
        """
    values: dict[str, object] = {"season_id": season_id}
    if status:
        values["status"] = status.value

    return await fetch_all_parsed(database, Registration, query, values)


async def get_registrations_for_team(team_id: TeamId) -> list[Registration]:
    query = f"""
        {_with_team_name("season_team_registrations")}
        WHERE season_team_registrations.team_id = :team_id
        ORDER BY season_team_registrations.season_id DESC
        """
    return await fetch_all_parsed(database, Registration, query, {"team_id": team_id})


async def sql_create_registration(
    season_id: SeasonId, team_id: TeamId, status: RegistrationStatus
) -> Registration:
    query = f"""
        WITH inserted AS (
            INSERT INTO season_team_registrations (season_id, team_id, status)
            VALUES (:season_id, :team_id, :status)
            RETURNING *
        )
        {_with_team_name("inserted")}
        """
    result = await fetch_one_parsed(
        database,
        Registration,
        query,
        {"season_id": season_id, "team_id": team_id, "status": status.value},
    )
    if result is None:
        raise ValueError("Could not create registration")

    return result


async def sql_update_registration_status(
    registration: Registration, update: RegistrationStatusUpdate
) -> Registration | None:
    """
    Apply a status change guarded by the registration's version.

    `reviewer_note` and `submission_data` are only overwritten when given. Returns `None` when
    another request changed the registration after it was read.
    """
    query = f"""
        WITH updated AS (
            UPDATE season_team_registrations
            SET status = :status,
                reviewer_note = COALESCE(CAST(:reviewer_note AS text), reviewer_note),
                submission_data = COALESCE(CAST(:submission_data AS json), submission_data),
                submitted_at = CASE
                    WHEN CAST(:mark_submitted AS boolean) THEN NOW()
                    ELSE submitted_at
                END,
                reviewed_at = CASE
                    WHEN CAST(:mark_reviewed AS boolean) THEN NOW()
                    ELSE reviewed_at
                END,
                reviewed_by = CASE
                    WHEN CAST(:mark_reviewed AS boolean) THEN CAST(:reviewed_by AS bigint)
                    ELSE reviewed_by
                END,
                version = version + 1,
                updated = NOW()
            WHERE id = :registration_id
              AND version = :version
            RETURNING *
        )
        {_with_team_name("updated")}
        """
    return await fetch_one_parsed(
        database,
        Registration,
        query,
        {
            "registration_id": registration.id,
            "version": registration.version,
            "status": update.status.value,
            "reviewer_note": update.reviewer_note,
            "submission_data": (
                json.dumps(update.submission_data)
                if update.submission_data is not None
                else None
            ),
            "mark_submitted": update.mark_submitted,
            "mark_reviewed": update.mark_reviewed,
            "reviewed_by": update.reviewed_by,
        },
    )


async def sql_insert_registration_status_history(
    registration_id: RegistrationId,
    from_status: RegistrationStatus,
    to_status: RegistrationStatus,
    changed_by: UserId | None,
    note: str | None,
) -> None:
    query = """
        INSERT INTO registration_status_history (
            registration_id, from_status, to_status, changed_by, note
        )
        VALUES (:registration_id, :from_status, :to_status, :changed_by, :note)
        """
    await database.execute(
        query=query,
        values={
            "registration_id": registration_id,
            "from_status": from_status.value,
            "to_status": to_status.value,
            "changed_by": changed_by,
            "note": note,
        },
    )


async def get_registration_status_history(
    registration_id: RegistrationId,
) -> list[RegistrationStatusHistoryEntry]:
    query = """
        SELECT *
        FROM registration_status_history
        WHERE registration_id = :registration_id
        ORDER BY created, id
        """
    return await fetch_all_parsed(
        database,
        RegistrationStatusHistoryEntry,
        query,
        {"registration_id": registration_id},
    )


async def get_registration_status_counts(season_id: SeasonId) -> dict[RegistrationStatus, int]:
    query = """
        SELECT status, COUNT(*) AS count
        FROM season_team_registrations
        WHERE season_id = :season_id
        GROUP BY status
        """
    rows = await database.fetch_all(query=query, values={"season_id": season_id})
    return {
        RegistrationStatus(row._mapping["status"]): int(row._mapping["count"]) for row in rows
    }


async def count_approved_registrations(season_id: SeasonId) -> int:
    query = """
        SELECT COUNT(*)
        FROM season_team_registrations
        WHERE season_id = :season_id
          AND status = 'APPROVED'
        """
    result = await database.fetch_val(query=query, values={"season_id": season_id})
    return int(result or 0)
