from matchday.database import database
from matchday.models.db.season import StandingsRow, StandingsRowInsertable
from matchday.utils.db import fetch_all_parsed
from matchday.utils.id_types import SeasonId


async def get_season_standings(season_id: SeasonId) -> list[StandingsRow]:
    query = """
        SELECT season_standings.*, teams.name AS team_name
        FROM season_standings
        JOIN teams ON teams.id = season_standings.team_id
        WHERE season_standings.season_id = :season_id
        ORDER BY season_standings.position
        """
    return await fetch_all_parsed(database, StandingsRow, query, {"season_id": season_id})


async def sql_replace_season_standings(
    season_id: SeasonId, rows: list[StandingsRowInsertable]
) -> None:
    async with database.transaction():
        await database.execute(
            "DELETE FROM season_standings WHERE season_id = :season_id",
            values={"season_id": season_id},
        )
        if len(rows) < 1:
            return

        await database.execute_many(
            """
            INSERT INTO season_standings (
                season_id, team_id, position, played, won, drawn, lost,
                goals_for, goals_against, goal_difference, points
            )
            VALUES (
                :season_id, :team_id, :position, :played, :won, :drawn, :lost,
                :goals_for, :goals_against, :goal_difference, :points
            )
            """,
            values=[{"season_id": season_id, **row.model_dump()} for row in rows],
        )
