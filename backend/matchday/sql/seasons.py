from matchday.database import database
from matchday.models.db.season import Season
from matchday.utils.db import fetch_one_parsed
from matchday.utils.id_types import SeasonId


async def get_season_by_id(season_id: SeasonId) -> Season | None:
    query = """
        SELECT *
        FROM seasons
        WHERE id = :season_id
        """
    return await fetch_one_parsed(database, Season, query, {"season_id": season_id})
