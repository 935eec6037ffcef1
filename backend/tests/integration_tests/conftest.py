from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from matchday.config import config
from matchday.database import database
from matchday.schema import metadata


@pytest_asyncio.fixture(loop_scope="session", scope="session", autouse=True)
async def reinit_database() -> AsyncIterator[None]:
    try:
        await database.connect()
    except OSError as exc:
        pytest.skip(f"Postgres is not reachable: {exc}")

    engine = create_async_engine(
        str(config.pg_dsn).replace("postgresql://", "postgresql+asyncpg://", 1)
    )
    async with engine.begin() as connection:
        await connection.run_sync(metadata.drop_all)
        await connection.run_sync(metadata.create_all)
    await engine.dispose()

    yield
    await database.disconnect()
