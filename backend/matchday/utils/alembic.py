import fcntl
from collections.abc import Iterator
from contextlib import contextmanager

from alembic.config import Config

from alembic import command
from matchday.utils.logging import logger

_MIGRATION_LOCK_PATH = "/tmp/matchday-alembic.lock"


@contextmanager
def _migration_lock() -> Iterator[None]:
    # Several uvicorn workers start at once, only one of them may upgrade the schema.
    with open(_MIGRATION_LOCK_PATH, "w", encoding="utf-8") as lock_file:
        fcntl.flock(lock_file, fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_file, fcntl.LOCK_UN)


def alembic_run_migrations(ini_path: str = "alembic.ini") -> None:
    with _migration_lock():
        logger.info("Upgrading league schema to the latest revision")
        command.upgrade(Config(ini_path), "head")
