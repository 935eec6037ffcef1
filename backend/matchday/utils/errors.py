from collections.abc import Iterator
from contextlib import contextmanager
from enum import auto

from asyncpg.exceptions import UniqueViolationError
from starlette import status

from matchday.utils.types import EnumAutoStr


class LifecycleError(Exception):
    """
    Base class of every error a lifecycle service raises on purpose.

    The app-level exception handler turns these into `{"detail": message}` with the status code
    of the concrete class, anything that is not a `LifecycleError` becomes a 500.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LifecycleError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(LifecycleError):
    status_code = status.HTTP_404_NOT_FOUND


class AuthorizationError(LifecycleError):
    status_code = status.HTTP_403_FORBIDDEN


class TransitionError(LifecycleError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConcurrentUpdateError(LifecycleError):
    status_code = status.HTTP_409_CONFLICT


class UniqueIndex(EnumAutoStr):
    season_team_registrations_season_id_team_id_key = auto()
    supervisor_reports_match_id_supervisor_id_key = auto()
    match_referee_reports_match_id_key = auto()


unique_violation_error_lookup = {
    UniqueIndex.season_team_registrations_season_id_team_id_key: (
        "This team already has a registration for this season"
    ),
    UniqueIndex.supervisor_reports_match_id_supervisor_id_key: (
        "A supervisor report was already submitted for this match"
    ),
    UniqueIndex.match_referee_reports_match_id_key: (
        "A referee report was already submitted for this match"
    ),
}


@contextmanager
def check_unique_violation(expected_violations: set[UniqueIndex]) -> Iterator[None]:
    try:
        yield
    except UniqueViolationError as exc:
        constraint_name = exc.as_dict()["constraint_name"]
        assert constraint_name is not None
        index = UniqueIndex(constraint_name)
        if index in expected_violations:
            raise ValidationError(unique_violation_error_lookup[index]) from exc

        raise
