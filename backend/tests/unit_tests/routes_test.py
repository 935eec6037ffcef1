import json

import jwt
import pytest
from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.security import HTTPAuthorizationCredentials
from starlette.requests import Request

from matchday import app as app_module
from matchday.models.db.match import MatchStatus
from matchday.models.db.registration import RegistrationNoteBody, RegistrationStatus
from matchday.routes import auth as auth_routes
from matchday.routes import matches as match_routes
from matchday.routes import notifications as notification_routes
from matchday.routes import registrations as registration_routes
from matchday.utils.errors import ConcurrentUpdateError, NotFoundError
from tests.unit_tests.fakes import FakeStore
from tests.unit_tests.mocks import COMPLETE_SUBMISSION, LEAGUE_ADMIN, team_admin_of

JWT_SECRET = "a-test-secret-that-is-long-enough-for-hs256"


def _request() -> Request:
    return Request(
        {
            "type": "http",
            "method": "POST",
            "scheme": "http",
            "server": ("testserver", 80),
            "path": "/matches/1/change-status",
            "query_string": b"",
            "headers": [],
        }
    )


@pytest.mark.asyncio
async def test_accept_route_reports_repeated_answers(store: FakeStore) -> None:
    season = store.add_season()
    team_id = store.add_team("Harbour FC", [50])
    registration = store.add_registration(season.id, team_id, RegistrationStatus.INVITED)
    team_admin = team_admin_of(team_id)

    first = await registration_routes.accept(registration.id, None, auth=team_admin)
    second = await registration_routes.accept(
        registration.id, RegistrationNoteBody(note="See you in August"), auth=team_admin
    )

    assert first.model_dump(by_alias=True)["alreadyAccepted"] is False
    dumped = second.model_dump(by_alias=True)
    assert dumped["alreadyAccepted"] is True
    assert dumped["data"]["status"] == RegistrationStatus.ACCEPTED


@pytest.mark.asyncio
async def test_approve_route_includes_scheduling_readiness(store: FakeStore) -> None:
    season = store.add_season(required_team_count=1)
    registration = store.add_registration(
        season.id,
        store.add_team("Harbour FC"),
        RegistrationStatus.SUBMITTED,
        submission_data=COMPLETE_SUBMISSION,
    )

    response = await registration_routes.approve(registration.id, None, auth=LEAGUE_ADMIN)

    dumped = response.model_dump(by_alias=True)
    assert dumped["data"]["status"] == RegistrationStatus.APPROVED
    assert dumped["schedulingReady"] is True
    assert (dumped["approvedCount"], dumped["requiredCount"]) == (1, 1)


@pytest.mark.asyncio
async def test_registration_statistics_route(store: FakeStore) -> None:
    season = store.add_season(required_team_count=4)
    store.add_registration(season.id, store.add_team("Harbour FC"), RegistrationStatus.APPROVED)

    response = await registration_routes.registration_statistics(season.id, LEAGUE_ADMIN)

    view = response.data.model_dump(by_alias=True)
    assert view["schedulingReady"] is False
    assert view["approvedCount"] == 1
    assert view["statusCounts"][RegistrationStatus.APPROVED] == 1
    assert view["statusCounts"][RegistrationStatus.REJECTED] == 0


@pytest.mark.asyncio
async def test_match_routes(store: FakeStore) -> None:
    season = store.add_season()
    match = store.add_match(season.id, MatchStatus.READY)

    statistics = await match_routes.lifecycle_statistics(season.id, LEAGUE_ADMIN)
    assert statistics.data[MatchStatus.READY] == 1
    assert statistics.data[MatchStatus.COMPLETED] == 0

    ready = await match_routes.matches_by_status(season.id, MatchStatus.READY, LEAGUE_ADMIN)
    assert [item.id for item in ready.data] == [match.id]

    standings = await match_routes.season_standings(season.id, LEAGUE_ADMIN)
    assert standings.data == []


@pytest.mark.asyncio
async def test_notifications_route_returns_own_notifications(store: FakeStore) -> None:
    season = store.add_season()
    team_id = store.add_team("Harbour FC", [50])
    registration = store.add_registration(season.id, team_id, RegistrationStatus.INVITED)
    await registration_routes.accept(registration.id, None, auth=team_admin_of(team_id))

    mine = await notification_routes.my_notifications(False, auth=team_admin_of(team_id))
    theirs = await notification_routes.my_notifications(False, auth=LEAGUE_ADMIN)

    assert [item.type for item in mine.data] == ["registration_accepted"]
    assert theirs.data == []


@pytest.mark.asyncio
async def test_lifecycle_errors_keep_their_status_code() -> None:
    not_found = await app_module.lifecycle_error_handler(
        _request(), NotFoundError("Match 1 not found")
    )
    conflict = await app_module.lifecycle_error_handler(
        _request(), ConcurrentUpdateError("Match 1 was changed by another request")
    )

    assert not_found.status_code == 404
    assert json.loads(not_found.body) == {"detail": "Match 1 not found"}
    assert conflict.status_code == 409


@pytest.mark.asyncio
async def test_request_validation_errors_are_bad_requests() -> None:
    exc = RequestValidationError(
        [{"type": "missing", "loc": ("body", "status"), "msg": "Field required"}]
    )

    response = await app_module.request_validation_error_handler(_request(), exc)

    assert response.status_code == 400
    assert json.loads(response.body)["detail"][0]["loc"] == ["body", "status"]


@pytest.mark.asyncio
async def test_unexpected_errors_are_hidden() -> None:
    response = await app_module.unhandled_error_handler(_request(), RuntimeError("db exploded"))

    assert response.status_code == 500
    assert json.loads(response.body) == {"detail": "Internal server error"}


def test_decode_auth_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(auth_routes.config, "jwt_secret", JWT_SECRET)
    token = jwt.encode(
        {"sub": "50", "permissions": ["manage_seasons"], "teamIds": [5]},
        JWT_SECRET,
        algorithm="HS256",
    )

    auth = auth_routes.decode_auth_token(token)

    assert auth.sub == 50
    assert auth.has_permission("manage_seasons")
    assert auth.manages_team(5)


def test_decode_auth_token_rejects_bad_tokens(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(auth_routes.config, "jwt_secret", JWT_SECRET)
    forged = jwt.encode({"sub": "50"}, "some-other-secret-of-sufficient-length", algorithm="HS256")
    anonymous = jwt.encode({"permissions": []}, JWT_SECRET, algorithm="HS256")

    for token, detail in [
        (forged, "Authentication token is invalid or expired"),
        (anonymous, "Authentication token is invalid"),
    ]:
        with pytest.raises(HTTPException) as exc_info:
            auth_routes.decode_auth_token(token)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == detail


@pytest.mark.asyncio
async def test_auth_context_requires_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(auth_routes.config, "jwt_secret", JWT_SECRET)

    with pytest.raises(HTTPException, match="Authentication token is missing"):
        await auth_routes.auth_context(None)

    credentials = HTTPAuthorizationCredentials(
        scheme="Bearer", credentials=jwt.encode({"sub": "1"}, JWT_SECRET, algorithm="HS256")
    )
    assert (await auth_routes.auth_context(credentials)).sub == 1
