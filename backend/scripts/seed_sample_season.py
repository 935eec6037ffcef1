#!/usr/bin/env python3
import argparse
import asyncio
import random

from heliclockter import datetime_utc, timedelta

from matchday.database import database
from matchday.logic.lifecycle.matches import (
    assign_officials,
    change_match_status,
    schedule_match,
    submit_referee_report,
)
from matchday.logic.lifecycle.registrations import (
    accept_invitation,
    approve_registration,
    batch_send_invitations,
    create_registration,
    decline_invitation,
    submit_registration,
)
from matchday.logic.lifecycle.supervisor_reports import create_supervisor_report
from matchday.models.auth import OFFICIAL_ROLE, AuthContext
from matchday.models.db.match import (
    AssignOfficialsBody,
    MatchCreateBody,
    MatchStatus,
    RefereeReportBody,
)
from matchday.models.db.registration import Registration
from matchday.models.db.supervisor_report import SupervisorReportBody
from matchday.schema import seasons, team_admins, teams
from matchday.utils.id_types import MatchId, SeasonId, TeamId, UserId

TEAM_NAMES = [
    "Harbour FC",
    "Mill Town",
    "Quay Rovers",
    "Northgate Athletic",
    "Riverside United",
    "Old Foundry",
    "Lakeside Wanderers",
    "St. Brides",
    "Copper Hill",
    "Westmoor Town",
    "Canal Street",
    "Ashby Vale",
]

# Officials and team admins live in the identity provider, these are just their ids.
MAIN_REFEREE_ID = UserId(900)
ASSISTANT_REFEREE_ID = UserId(901)
SUPERVISOR_ID = UserId(902)
FIRST_TEAM_ADMIN_ID = 1000


async def create_season(name: str, required_team_count: int) -> SeasonId:
    today = datetime_utc.now().date()
    season_id = await database.execute(
        query=seasons.insert(),
        values={
            "name": name,
            "start_date": today,
            "end_date": today + timedelta(days=180),
            "required_team_count": required_team_count,
            "created": datetime_utc.now(),
        },
    )
    return SeasonId(int(season_id))


async def create_teams(team_count: int) -> list[TeamId]:
    team_ids: list[TeamId] = []
    for index, name in enumerate(TEAM_NAMES[:team_count]):
        team_id = await database.execute(
            query=teams.insert(),
            values={
                "name": name,
                "short_name": name[:3].upper(),
                "created": datetime_utc.now(),
            },
        )
        await database.execute(
            query=team_admins.insert(),
            values={"team_id": int(team_id), "user_id": FIRST_TEAM_ADMIN_ID + index},
        )
        team_ids.append(TeamId(int(team_id)))

    return team_ids


def team_admin(team_id: TeamId, index: int) -> AuthContext:
    return AuthContext(sub=UserId(FIRST_TEAM_ADMIN_ID + index), team_ids=[team_id])


async def walk_registrations(
    season_id: SeasonId, team_ids: list[TeamId], staff: AuthContext
) -> list[TeamId]:
    """Invite every team and move each registration to a different point of its lifecycle."""
    registrations: list[Registration] = [
        await create_registration(season_id, team_id, staff) for team_id in team_ids
    ]
    result = await batch_send_invitations(season_id, staff)
    print(f"Invitations sent: {result.sent}, failed: {result.failed}")

    approved: list[TeamId] = []
    for index, registration in enumerate(registrations):
        admin = team_admin(registration.team_id, index)
        if index == len(registrations) - 1:
            await decline_invitation(registration.id, admin, note="Not enough players this year")
            continue

        await accept_invitation(registration.id, admin)
        if index == len(registrations) - 2:
            continue

        await submit_registration(
            registration.id,
            {
                "stadium": f"{TEAM_NAMES[index]} Ground",
                "kits": {"home": "red", "away": "white"},
            },
            admin,
        )
        outcome = await approve_registration(registration.id, staff)
        approved.append(registration.team_id)
        if outcome.readiness.ready:
            print(f"Season {season_id} is ready for scheduling")

    return approved


async def play_match(match_id: MatchId, staff: AuthContext) -> None:
    match = await assign_officials(
        match_id,
        AssignOfficialsBody(
            main_referee_id=MAIN_REFEREE_ID,
            assistant_referee_1_id=ASSISTANT_REFEREE_ID,
            supervisor_id=SUPERVISOR_ID,
        ),
        staff,
    )
    for status in [MatchStatus.READY, MatchStatus.IN_PROGRESS, MatchStatus.FINISHED]:
        match = await change_match_status(match.id, status, staff)

    await submit_referee_report(
        match.id,
        RefereeReportBody(
            home_score=random.randint(0, 4),
            away_score=random.randint(0, 4),
            total_yellow_cards=random.randint(0, 6),
        ),
        AuthContext(sub=MAIN_REFEREE_ID, permissions=[OFFICIAL_ROLE]),
    )
    await create_supervisor_report(
        match.id,
        SupervisorReportBody(organization_rating=random.randint(5, 10)),
        AuthContext(sub=SUPERVISOR_ID, permissions=[OFFICIAL_ROLE]),
    )
    await change_match_status(match.id, MatchStatus.COMPLETED, staff)


async def seed_season(season_name: str, team_count: int, played_matches: int) -> None:
    staff = AuthContext.system()
    required_team_count = max(team_count - 2, 2)
    season_id = await create_season(season_name, required_team_count)
    team_ids = await create_teams(team_count)
    print(f"Created season {season_id} with {len(team_ids)} teams")

    approved = await walk_registrations(season_id, team_ids, staff)
    print(f"Approved teams: {approved}")

    kickoff = datetime_utc.now() + timedelta(days=7)
    fixtures = [(home, away) for home in approved for away in approved if home != away]
    for index, (home_team_id, away_team_id) in enumerate(fixtures):
        match = await schedule_match(
            season_id,
            MatchCreateBody(
                home_team_id=home_team_id,
                away_team_id=away_team_id,
                scheduled_kickoff=kickoff + timedelta(days=7 * (index // 2)),
            ),
            staff,
        )
        if index < played_matches:
            await play_match(match.id, staff)

    print(f"Scheduled {len(fixtures)} matches, {min(played_matches, len(fixtures))} completed")


async def async_main() -> None:
    parser = argparse.ArgumentParser(
        description=(
            "Seed a sample season: teams with admins, registrations in every state "
            "and a few matches played all the way to COMPLETED."
        )
    )
    parser.add_argument("--season-name", type=str, default="Sample season")
    parser.add_argument("--teams", type=int, default=6)
    parser.add_argument("--played-matches", type=int, default=4)
    args = parser.parse_args()

    if not 4 <= args.teams <= len(TEAM_NAMES):
        raise ValueError(f"--teams must be between 4 and {len(TEAM_NAMES)}")

    await database.connect()
    try:
        await seed_season(args.season_name, int(args.teams), int(args.played_matches))
    finally:
        await database.disconnect()


if __name__ == "__main__":
    asyncio.run(async_main())
