"""create league lifecycle tables

Revision ID: 4e1a7c3d9b20
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ENUM

from alembic import op

# revision identifiers, used by Alembic.
revision: str | None = "4e1a7c3d9b20"
down_revision: str | None = None
branch_labels: str | None = None
depends_on: str | None = None

match_status_enum = ENUM(
    "SCHEDULED",
    "PREPARING",
    "READY",
    "IN_PROGRESS",
    "FINISHED",
    "REPORTED",
    "COMPLETED",
    name="match_status",
    create_type=False,
)
lineup_status_enum = ENUM("PENDING", "APPROVED", "REJECTED", name="lineup_status", create_type=False)
registration_status_enum = ENUM(
    "DRAFT_INVITE",
    "INVITED",
    "ACCEPTED",
    "DECLINED",
    "SUBMITTED",
    "REQUEST_CHANGE",
    "APPROVED",
    "REJECTED",
    name="registration_status",
    create_type=False,
)
report_review_status_enum = ENUM(
    "approved",
    "rejected",
    "changes_requested",
    name="report_review_status",
    create_type=False,
)

ENUMS = [match_status_enum, lineup_status_enum, registration_status_enum, report_review_status_enum]


def _id_column() -> sa.Column:
    return sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False)


def _created_column(name: str = "created") -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False)


def _index(table: str, *columns: str, unique: bool = False) -> None:
    op.create_index(op.f(f"ix_{table}_{'_'.join(columns)}"), table, list(columns), unique=unique)


def upgrade() -> None:
    for enum in ENUMS:
        enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "seasons",
        _id_column(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("required_team_count", sa.Integer(), nullable=True),
        _created_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("seasons", "id")
    _index("seasons", "name")

    op.create_table(
        "teams",
        _id_column(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("short_name", sa.String(), nullable=True),
        _created_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("teams", "id")
    _index("teams", "name")

    op.create_table(
        "team_admins",
        _id_column(),
        sa.Column("team_id", sa.BigInteger(), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("team_id", "user_id", name="team_admins_team_id_user_id_key"),
    )
    _index("team_admins", "id")
    _index("team_admins", "team_id")
    _index("team_admins", "user_id")

    op.create_table(
        "matches",
        _id_column(),
        sa.Column("season_id", sa.BigInteger(), nullable=False),
        sa.Column("home_team_id", sa.BigInteger(), nullable=False),
        sa.Column("away_team_id", sa.BigInteger(), nullable=False),
        sa.Column("scheduled_kickoff", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", match_status_enum, server_default="SCHEDULED", nullable=False),
        sa.Column("home_score", sa.Integer(), nullable=True),
        sa.Column("away_score", sa.Integer(), nullable=True),
        sa.Column("main_referee_id", sa.BigInteger(), nullable=True),
        sa.Column("assistant_referee_1_id", sa.BigInteger(), nullable=True),
        sa.Column("assistant_referee_2_id", sa.BigInteger(), nullable=True),
        sa.Column("fourth_official_id", sa.BigInteger(), nullable=True),
        sa.Column("supervisor_id", sa.BigInteger(), nullable=True),
        sa.Column("officials_assigned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("home_lineup_status", lineup_status_enum, server_default="PENDING", nullable=False),
        sa.Column("away_lineup_status", lineup_status_enum, server_default="PENDING", nullable=False),
        sa.Column("home_lineup_rejection_reason", sa.Text(), nullable=True),
        sa.Column("away_lineup_rejection_reason", sa.Text(), nullable=True),
        sa.Column("referee_report_submitted", sa.Boolean(), server_default="f", nullable=False),
        sa.Column("supervisor_report_submitted", sa.Boolean(), server_default="f", nullable=False),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        _created_column(),
        sa.Column("updated", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["season_id"], ["seasons.id"]),
        sa.ForeignKeyConstraint(["home_team_id"], ["teams.id"]),
        sa.ForeignKeyConstraint(["away_team_id"], ["teams.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("matches", "id")
    _index("matches", "season_id")
    _index("matches", "home_team_id")
    _index("matches", "away_team_id")
    _index("matches", "status")
    _index("matches", "main_referee_id")
    _index("matches", "supervisor_id")

    op.create_table(
        "match_status_history",
        _id_column(),
        sa.Column("match_id", sa.BigInteger(), nullable=False),
        sa.Column("from_status", match_status_enum, nullable=False),
        sa.Column("to_status", match_status_enum, nullable=False),
        sa.Column("changed_by", sa.BigInteger(), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        _created_column(),
        sa.ForeignKeyConstraint(["match_id"], ["matches.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("match_status_history", "id")
    _index("match_status_history", "match_id")

    op.create_table(
        "match_referee_reports",
        _id_column(),
        sa.Column("match_id", sa.BigInteger(), nullable=False),
        sa.Column("referee_id", sa.BigInteger(), nullable=False),
        sa.Column("home_score", sa.Integer(), nullable=False),
        sa.Column("away_score", sa.Integer(), nullable=False),
        sa.Column("match_summary", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("total_yellow_cards", sa.Integer(), server_default="0", nullable=False),
        sa.Column("total_red_cards", sa.Integer(), server_default="0", nullable=False),
        _created_column("submitted_at"),
        sa.ForeignKeyConstraint(["match_id"], ["matches.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("match_id", name="match_referee_reports_match_id_key"),
    )
    _index("match_referee_reports", "id")

    op.create_table(
        "season_team_registrations",
        _id_column(),
        sa.Column("season_id", sa.BigInteger(), nullable=False),
        sa.Column("team_id", sa.BigInteger(), nullable=False),
        sa.Column(
            "status", registration_status_enum, server_default="DRAFT_INVITE", nullable=False
        ),
        sa.Column("submission_data", sa.JSON(), nullable=True),
        sa.Column("reviewer_note", sa.Text(), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewed_by", sa.BigInteger(), nullable=True),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        _created_column(),
        sa.Column("updated", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["season_id"], ["seasons.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "season_id", "team_id", name="season_team_registrations_season_id_team_id_key"
        ),
    )
    _index("season_team_registrations", "id")
    _index("season_team_registrations", "season_id")
    _index("season_team_registrations", "team_id")
    _index("season_team_registrations", "status")

    op.create_table(
        "registration_status_history",
        _id_column(),
        sa.Column("registration_id", sa.BigInteger(), nullable=False),
        sa.Column("from_status", registration_status_enum, nullable=False),
        sa.Column("to_status", registration_status_enum, nullable=False),
        sa.Column("changed_by", sa.BigInteger(), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        _created_column(),
        sa.ForeignKeyConstraint(
            ["registration_id"], ["season_team_registrations.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("registration_status_history", "id")
    _index("registration_status_history", "registration_id")

    op.create_table(
        "supervisor_reports",
        _id_column(),
        sa.Column("match_id", sa.BigInteger(), nullable=False),
        sa.Column("supervisor_id", sa.BigInteger(), nullable=False),
        sa.Column("organization_rating", sa.Integer(), nullable=True),
        sa.Column("home_team_rating", sa.Integer(), nullable=True),
        sa.Column("away_team_rating", sa.Integer(), nullable=True),
        sa.Column("stadium_condition_rating", sa.Integer(), nullable=True),
        sa.Column("security_rating", sa.Integer(), nullable=True),
        sa.Column("incident_report", sa.Text(), nullable=True),
        sa.Column("has_serious_violation", sa.Boolean(), server_default="f", nullable=False),
        sa.Column("send_to_disciplinary", sa.Boolean(), server_default="f", nullable=False),
        sa.Column("recommendations", sa.Text(), nullable=True),
        sa.Column("review_status", report_review_status_enum, nullable=True),
        sa.Column("review_feedback", sa.Text(), nullable=True),
        sa.Column("reviewed_by", sa.BigInteger(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        _created_column("submitted_at"),
        sa.ForeignKeyConstraint(["match_id"], ["matches.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "match_id", "supervisor_id", name="supervisor_reports_match_id_supervisor_id_key"
        ),
    )
    _index("supervisor_reports", "id")
    _index("supervisor_reports", "match_id")
    _index("supervisor_reports", "supervisor_id")
    _index("supervisor_reports", "send_to_disciplinary")

    op.create_table(
        "season_standings",
        _id_column(),
        sa.Column("season_id", sa.BigInteger(), nullable=False),
        sa.Column("team_id", sa.BigInteger(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("played", sa.Integer(), server_default="0", nullable=False),
        sa.Column("won", sa.Integer(), server_default="0", nullable=False),
        sa.Column("drawn", sa.Integer(), server_default="0", nullable=False),
        sa.Column("lost", sa.Integer(), server_default="0", nullable=False),
        sa.Column("goals_for", sa.Integer(), server_default="0", nullable=False),
        sa.Column("goals_against", sa.Integer(), server_default="0", nullable=False),
        sa.Column("goal_difference", sa.Integer(), server_default="0", nullable=False),
        sa.Column("points", sa.Integer(), server_default="0", nullable=False),
        _created_column("updated"),
        sa.ForeignKeyConstraint(["season_id"], ["seasons.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("season_id", "team_id", name="season_standings_season_id_team_id_key"),
    )
    _index("season_standings", "id")
    _index("season_standings", "season_id")
    _index("season_standings", "team_id")

    op.create_table(
        "notifications",
        _id_column(),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("related_entity", sa.String(), nullable=True),
        sa.Column("related_id", sa.BigInteger(), nullable=True),
        sa.Column("action_url", sa.String(), nullable=True),
        sa.Column("is_read", sa.Boolean(), server_default="f", nullable=False),
        _created_column(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("notifications", "id")
    _index("notifications", "user_id")


def downgrade() -> None:
    for table in [
        "notifications",
        "season_standings",
        "supervisor_reports",
        "registration_status_history",
        "season_team_registrations",
        "match_referee_reports",
        "match_status_history",
        "matches",
        "team_admins",
        "teams",
        "seasons",
    ]:
        op.drop_table(table)

    for enum in reversed(ENUMS):
        enum.drop(op.get_bind(), checkfirst=True)
