from sqlalchemy import Column, ForeignKey, Integer, String, Table, UniqueConstraint, func
from sqlalchemy.orm import declarative_base  # type: ignore[attr-defined]
from sqlalchemy.sql.sqltypes import JSON, BigInteger, Boolean, Date, DateTime, Enum, Text

Base = declarative_base()
metadata = Base.metadata
DateTimeTZ = DateTime(timezone=True)

match_status = Enum(
    "SCHEDULED",
    "PREPARING",
    "READY",
    "IN_PROGRESS",
    "FINISHED",
    "REPORTED",
    "COMPLETED",
    name="match_status",
)

lineup_status = Enum(
    "PENDING",
    "APPROVED",
    "REJECTED",
    name="lineup_status",
)

registration_status = Enum(
    "DRAFT_INVITE",
    "INVITED",
    "ACCEPTED",
    "DECLINED",
    "SUBMITTED",
    "REQUEST_CHANGE",
    "APPROVED",
    "REJECTED",
    name="registration_status",
)

report_review_status = Enum(
    "approved",
    "rejected",
    "changes_requested",
    name="report_review_status",
)

seasons = Table(
    "seasons",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("name", String, nullable=False, index=True),
    Column("start_date", Date, nullable=True),
    Column("end_date", Date, nullable=True),
    Column("required_team_count", Integer, nullable=True),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
)

teams = Table(
    "teams",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("name", String, nullable=False, index=True),
    Column("short_name", String, nullable=True),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
)

team_admins = Table(
    "team_admins",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("team_id", BigInteger, ForeignKey("teams.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("user_id", BigInteger, index=True, nullable=False),
    UniqueConstraint("team_id", "user_id"),
)

matches = Table(
    "matches",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("season_id", BigInteger, ForeignKey("seasons.id"), index=True, nullable=False),
    Column("home_team_id", BigInteger, ForeignKey("teams.id"), index=True, nullable=False),
    Column("away_team_id", BigInteger, ForeignKey("teams.id"), index=True, nullable=False),
    Column("scheduled_kickoff", DateTimeTZ, nullable=False),
    Column("status", match_status, nullable=False, server_default="SCHEDULED", index=True),
    Column("home_score", Integer, nullable=True),
    Column("away_score", Integer, nullable=True),
    Column("main_referee_id", BigInteger, nullable=True, index=True),
    Column("assistant_referee_1_id", BigInteger, nullable=True),
    Column("assistant_referee_2_id", BigInteger, nullable=True),
    Column("fourth_official_id", BigInteger, nullable=True),
    Column("supervisor_id", BigInteger, nullable=True, index=True),
    Column("officials_assigned_at", DateTimeTZ, nullable=True),
    Column("home_lineup_status", lineup_status, nullable=False, server_default="PENDING"),
    Column("away_lineup_status", lineup_status, nullable=False, server_default="PENDING"),
    Column("home_lineup_rejection_reason", Text, nullable=True),
    Column("away_lineup_rejection_reason", Text, nullable=True),
    Column("referee_report_submitted", Boolean, nullable=False, server_default="f"),
    Column("supervisor_report_submitted", Boolean, nullable=False, server_default="f"),
    Column("version", Integer, nullable=False, server_default="1"),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
    Column("updated", DateTimeTZ, nullable=True),
)

match_status_history = Table(
    "match_status_history",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("match_id", BigInteger, ForeignKey("matches.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("from_status", match_status, nullable=False),
    Column("to_status", match_status, nullable=False),
    Column("changed_by", BigInteger, nullable=True),
    Column("note", Text, nullable=True),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
)

match_referee_reports = Table(
    "match_referee_reports",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column(
        "match_id",
        BigInteger,
        ForeignKey("matches.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
        unique=True,
    ),
    Column("referee_id", BigInteger, nullable=False),
    Column("home_score", Integer, nullable=False),
    Column("away_score", Integer, nullable=False),
    Column("match_summary", Text, nullable=True),
    Column("notes", Text, nullable=True),
    Column("total_yellow_cards", Integer, nullable=False, server_default="0"),
    Column("total_red_cards", Integer, nullable=False, server_default="0"),
    Column("submitted_at", DateTimeTZ, nullable=False, server_default=func.now()),
)

season_team_registrations = Table(
    "season_team_registrations",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("season_id", BigInteger, ForeignKey("seasons.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("team_id", BigInteger, ForeignKey("teams.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("status", registration_status, nullable=False, server_default="DRAFT_INVITE", index=True),
    Column("submission_data", JSON, nullable=True),
    Column("reviewer_note", Text, nullable=True),
    Column("submitted_at", DateTimeTZ, nullable=True),
    Column("reviewed_at", DateTimeTZ, nullable=True),
    Column("reviewed_by", BigInteger, nullable=True),
    Column("version", Integer, nullable=False, server_default="1"),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
    Column("updated", DateTimeTZ, nullable=True),
    UniqueConstraint("season_id", "team_id"),
)

registration_status_history = Table(
    "registration_status_history",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column(
        "registration_id",
        BigInteger,
        ForeignKey("season_team_registrations.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    ),
    Column("from_status", registration_status, nullable=False),
    Column("to_status", registration_status, nullable=False),
    Column("changed_by", BigInteger, nullable=True),
    Column("note", Text, nullable=True),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
)

supervisor_reports = Table(
    "supervisor_reports",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("match_id", BigInteger, ForeignKey("matches.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("supervisor_id", BigInteger, index=True, nullable=False),
    Column("organization_rating", Integer, nullable=True),
    Column("home_team_rating", Integer, nullable=True),
    Column("away_team_rating", Integer, nullable=True),
    Column("stadium_condition_rating", Integer, nullable=True),
    Column("security_rating", Integer, nullable=True),
    Column("incident_report", Text, nullable=True),
    Column("has_serious_violation", Boolean, nullable=False, server_default="f"),
    Column("send_to_disciplinary", Boolean, nullable=False, server_default="f", index=True),
    Column("recommendations", Text, nullable=True),
    Column("review_status", report_review_status, nullable=True),
    Column("review_feedback", Text, nullable=True),
    Column("reviewed_by", BigInteger, nullable=True),
    Column("reviewed_at", DateTimeTZ, nullable=True),
    Column("submitted_at", DateTimeTZ, nullable=False, server_default=func.now()),
    UniqueConstraint("match_id", "supervisor_id"),
)

season_standings = Table(
    "season_standings",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("season_id", BigInteger, ForeignKey("seasons.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("team_id", BigInteger, ForeignKey("teams.id", ondelete="CASCADE"), index=True, nullable=False),
    Column("position", Integer, nullable=False),
    Column("played", Integer, nullable=False, server_default="0"),
    Column("won", Integer, nullable=False, server_default="0"),
    Column("drawn", Integer, nullable=False, server_default="0"),
    Column("lost", Integer, nullable=False, server_default="0"),
    Column("goals_for", Integer, nullable=False, server_default="0"),
    Column("goals_against", Integer, nullable=False, server_default="0"),
    Column("goal_difference", Integer, nullable=False, server_default="0"),
    Column("points", Integer, nullable=False, server_default="0"),
    Column("updated", DateTimeTZ, nullable=False, server_default=func.now()),
    UniqueConstraint("season_id", "team_id"),
)

notifications = Table(
    "notifications",
    metadata,
    Column("id", BigInteger, primary_key=True, index=True, autoincrement=True),
    Column("user_id", BigInteger, index=True, nullable=False),
    Column("type", String, nullable=False),
    Column("title", String, nullable=False),
    Column("message", Text, nullable=False),
    Column("related_entity", String, nullable=True),
    Column("related_id", BigInteger, nullable=True),
    Column("action_url", String, nullable=True),
    Column("is_read", Boolean, nullable=False, server_default="f"),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
)
