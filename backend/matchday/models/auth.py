from pydantic import BaseModel, Field

from matchday.utils.id_types import TeamId, UserId

SUPER_ADMIN_ROLE = "super_admin"

MANAGE_MATCHES = "manage_matches"
MANAGE_SEASONS = "manage_seasons"
MANAGE_DISCIPLINE = "manage_discipline"
OFFICIAL_ROLE = "official_role"


class AuthContext(BaseModel):
    """
    Verified claims of the caller, passed explicitly into every service call.

    `sub` is `None` only for the system actor, which is used for transitions that happen as a
    side effect of another request (e.g. FINISHED -> REPORTED once both reports are in).
    """

    sub: UserId | None
    roles: list[str] = Field(default_factory=list)
    permissions: list[str] = Field(default_factory=list)
    team_ids: list[TeamId] = Field(default_factory=list, alias="teamIds")

    model_config = {"populate_by_name": True}

    @classmethod
    def system(cls) -> "AuthContext":
        return cls(sub=None, roles=[SUPER_ADMIN_ROLE])

    @property
    def is_super_admin(self) -> bool:
        return SUPER_ADMIN_ROLE in self.roles

    def has_permission(self, permission: str) -> bool:
        return self.is_super_admin or permission in self.permissions

    def has_any_permission(self, *permissions: str) -> bool:
        return self.is_super_admin or any(p in self.permissions for p in permissions)

    def manages_team(self, team_id: TeamId) -> bool:
        return int(team_id) in {int(id_) for id_ in self.team_ids}
