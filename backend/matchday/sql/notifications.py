from matchday.database import database
from matchday.models.db.notification import Notification, NotificationInsertable
from matchday.utils.db import fetch_all_parsed, fetch_one_parsed
from matchday.utils.id_types import TeamId, UserId


async def sql_create_notification(notification: NotificationInsertable) -> Notification:
    query = """
        INSERT INTO notifications (
            user_id, type, title, message, related_entity, related_id, action_url
        )
        VALUES (
            :user_id, :type, :title, :message, :related_entity, :related_id, :action_url
        )
        RETURNING *
        """
    result = await fetch_one_parsed(database, Notification, query, notification.model_dump())
    if result is None:
        raise ValueError("Could not create notification")

    return result


async def get_team_admin_user_ids(team_ids: list[TeamId]) -> list[UserId]:
    if len(team_ids) < 1:
        return []

    query = """
        SELECT DISTINCT user_id
        FROM team_admins
        WHERE team_id = ANY(:team_ids)
        ORDER BY user_id
        """
    rows = await database.fetch_all(
        query=query, values={"team_ids": [int(team_id) for team_id in team_ids]}
    )
    return [UserId(int(row._mapping["user_id"])) for row in rows]


async def get_notifications_for_user(
    user_id: UserId, *, unread_only: bool = False, limit: int = 100
) -> list[Notification]:
    unread_filter = "AND is_read = false" if unread_only else ""
    query = f"""
        SELECT *
        FROM notifications
        WHERE user_id = :user_id
        {unread_filter}
        ORDER BY created DESC, id DESC
        LIMIT :limit
        """
    return await fetch_all_parsed(
        database, Notification, query, {"user_id": user_id, "limit": limit}
    )
