from heliclockter import datetime_utc

from matchday.models.db.shared import BaseModelORM
from matchday.utils.id_types import NotificationId, UserId


class NotificationInsertable(BaseModelORM):
    user_id: UserId
    type: str
    title: str
    message: str
    related_entity: str | None = None
    related_id: int | None = None
    action_url: str | None = None


class Notification(NotificationInsertable):
    id: NotificationId
    is_read: bool = False
    created: datetime_utc
