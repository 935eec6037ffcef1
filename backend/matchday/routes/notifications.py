from fastapi import APIRouter, Depends, Query

from matchday.config import config
from matchday.models.auth import AuthContext
from matchday.routes.auth import auth_context
from matchday.routes.models import NotificationsResponse
from matchday.sql.notifications import get_notifications_for_user

router = APIRouter(prefix=config.api_prefix)


@router.get("/notifications", response_model=NotificationsResponse)
async def my_notifications(
    unread_only: bool = Query(default=False, alias="unreadOnly"),
    auth: AuthContext = Depends(auth_context),
) -> NotificationsResponse:
    if auth.sub is None:
        return NotificationsResponse(data=[])

    return NotificationsResponse(
        data=await get_notifications_for_user(auth.sub, unread_only=unread_only)
    )
