# module backend.notifications.views
"""
- GET /api/v1/notifications: notifications du client connecté (paginées) et nombre de non lues.
- PATCH /api/v1/notifications: marque une notification, ou toutes, comme lues.
- POST /admin/api/notifications: message d'un admin à une liste d'utilisateurs.
"""
from typing import Any, Dict
from fastapi import APIRouter, Depends, Query
from starlette.status import HTTP_201_CREATED

from backend.notifications import service as notifications_service
from backend.notifications.models import AnnouncementRequest, MarkReadRequest
from backend.utils.security import require_admin, require_user

router = APIRouter(prefix="/api/v1/notifications", tags=["Notifications API"])
admin_router = APIRouter(prefix="/admin/api/notifications", tags=["Admin API"])


@router.get("")
def api_list_notifications(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    user: Dict[str, Any] = Depends(require_user),
):
    return notifications_service.list_for_user(user, page=page, limit=limit)


@router.patch("")
def api_mark_notifications_read(body: MarkReadRequest, user: Dict[str, Any] = Depends(require_user)):
    return notifications_service.mark_read(user, body.notification_id, body.mark_all_read)


@admin_router.post("", status_code=HTTP_201_CREATED)
def admin_announce(body: AnnouncementRequest, user: dict = Depends(require_admin)):
    return notifications_service.announce(body.user_ids, body.title, body.message)
