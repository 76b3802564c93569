# module backend.audit.views
from typing import Optional
from fastapi import APIRouter, Depends, Query

from backend.audit import service as audit_service
from backend.utils.security import require_admin

router = APIRouter(prefix="/admin/api/audit-logs", tags=["Admin API"])


@router.get("")
def admin_audit_logs(
    action: Optional[str] = None,
    resource: Optional[str] = None,
    user_id: Optional[str] = None,
    date_range: str = "all",
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=200),
    user: dict = Depends(require_admin),
):
    """Journal d'activité (admin uniquement), filtrable par action, ressource, auteur et période."""
    return audit_service.list_logs(action=action, resource=resource, user_id=user_id,
                                   date_range=date_range, page=page, limit=limit)
