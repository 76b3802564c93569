# module backend.admin.views
"""API JSON du back-office (/admin/api).
- Lecture (stats, commandes, banques, réglages): admin ou staff.
- Écriture (statuts, banques, réglages, bundles, toko, rôles): admin uniquement.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, Field, field_validator
from starlette.status import HTTP_201_CREATED

from backend.admin import service as admin_service
from backend.audit import service as audit
from backend.app_settings import service as settings_service
from backend.app_settings.models import AppSettingsUpdate
from backend.banks import service as banks_service
from backend.banks.models import BankCreate, BankUpdate, DefaultBankRequest, SingleBankModeRequest
from backend.bundles import service as bundles_service
from backend.bundles.models import BundleCreate, BundleUpdate
from backend.orders import service as orders_service
from backend.orders.models import OrderStatusUpdate, PaymentStatus
from backend.payments import map_provider_status, update_payment_status
from backend.stores import service as stores_service
from backend.stores.models import StoreCreate, StoreUpdate
from backend.utils.rate_limit import optional_rate_limit
from backend.utils.security import require_admin, require_staff

router = APIRouter(prefix="/admin/api", tags=["Admin API"])


class PaymentStatusUpdate(BaseModel):
    status: PaymentStatus
    notes: Optional[str] = None

    @field_validator("status", mode="before")
    def accept_provider_aliases(cls, v):
        # "paid", "success", "error"... acceptés en plus des valeurs de l'enum
        if not isinstance(v, str):
            return v
        if v.strip().upper() in PaymentStatus.__members__:
            return v.strip().upper()
        mapped = map_provider_status(v)
        return mapped if mapped is not PaymentStatus.PENDING else v


class UserRoleUpdate(BaseModel):
    role: str = Field(min_length=1)


@router.get("/stats")
def admin_stats(user: dict = Depends(require_staff)):
    return admin_service.get_stats()


# --- Commandes ---

@router.get("/orders")
def admin_list_orders(
    status: Optional[str] = None,
    payment_status: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    user: dict = Depends(require_staff),
):
    return orders_service.list_all_orders(status=status, payment_status=payment_status, search=search,
                                          page=page, limit=limit)


@router.get("/orders/{order_id}")
def admin_get_order(order_id: str, user: dict = Depends(require_staff)):
    return {"order": orders_service.get_order(order_id)}


@router.put("/orders/{order_id}/status")
def admin_update_order_status(order_id: str, body: OrderStatusUpdate, request: Request,
                              user: dict = Depends(require_staff)):
    order = orders_service.transition_order_status(order_id, body.status, body.notes)
    audit.record(user, audit.UPDATE_ORDER_STATUS, "order", order_id, {"status": order.get("order_status")}, request)
    return {"order": order}


@router.put("/orders/{order_id}/payment-status")
def admin_update_payment_status(order_id: str, body: PaymentStatusUpdate, request: Request,
                                user: dict = Depends(require_admin)):
    order = update_payment_status(order_id, body.status, body.notes)
    audit.record(user, audit.UPDATE_PAYMENT_STATUS, "order", order_id,
                 {"paymentStatus": order.get("payment_status"), "orderStatus": order.get("order_status")}, request)
    return {"order": order}


# --- Utilisateurs ---

@router.get("/users")
def admin_list_users(
    search: Optional[str] = None,
    role: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    user: dict = Depends(require_admin),
):
    return admin_service.list_users(search=search, role=role, page=page, limit=limit)


@router.put("/users/{user_id}/role")
def admin_update_user_role(user_id: str, body: UserRoleUpdate, request: Request, user: dict = Depends(require_admin)):
    updated = admin_service.update_user_role(user_id, body.role, user)
    audit.record(user, audit.UPDATE_USER_ROLE, "user", user_id, {"role": updated.get("role")}, request)
    return {"user": updated}


# --- Banques ---

@router.get("/banks")
def admin_list_banks(
    search: Optional[str] = None,
    status: str = "all",
    sort_by: str = "created_at",
    sort_order: str = "desc",
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    user: dict = Depends(require_staff),
):
    return banks_service.list_banks(search=search, status=status, sort_by=sort_by, sort_order=sort_order,
                                    page=page, limit=limit)


@router.get("/banks/{bank_id}")
def admin_get_bank(bank_id: str, user: dict = Depends(require_staff)):
    return {"bank": banks_service.get_bank(bank_id)}


@router.post("/banks", status_code=HTTP_201_CREATED,
             dependencies=[Depends(optional_rate_limit(times=20, seconds=60))])
def admin_create_bank(body: BankCreate, request: Request, user: dict = Depends(require_admin)):
    bank = banks_service.create_bank(body.model_dump())
    audit.record(user, audit.CREATE_BANK, "bank", bank.get("id"), {"code": bank.get("code")}, request)
    return {"bank": bank}


@router.put("/banks/{bank_id}")
def admin_update_bank(bank_id: str, body: BankUpdate, request: Request, user: dict = Depends(require_admin)):
    changes = body.model_dump(exclude_unset=True)
    bank = banks_service.update_bank(bank_id, changes)
    audit.record(user, audit.UPDATE_BANK, "bank", bank_id, {"fields": sorted(changes)}, request)
    return {"bank": bank}


@router.delete("/banks/{bank_id}")
def admin_delete_bank(bank_id: str, request: Request, user: dict = Depends(require_admin)):
    result = banks_service.delete_bank(bank_id)
    audit.record(user, audit.DELETE_BANK, "bank", bank_id, result, request)
    return result


# --- Réglages / mode banque unique ---

@router.get("/settings")
def admin_get_settings(user: dict = Depends(require_staff)):
    return {"settings": settings_service.get_settings()}


@router.put("/settings")
def admin_update_settings(body: AppSettingsUpdate, request: Request, user: dict = Depends(require_admin)):
    changes = body.model_dump(exclude_unset=True)
    settings = settings_service.update_settings(changes)
    audit.record(user, audit.UPDATE_SETTINGS, "settings", None, {"fields": sorted(changes)}, request)
    return {"settings": settings}


@router.get("/settings/single-bank")
def admin_single_bank_configuration(user: dict = Depends(require_staff)):
    return banks_service.get_configuration()


@router.post("/settings/single-bank/toggle")
def admin_toggle_single_bank(body: SingleBankModeRequest, request: Request, user: dict = Depends(require_admin)):
    settings = banks_service.toggle_single_bank_mode(body.enabled, body.default_bank_id)
    audit.record(user, audit.UPDATE_SETTINGS, "settings", None,
                 {"single_bank_mode": body.enabled, "default_bank_id": settings.get("default_bank_id")}, request)
    return {"settings": settings}


@router.put("/settings/single-bank/default")
def admin_set_default_bank(body: DefaultBankRequest, request: Request, user: dict = Depends(require_admin)):
    settings = banks_service.set_default_bank(body.bank_id)
    audit.record(user, audit.UPDATE_SETTINGS, "settings", None, {"default_bank_id": body.bank_id}, request)
    return {"settings": settings}


# --- Bundles ---

@router.get("/bundles")
def admin_list_bundles(
    featured: bool = False,
    store: Optional[str] = None,
    sort: str = "newest",
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    user: dict = Depends(require_staff),
):
    return bundles_service.list_bundles(user, featured=featured, store_id=store, sort=sort, page=page, limit=limit)


@router.post("/bundles", status_code=HTTP_201_CREATED)
def admin_create_bundle(body: BundleCreate, user: dict = Depends(require_admin)):
    return {"bundle": bundles_service.create_bundle(body.model_dump())}


@router.put("/bundles/{bundle_id}")
def admin_update_bundle(bundle_id: str, body: BundleUpdate, user: dict = Depends(require_admin)):
    return {"bundle": bundles_service.update_bundle(bundle_id, body.model_dump(exclude_unset=True))}


@router.delete("/bundles/{bundle_id}")
def admin_delete_bundle(bundle_id: str, user: dict = Depends(require_admin)):
    bundles_service.delete_bundle(bundle_id)
    return {"deleted": True}


# --- Toko ---

@router.get("/stores")
def admin_list_stores(user: dict = Depends(require_staff)):
    return {"items": stores_service.list_stores(include_inactive=True)}


@router.post("/stores", status_code=HTTP_201_CREATED)
def admin_create_store(body: StoreCreate, user: dict = Depends(require_admin)):
    return {"store": stores_service.create_store(body.model_dump())}


@router.put("/stores/{store_id}")
def admin_update_store(store_id: str, body: StoreUpdate, user: dict = Depends(require_admin)):
    return {"store": stores_service.update_store(store_id, body.model_dump(exclude_unset=True))}


@router.delete("/stores/{store_id}")
def admin_delete_store(store_id: str, user: dict = Depends(require_admin)):
    stores_service.delete_store(store_id)
    return {"deleted": True}
