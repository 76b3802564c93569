# module backend.orders.views

"""Endpoints des commandes côté client et du retrait sur place.
- POST /api/v1/orders/quote: tarification d'un panier (sous-total, frais de service, total), sans écriture.
- POST /api/v1/orders: crée une commande PENDING (authentifié, rate-limité).
- GET /api/v1/orders, GET /api/v1/orders/{id}: commandes du client connecté.
- POST /api/v1/orders/{id}/cancel: annulation d'une commande en attente non payée.
- POST /api/v1/orders/{id}/payment-proof: preuve de virement.
- GET /api/v1/orders/{id}/qrcode: QR code de retrait (commande READY).
- POST /api/v1/pickup/verify/{token}: validation du retrait par le staff.
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query, Request
from starlette.status import HTTP_201_CREATED

from backend.audit import service as audit
from backend.orders import service as orders_service
from backend.orders.models import CreateOrderRequest, PaymentProofRequest, QuoteRequest
from backend.payments import upload_payment_proof
from backend.utils.rate_limit import optional_rate_limit
from backend.utils.security import require_staff, require_user

router = APIRouter(prefix="/api/v1/orders", tags=["Orders API"])
pickup_router = APIRouter(prefix="/api/v1/pickup", tags=["Pickup API"])


@router.post("/quote")
def api_quote(req: QuoteRequest):
    return orders_service.quote_cart(req.items)


@router.post("", status_code=HTTP_201_CREATED, dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def api_create_order(req: CreateOrderRequest, request: Request, user: Dict[str, Any] = Depends(require_user)):
    """Crée la commande; la banque de paiement retenue est renvoyée avec la commande (bank)."""
    order = orders_service.create_order(user, req)
    audit.record(user, audit.CREATE_ORDER, "order", order.get("id"),
                 {"orderNumber": order.get("order_number"), "total": order.get("total_amount")}, request)
    return {"order": order}


@router.get("")
def api_list_orders(
    status: Optional[str] = None,
    payment_status: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=50),
    user: Dict[str, Any] = Depends(require_user),
):
    return orders_service.list_user_orders(user, status=status, payment_status=payment_status, page=page, limit=limit)


@router.get("/{order_id}")
def api_get_order(order_id: str, user: Dict[str, Any] = Depends(require_user)):
    return {"order": orders_service.get_user_order(user, order_id)}


@router.post("/{order_id}/cancel")
def api_cancel_order(order_id: str, request: Request, user: Dict[str, Any] = Depends(require_user)):
    order = orders_service.cancel_order(user, order_id)
    audit.record(user, audit.CANCEL_ORDER, "order", order_id, None, request)
    return {"order": order}


@router.post("/{order_id}/payment-proof")
def api_payment_proof(order_id: str, req: PaymentProofRequest, request: Request,
                      user: Dict[str, Any] = Depends(require_user)):
    order = upload_payment_proof(user, order_id, req.payment_proof_url)
    audit.record(user, audit.UPLOAD_PAYMENT_PROOF, "order", order_id, None, request)
    return {"order": order}


@router.get("/{order_id}/qrcode")
def api_order_qrcode(order_id: str, user: Dict[str, Any] = Depends(require_user)):
    return orders_service.pickup_qr(user, order_id)


@pickup_router.post("/verify/{token}")
def api_verify_pickup(token: str, request: Request, staff: Dict[str, Any] = Depends(require_staff)):
    order = orders_service.verify_pickup(token, staff)
    audit.record(staff, audit.VERIFY_PICKUP, "order", order.get("id"), None, request)
    return {"status": "ok", "order": order}
