"""
주문 API

POST /api/orders/checkout          - 체크아웃 (잔액 결제)
GET  /api/orders/my-history        - 내 주문 내역
GET  /api/admin/orders             - 전체 주문 (관리자)
GET  /api/admin/orders/{id}        - 주문 상세 (관리자)
PUT  /api/admin/orders/{id}/status - 주문 상태 변경 (관리자)
"""

from typing import Any

from fastapi import APIRouter, Depends

from core.types import Identity
from engine.manager import LedgerEngine
from engine.models import CartLine
from web.dependencies import get_current_identity, get_engine, require_admin
from web.models.requests import CheckoutRequest, StatusUpdateRequest

router = APIRouter(prefix="/api", tags=["orders"])


@router.post("/orders/checkout", status_code=201)
async def checkout(
    request: CheckoutRequest,
    identity: Identity = Depends(get_current_identity),
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """체크아웃

    재고 차감, 잔액 차감, 주문 기록, 분개장 기록이 모두 반영되거나
    하나도 반영되지 않는다.
    """
    order = await engine.checkout.checkout(
        identity.user_id,
        [CartLine(product_id=item.product_id, quantity=item.quantity) for item in request.items],
        request.total,
    )
    return {"message": "Pesanan berhasil dibuat", "order": order.to_dict()}


@router.get("/orders/my-history")
async def my_orders(
    identity: Identity = Depends(get_current_identity),
    engine: LedgerEngine = Depends(get_engine),
) -> list[dict[str, Any]]:
    """내 주문 내역"""
    orders = await engine.orders.list_for_user(identity.user_id)
    return [order.to_dict() for order in orders]


@router.get("/admin/orders")
async def list_orders(
    admin: Identity = Depends(require_admin),
    engine: LedgerEngine = Depends(get_engine),
) -> list[dict[str, Any]]:
    """전체 주문"""
    orders = await engine.orders.list_all()
    return [order.to_dict() for order in orders]


@router.get("/admin/orders/{order_id}")
async def get_order(
    order_id: int,
    admin: Identity = Depends(require_admin),
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """주문 상세 (라인 포함)"""
    order = await engine.orders.get_order(order_id)
    return order.to_dict()


@router.put("/admin/orders/{order_id}/status")
async def update_order_status(
    order_id: int,
    request: StatusUpdateRequest,
    admin: Identity = Depends(require_admin),
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """주문 상태 변경 (취소 시 재고 복원 및 환불)"""
    order = await engine.orders.update_status(order_id, request.status)
    return order.to_dict()
