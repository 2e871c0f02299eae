"""
저축 API

POST /api/savings/withdraw              - 출금 요청
POST /api/savings/request               - 창구 입금 요청
GET  /api/savings/mine                  - 내 저축 내역
GET  /api/admin/savings                 - 전체 저축 내역 (관리자)
GET  /api/admin/savings/withdrawals     - 승인 대기 출금 (관리자)
PUT  /api/admin/savings/{id}/process    - 요청 승인/거절 (관리자)
"""

from typing import Any

from fastapi import APIRouter, Depends

from core.types import Identity
from engine.manager import LedgerEngine
from web.dependencies import get_current_identity, get_engine, require_admin
from web.models.requests import SavingsProcessRequest, SavingsRequest

router = APIRouter(prefix="/api", tags=["savings"])


@router.post("/savings/withdraw", status_code=201)
async def request_withdrawal(
    request: SavingsRequest,
    identity: Identity = Depends(get_current_identity),
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """출금 요청 (관리자 승인 시 잔액 차감)"""
    entry = await engine.savings.request_withdrawal(
        identity.user_id,
        request.amount,
        request.note,
    )
    return {"message": "Permintaan penarikan terkirim", "savings": entry.to_dict()}


@router.post("/savings/request", status_code=201)
async def request_deposit(
    request: SavingsRequest,
    identity: Identity = Depends(get_current_identity),
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """창구 입금 요청 (관리자 확인 시 잔액 입금)"""
    entry = await engine.savings.request_deposit(
        identity.user_id,
        request.amount,
        request.note,
    )
    return {"message": "Permintaan setoran terkirim", "savings": entry.to_dict()}


@router.get("/savings/mine")
async def my_savings(
    identity: Identity = Depends(get_current_identity),
    engine: LedgerEngine = Depends(get_engine),
) -> list[dict[str, Any]]:
    """내 저축 내역"""
    entries = await engine.savings.list_for_user(identity.user_id)
    return [entry.to_dict() for entry in entries]


@router.get("/admin/savings")
async def list_savings(
    admin: Identity = Depends(require_admin),
    engine: LedgerEngine = Depends(get_engine),
) -> list[dict[str, Any]]:
    """전체 저축 내역"""
    entries = await engine.savings.list_all()
    return [entry.to_dict() for entry in entries]


@router.get("/admin/savings/withdrawals")
async def list_pending_withdrawals(
    admin: Identity = Depends(require_admin),
    engine: LedgerEngine = Depends(get_engine),
) -> list[dict[str, Any]]:
    """승인 대기 출금"""
    entries = await engine.savings.list_pending_withdrawals()
    return [entry.to_dict() for entry in entries]


@router.put("/admin/savings/{entry_id}/process")
async def process_savings(
    entry_id: int,
    request: SavingsProcessRequest,
    admin: Identity = Depends(require_admin),
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """요청 승인/거절"""
    entry = await engine.savings.process(entry_id, request.action)
    return entry.to_dict()
