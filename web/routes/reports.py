"""
조회 / 보고서 API

GET /api/profile               - 내 프로필 (잔액, 진행 중 대출, 최근 거래)
GET /api/transactions/history  - 내 거래 내역
GET /api/admin/stats           - 관리자 대시보드 통계
GET /api/admin/cash-report     - 현금 분개장 보고서
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from core.constants import Limits
from core.types import Identity
from engine.manager import LedgerEngine
from web.dependencies import get_current_identity, get_engine, require_admin

router = APIRouter(prefix="/api", tags=["reports"])


@router.get("/profile")
async def profile(
    identity: Identity = Depends(get_current_identity),
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """내 프로필"""
    return await engine.reports.profile(identity.user_id)


@router.get("/transactions/history")
async def transaction_history(
    limit: int = Query(default=Limits.HISTORY_ROWS, ge=1, le=200, description="조회 개수"),
    identity: Identity = Depends(get_current_identity),
    engine: LedgerEngine = Depends(get_engine),
) -> list[dict[str, Any]]:
    """내 거래 내역 (대출 지급, 상환, 구매, 승인된 저축)"""
    return await engine.reports.transaction_history(identity.user_id, limit=limit)


@router.get("/admin/stats")
async def admin_stats(
    admin: Identity = Depends(require_admin),
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """관리자 대시보드 통계"""
    return await engine.reports.admin_stats()


@router.get("/admin/cash-report")
async def cash_report(
    limit: int = Query(default=Limits.CASH_REPORT_ROWS, ge=1, le=500, description="조회 개수"),
    admin: Identity = Depends(require_admin),
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """현금 분개장 보고서 (합계 + 최근 분개)"""
    return await engine.reports.cash_report(limit)
