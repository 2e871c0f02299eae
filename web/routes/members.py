"""
회원 관리 API (관리자)

GET /api/admin/users              - 회원 목록
GET /api/admin/users/pending      - 인증 대기 회원
GET /api/admin/users/{id}         - 회원 상세 (진행 중 대출 + 상환 내역)
PUT /api/admin/users/{id}/status  - 인증 상태 변경
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from core.types import Identity, VerificationStatus
from engine.manager import LedgerEngine
from web.dependencies import get_engine, require_admin
from web.models.requests import StatusUpdateRequest

router = APIRouter(prefix="/api/admin/users", tags=["members"])


@router.get("")
async def list_members(
    status: str | None = Query(default=None, description="인증 상태 필터"),
    admin: Identity = Depends(require_admin),
    engine: LedgerEngine = Depends(get_engine),
) -> list[dict[str, Any]]:
    """회원 목록"""
    users = await engine.accounts.list_members(status)
    return [user.to_dict() for user in users]


@router.get("/pending")
async def list_pending_members(
    admin: Identity = Depends(require_admin),
    engine: LedgerEngine = Depends(get_engine),
) -> list[dict[str, Any]]:
    """인증 대기 회원"""
    users = await engine.accounts.list_members(VerificationStatus.PENDING.value)
    return [user.to_dict() for user in users]


@router.get("/{user_id}")
async def member_detail(
    user_id: int,
    admin: Identity = Depends(require_admin),
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """회원 상세"""
    return await engine.accounts.member_detail(user_id)


@router.put("/{user_id}/status")
async def update_member_status(
    user_id: int,
    request: StatusUpdateRequest,
    admin: Identity = Depends(require_admin),
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """인증 상태 변경 (커밋 후 회원에게 알림)"""
    user = await engine.accounts.set_verification(user_id, request.status)
    return user.to_dict()
