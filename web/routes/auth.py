"""
회원 인증 API

POST /api/register  - 회원 가입 (인증 대기)
POST /api/login     - 로그인 (bearer 토큰 발급)
POST /api/subscribe - 푸시 구독 저장
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from adapters.auth.identity import JwtIdentityProvider
from core.types import Identity
from engine.manager import LedgerEngine
from web.dependencies import get_current_identity, get_engine, get_identity_provider
from web.models.requests import LoginRequest, PushSubscriptionRequest, RegisterRequest
from web.models.responses import LoginResponse, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/register", status_code=201)
async def register(
    request: RegisterRequest,
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """회원 가입

    관리자 인증 전까지 로그인할 수 없다.
    """
    user = await engine.accounts.register(
        nik=request.nik,
        name=request.name,
        email=request.email,
        password=request.password,
        address=request.address,
        phone=request.phone,
    )
    return {
        "message": "Pendaftaran berhasil, tunggu verifikasi admin",
        "user": user.to_dict(),
    }


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    engine: LedgerEngine = Depends(get_engine),
    provider: JwtIdentityProvider = Depends(get_identity_provider),
) -> LoginResponse:
    """로그인"""
    user = await engine.accounts.authenticate(
        request.identity,
        request.password,
        request.role,
    )
    token = provider.issue(
        Identity.create(user.id, user.role, user.verification_status)
    )

    logger.info("로그인", extra={"user_id": user.id, "role": user.role})

    return LoginResponse(
        token=token,
        role=user.role,
        name=user.name,
        status=user.verification_status,
    )


@router.post("/subscribe", response_model=MessageResponse)
async def subscribe(
    request: PushSubscriptionRequest,
    identity: Identity = Depends(get_current_identity),
    engine: LedgerEngine = Depends(get_engine),
) -> MessageResponse:
    """푸시 구독 정보 저장"""
    await engine.accounts.save_push_subscription(
        identity.user_id,
        request.model_dump(exclude_none=True),
    )
    return MessageResponse(message="Subscribed")
