"""
온라인 입금 API (Midtrans)

POST /api/payments/midtrans - Snap 결제 세션 생성
POST /api/midtrans/webhook  - 결제 알림 수신 (게이트웨이 호출)
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from adapters.midtrans.snap_client import MidtransApiError
from core.errors import InvalidSignature, NotFound, ValidationError
from core.types import Identity
from engine.manager import LedgerEngine
from web.dependencies import get_current_identity, get_engine
from web.models.requests import TopupSessionRequest
from web.models.responses import SnapSessionResponse, WebhookResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["payments"])


@router.post("/payments/midtrans", response_model=SnapSessionResponse)
async def create_topup_session(
    request: TopupSessionRequest,
    identity: Identity = Depends(get_current_identity),
    engine: LedgerEngine = Depends(get_engine),
) -> SnapSessionResponse:
    """Snap 결제 세션 생성

    결제가 완료되면 게이트웨이가 webhook 으로 입금을 알린다.
    """
    try:
        session = await engine.payments.create_topup_session(
            identity.user_id,
            request.amount,
            request.memo,
        )
    except MidtransApiError as e:
        logger.error(
            f"결제 세션 생성 실패: {e}",
            extra={"user_id": identity.user_id, "status_code": e.status_code},
        )
        raise HTTPException(status_code=502, detail="Gagal membuat sesi pembayaran")

    return SnapSessionResponse(
        order_id=session.order_id,
        snap_token=session.token,
        redirect_url=session.redirect_url,
    )


@router.post("/midtrans/webhook", response_model=WebhookResponse)
async def midtrans_webhook(
    request: Request,
    engine: LedgerEngine = Depends(get_engine),
) -> Any:
    """결제 알림 수신

    응답 코드:
    - 200: 반영, 중복, 또는 무시 (게이트웨이 재전송 중단)
    - 401: 서명 불일치
    - 400: JSON 객체가 아닌 본문
    - 500: 서명 확인 이후 실패, 롤백됨 (게이트웨이가 재전송)
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return JSONResponse(status_code=400, content={"status": "error"})

    if not isinstance(payload, dict):
        return JSONResponse(status_code=400, content={"status": "error"})

    try:
        outcome = await engine.payments.handle_notification(payload)
    except InvalidSignature:
        return JSONResponse(status_code=401, content={"status": "invalid signature"})
    except (ValidationError, NotFound) as e:
        logger.warning(f"Webhook 반영 불가: {e}", extra={"order_id": payload.get("order_id")})
        return JSONResponse(status_code=500, content={"status": "error"})
    except Exception:
        logger.exception("Webhook 처리 실패", extra={"order_id": payload.get("order_id")})
        return JSONResponse(status_code=500, content={"status": "error"})

    return WebhookResponse(status="ok", outcome=outcome.value)
