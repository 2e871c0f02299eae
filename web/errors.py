"""
예외 → HTTP 응답 변환

LedgerError 계열을 상태 코드와 {"code", "detail"} 본문으로 변환.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from core.errors import (
    ConflictRetryable,
    DuplicateEvent,
    DuplicateRegistration,
    InsufficientFunds,
    InvalidCredentials,
    InvalidSignature,
    InvalidStateTransition,
    LedgerError,
    NotFound,
    OutOfStock,
    PermissionDenied,
    ValidationError,
)

logger = logging.getLogger(__name__)

# 순서대로 isinstance 검사
STATUS_BY_ERROR: tuple[tuple[type[LedgerError], int], ...] = (
    (ValidationError, 400),
    (InsufficientFunds, 400),
    (DuplicateRegistration, 400),
    (InvalidCredentials, 401),
    (InvalidSignature, 401),
    (PermissionDenied, 403),
    (NotFound, 404),
    (OutOfStock, 409),
    (ConflictRetryable, 409),
    (InvalidStateTransition, 409),
    (DuplicateEvent, 200),
)


def status_for(error: LedgerError) -> int:
    """예외에 대응하는 HTTP 상태 코드"""
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return 500


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """LedgerError 예외 핸들러"""
    status_code = status_for(exc)

    if status_code >= 500:
        logger.error(f"처리되지 않은 원장 오류: {exc}", extra={"path": request.url.path})
    else:
        logger.info(
            f"요청 거절: {exc.code}",
            extra={"path": request.url.path, "status_code": status_code},
        )

    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content={"code": exc.code, "detail": exc.message},
        headers=headers,
    )
