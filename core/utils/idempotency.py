"""
Idempotency 유틸리티

결제 게이트웨이 주문 ID(external_ref) 생성 및 검증 기능 제공
규칙: SETOR-{timestamp_ms}-{nonce}
"""

import uuid
from datetime import datetime

from core.utils.timezone import now_utc, to_timestamp_ms

# 온라인 저축 입금 주문 ID 접두사
DEPOSIT_ORDER_PREFIX: str = "SETOR"

# external_ref 컬럼 최대 길이 (Midtrans order_id 제한과 동일)
MAX_EXTERNAL_REF_LENGTH: int = 50


def make_deposit_order_id(now: datetime | None = None, nonce: str | None = None) -> str:
    """입금 주문 ID 생성

    같은 밀리초에 두 요청이 들어와도 충돌하지 않도록 nonce를 붙인다.

    Args:
        now: 기준 시각 (None이면 현재 UTC)
        nonce: 충돌 방지 문자열 (None이면 uuid4 앞 8자리)

    Returns:
        SETOR-{timestamp_ms}-{nonce} 형식

    Example:
        >>> from datetime import timezone
        >>> make_deposit_order_id(datetime(2026, 10, 19, tzinfo=timezone.utc), "ab12cd34")
        'SETOR-1792368000000-ab12cd34'
    """
    if now is None:
        now = now_utc()
    if nonce is None:
        nonce = uuid.uuid4().hex[:8]

    if not nonce:
        raise ValueError("nonce는 비어 있을 수 없습니다")

    return f"{DEPOSIT_ORDER_PREFIX}-{to_timestamp_ms(now)}-{nonce}"


def validate_external_ref(external_ref: str) -> bool:
    """external_ref 형식 유효성 검사

    비어 있지 않고 컬럼 길이 제한 이내인지 확인
    """
    if not external_ref:
        return False

    return len(external_ref) <= MAX_EXTERNAL_REF_LENGTH and not external_ref.isspace()
