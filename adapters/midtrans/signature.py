"""
Midtrans Webhook 서명

signature_key = SHA512(order_id + status_code + gross_amount + server_key) 의 hex 문자열.
문자열은 게이트웨이가 보낸 그대로 이어 붙인다 (gross_amount 정규화 금지).
"""

import hashlib
import hmac


def compute_signature(
    order_id: str,
    status_code: str,
    gross_amount: str,
    server_key: str,
) -> str:
    """기대 서명 계산"""
    raw = f"{order_id}{status_code}{gross_amount}{server_key}"
    return hashlib.sha512(raw.encode("utf-8")).hexdigest()


def verify_signature(
    order_id: str,
    status_code: str,
    gross_amount: str,
    server_key: str,
    signature_key: str,
) -> bool:
    """서명 일치 여부 (상수 시간 비교)"""
    expected = compute_signature(order_id, status_code, gross_amount, server_key)
    return hmac.compare_digest(expected, signature_key or "")
