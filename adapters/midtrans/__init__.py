"""
Midtrans 결제 게이트웨이 어댑터

Snap 결제 세션 생성, Webhook 서명 검증 및 본문 파싱.
"""

from adapters.midtrans.models import SnapSession, WebhookNotification
from adapters.midtrans.signature import compute_signature, verify_signature
from adapters.midtrans.snap_client import MidtransApiError, MidtransSnapClient

__all__ = [
    "MidtransSnapClient",
    "MidtransApiError",
    "SnapSession",
    "WebhookNotification",
    "compute_signature",
    "verify_signature",
]
