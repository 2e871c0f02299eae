"""
Midtrans API 모델

Webhook 본문과 Snap 응답을 데이터클래스로 변환.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from core.errors import ValidationError

# 잔액을 반영하는 거래 상태
SETTLED_STATUSES: frozenset[str] = frozenset({"settlement", "capture"})


@dataclass(frozen=True)
class WebhookNotification:
    """Midtrans 결제 알림 (원문 그대로 보존)

    서명 검증은 원문 문자열로 해야 하므로 gross_amount 도 문자열로 둔다.

    Attributes:
        order_id: 게이트웨이 주문 ID (external_ref)
        status_code: HTTP 형태 상태 코드 ("200")
        gross_amount: 금액 문자열 ("100000.00")
        signature_key: SHA512 서명
        transaction_status: settlement / capture / pending / expire ...
        custom_field1: 회원 ID
        custom_field2: 메모
    """

    order_id: str
    status_code: str
    gross_amount: str
    signature_key: str
    transaction_status: str
    custom_field1: str | None = None
    custom_field2: str | None = None
    payment_type: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "WebhookNotification":
        """Webhook 본문에서 생성

        서명 계산에 필요한 필드가 없어도 빈 문자열로 채운다.
        (서명 불일치로 거절됨)
        """
        return cls(
            order_id=str(data.get("order_id") or ""),
            status_code=str(data.get("status_code") or ""),
            gross_amount=str(data.get("gross_amount") or ""),
            signature_key=str(data.get("signature_key") or ""),
            transaction_status=str(data.get("transaction_status") or ""),
            custom_field1=_optional_str(data.get("custom_field1")),
            custom_field2=_optional_str(data.get("custom_field2")),
            payment_type=_optional_str(data.get("payment_type")),
        )

    @property
    def is_settled(self) -> bool:
        """잔액 반영 대상 상태인지"""
        return self.transaction_status in SETTLED_STATUSES

    def amount(self) -> int:
        """금액을 정수 루피아로 변환

        Raises:
            ValidationError: 숫자가 아니거나 정수가 아니거나 0 이하
        """
        try:
            value = Decimal(self.gross_amount)
        except InvalidOperation as e:
            raise ValidationError(f"gross_amount 형식 오류: {self.gross_amount!r}") from e

        if not value.is_finite() or value != value.to_integral_value():
            raise ValidationError(f"gross_amount 가 정수가 아닙니다: {self.gross_amount!r}")
        if value <= 0:
            raise ValidationError(f"gross_amount 는 0보다 커야 합니다: {self.gross_amount!r}")

        return int(value)

    def member_id(self) -> int:
        """custom_field1 에서 회원 ID 추출

        Raises:
            ValidationError: 비어 있거나 정수가 아님
        """
        raw = (self.custom_field1 or "").strip()
        if not raw.isdigit():
            raise ValidationError(f"custom_field1 회원 ID 형식 오류: {self.custom_field1!r}")
        return int(raw)


@dataclass(frozen=True)
class SnapSession:
    """Snap 결제 세션

    Attributes:
        order_id: 생성한 주문 ID
        token: 프론트엔드 Snap.js 에 넘길 토큰
        redirect_url: 결제 페이지 URL
    """

    order_id: str
    token: str
    redirect_url: str

    @classmethod
    def from_api(cls, order_id: str, data: dict[str, Any]) -> "SnapSession":
        """API 응답에서 생성"""
        return cls(
            order_id=order_id,
            token=data["token"],
            redirect_url=data.get("redirect_url", ""),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "order_id": self.order_id,
            "token": self.token,
            "redirect_url": self.redirect_url,
        }


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)
