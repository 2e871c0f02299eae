"""
타입 정의 모듈

Enum, Dataclass 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from dataclasses import dataclass
from enum import Enum


class AppMode(str, Enum):
    """운영 모드 (실서비스 / Midtrans 샌드박스)"""

    PRODUCTION = "production"
    SANDBOX = "sandbox"


class StoreBackend(str, Enum):
    """저장소 백엔드"""

    SQLITE = "sqlite"
    POSTGRES = "postgres"


class Role(str, Enum):
    """사용자 역할"""

    MEMBER = "member"
    ADMIN = "admin"


class VerificationStatus(str, Enum):
    """회원 인증 상태"""

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class OrderStatus(str, Enum):
    """주문 상태"""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class LoanStatus(str, Enum):
    """대출 상태"""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PAID_OFF = "paid_off"


class SavingsType(str, Enum):
    """저축 거래 유형"""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class SavingsStatus(str, Enum):
    """저축 거래 상태"""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class JournalCategory(str, Enum):
    """현금 분개장 카테고리"""

    PURCHASE = "purchase"
    PURCHASE_REFUND = "purchase_refund"
    INSTALLMENT = "installment"
    CASH_WITHDRAWAL = "cash_withdrawal"
    SAVINGS_TOPUP = "savings_topup"  # 결제 게이트웨이 입금
    SAVINGS_DEPOSIT = "savings_deposit"  # 창구 입금 (관리자 승인)


class WebhookOutcome(str, Enum):
    """결제 Webhook 처리 결과"""

    APPLIED = "APPLIED"
    DUPLICATE = "DUPLICATE"
    IGNORED = "IGNORED"


@dataclass(frozen=True)
class Identity:
    """인증된 요청 주체 (불변)

    Identity Provider가 bearer 토큰에서 복원한 정보
    """

    user_id: int
    role: str
    verification_status: str

    @property
    def is_admin(self) -> bool:
        """관리자 여부"""
        return self.role == Role.ADMIN.value

    @classmethod
    def create(
        cls,
        user_id: int,
        role: str | Role = Role.MEMBER,
        verification_status: str | VerificationStatus = VerificationStatus.VERIFIED,
    ) -> "Identity":
        """Identity 생성 헬퍼

        Enum 또는 문자열 모두 허용
        """
        return cls(
            user_id=user_id,
            role=role.value if isinstance(role, Enum) else role,
            verification_status=(
                verification_status.value
                if isinstance(verification_status, Enum)
                else verification_status
            ),
        )


@dataclass(frozen=True)
class PushMessage:
    """푸시 알림 내용 (불변)"""

    title: str
    body: str
    url: str = "/"

    def to_dict(self) -> dict[str, str]:
        """딕셔너리 변환"""
        return {"title": self.title, "body": self.body, "url": self.url}
