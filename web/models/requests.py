"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증. 금액은 정수 루피아.
"""

from typing import Any

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """회원 가입 요청"""

    nik: str = Field(..., min_length=1, description="주민등록번호 (NIK)")
    name: str = Field(..., min_length=1, description="이름")
    email: str = Field(..., min_length=3, description="이메일")
    password: str = Field(..., min_length=1, description="비밀번호")
    address: str | None = Field(default=None, description="주소")
    phone: str | None = Field(default=None, description="전화번호")


class LoginRequest(BaseModel):
    """로그인 요청"""

    identity: str = Field(..., description="NIK 또는 이메일")
    password: str = Field(..., description="비밀번호")
    role: str = Field(default="member", description="member / admin")


class PushSubscriptionRequest(BaseModel):
    """브라우저 PushSubscription"""

    endpoint: str = Field(..., description="푸시 서비스 endpoint")
    keys: dict[str, str] = Field(default_factory=dict, description="p256dh / auth 키")
    expirationTime: Any | None = Field(default=None, description="만료 시각")


class StatusUpdateRequest(BaseModel):
    """상태 변경 요청 (회원 인증, 주문)"""

    status: str = Field(..., description="변경할 상태")


class ProductCreateRequest(BaseModel):
    """상품 등록 요청"""

    name: str = Field(..., min_length=1, description="상품명")
    price: int = Field(..., gt=0, description="가격")
    stock: int = Field(default=0, ge=0, description="재고")
    description: str | None = Field(default=None, description="설명")
    category: str | None = Field(default=None, description="분류")


class ProductUpdateRequest(BaseModel):
    """상품 수정 요청 (전달된 항목만 변경)"""

    name: str | None = Field(default=None, min_length=1)
    price: int | None = Field(default=None, gt=0)
    stock: int | None = Field(default=None, ge=0)
    description: str | None = None
    category: str | None = None


class CartItemRequest(BaseModel):
    """장바구니 항목"""

    product_id: int = Field(..., description="상품 ID")
    quantity: int = Field(..., description="수량")


class CheckoutRequest(BaseModel):
    """체크아웃 요청"""

    items: list[CartItemRequest] = Field(..., description="장바구니")
    total: int = Field(..., description="결제 금액 (클라이언트 계산)")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": 1, "quantity": 2}],
                    "total": 50000,
                }
            ]
        }
    }


class LoanApplyRequest(BaseModel):
    """대출 신청 요청"""

    principal: int = Field(..., description="대출 금액")
    term_months: int = Field(..., description="상환 기간 (개월)")
    installment_amount: int = Field(..., description="월 상환액")
    purpose: str | None = Field(default=None, description="대출 목적")


class LoanDecisionRequest(BaseModel):
    """대출 결정 요청 (관리자)"""

    status: str = Field(..., description="approved / rejected")
    admin_note: str | None = Field(default=None, description="관리자 메모")


class RepaymentRequest(BaseModel):
    """상환 요청"""

    loan_id: int = Field(..., description="대출 ID")
    amount: int = Field(..., description="상환 금액")


class SavingsRequest(BaseModel):
    """저축 입출금 요청"""

    amount: int = Field(..., description="금액")
    note: str | None = Field(default=None, description="메모")


class SavingsProcessRequest(BaseModel):
    """저축 요청 처리 (관리자)"""

    action: str = Field(..., description="approved / rejected")


class TopupSessionRequest(BaseModel):
    """온라인 입금 결제 세션 요청"""

    amount: int = Field(..., description="입금 금액")
    memo: str | None = Field(default=None, description="메모")
