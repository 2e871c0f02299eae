"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    CartItemRequest,
    CheckoutRequest,
    LoanApplyRequest,
    LoanDecisionRequest,
    LoginRequest,
    ProductCreateRequest,
    ProductUpdateRequest,
    PushSubscriptionRequest,
    RegisterRequest,
    RepaymentRequest,
    SavingsProcessRequest,
    SavingsRequest,
    StatusUpdateRequest,
    TopupSessionRequest,
)
from web.models.responses import (
    HealthResponse,
    LoginResponse,
    MessageResponse,
    RepaymentResponse,
    SnapSessionResponse,
    WebhookResponse,
)

__all__ = [
    # Requests
    "CartItemRequest",
    "CheckoutRequest",
    "LoanApplyRequest",
    "LoanDecisionRequest",
    "LoginRequest",
    "ProductCreateRequest",
    "ProductUpdateRequest",
    "PushSubscriptionRequest",
    "RegisterRequest",
    "RepaymentRequest",
    "SavingsProcessRequest",
    "SavingsRequest",
    "StatusUpdateRequest",
    "TopupSessionRequest",
    # Responses
    "HealthResponse",
    "LoginResponse",
    "MessageResponse",
    "RepaymentResponse",
    "SnapSessionResponse",
    "WebhookResponse",
]
