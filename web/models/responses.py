"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    mode: str = Field(..., description="운영 모드 (production/sandbox)")
    backend: str = Field(..., description="저장소 백엔드 (sqlite/postgres)")
    version: str = Field(..., description="API 버전")


class LoginResponse(BaseModel):
    """로그인 응답"""

    token: str = Field(..., description="bearer 토큰")
    role: str = Field(..., description="역할")
    name: str = Field(..., description="이름")
    status: str = Field(..., description="인증 상태")


class MessageResponse(BaseModel):
    """단순 메시지 응답"""

    message: str


class RepaymentResponse(BaseModel):
    """상환 응답"""

    message: str
    installment_index: int
    loan_status: str


class SnapSessionResponse(BaseModel):
    """결제 세션 응답"""

    order_id: str
    snap_token: str
    redirect_url: str


class WebhookResponse(BaseModel):
    """Webhook 응답 (게이트웨이용)"""

    status: str = Field(default="ok")
    outcome: str | None = Field(default=None, description="APPLIED / DUPLICATE / IGNORED")
