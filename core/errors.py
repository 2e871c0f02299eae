"""
에러 분류 체계

원장 트랜잭션 엔진이 발생시키는 모든 예외의 기반 클래스.
각 예외는 고정 code와 회원에게 보여줄 수 있는 메시지를 가진다.

- 금융 관련 예외는 감싸고 있는 트랜잭션을 롤백시킨 뒤 호출자에게 전달됨
- DuplicateEvent는 에러가 아닌 "이미 처리됨" 신호 (Webhook 200 응답)
- ConflictRetryable은 저장소가 감지한 쓰기 충돌 (호출자가 재시도)
"""


class LedgerError(Exception):
    """원장 예외 기반 클래스"""

    code: str = "LEDGER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        """응답 본문용 딕셔너리"""
        return {"code": self.code, "message": self.message}


class ValidationError(LedgerError):
    """잘못된 입력"""

    code = "VALIDATION_ERROR"


class InsufficientFunds(LedgerError):
    """잔액 부족"""

    code = "INSUFFICIENT_FUNDS"

    def __init__(self, message: str = "잔액이 부족합니다"):
        super().__init__(message)


class OutOfStock(LedgerError):
    """재고 부족"""

    code = "OUT_OF_STOCK"

    def __init__(self, product_name: str, product_id: int | None = None):
        super().__init__(f"'{product_name}' 재고가 부족합니다")
        self.product_name = product_name
        self.product_id = product_id


class NotFound(LedgerError):
    """대상 없음 (loan/order/user/product/savings)"""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: object):
        super().__init__(f"{entity}을(를) 찾을 수 없습니다: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class InvalidSignature(LedgerError):
    """결제 게이트웨이 서명 불일치"""

    code = "INVALID_SIGNATURE"

    def __init__(self, message: str = "Invalid Signature"):
        super().__init__(message)


class DuplicateEvent(LedgerError):
    """이미 반영된 외부 이벤트 (성공으로 취급)"""

    code = "DUPLICATE_EVENT"

    def __init__(self, external_ref: str):
        super().__init__(f"이미 처리된 이벤트입니다: {external_ref}")
        self.external_ref = external_ref


class ConflictRetryable(LedgerError):
    """저장소가 감지한 동시 쓰기 충돌 (재시도 가능)"""

    code = "CONFLICT_RETRYABLE"

    def __init__(self, message: str = "동시 요청과 충돌했습니다. 다시 시도해 주세요"):
        super().__init__(message)


class InvalidStateTransition(LedgerError):
    """허용되지 않은 상태 전이"""

    code = "INVALID_STATE"


class DuplicateRegistration(LedgerError):
    """NIK 또는 이메일 중복 가입"""

    code = "DUPLICATE_REGISTRATION"

    def __init__(self, message: str = "NIK 또는 이메일이 이미 등록되어 있습니다"):
        super().__init__(message)


class InvalidCredentials(LedgerError):
    """인증 실패 (토큰 무효/만료, 비밀번호 불일치)"""

    code = "INVALID_CREDENTIALS"


class PermissionDenied(LedgerError):
    """권한 없음 (관리자 전용, 미인증 회원)"""

    code = "PERMISSION_DENIED"


class DuplicateKeyError(Exception):
    """저장소 UNIQUE 제약 위반 (어댑터 내부 신호)

    엔진은 문맥에 맞는 LedgerError로 변환한다.
    """

    def __init__(self, message: str, constraint: str | None = None):
        super().__init__(message)
        self.constraint = constraint
