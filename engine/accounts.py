"""
회원 계정 서비스

가입, 로그인 자격 확인, 관리자 인증 처리, 푸시 구독 저장.
"""

import json
import logging
from typing import Any

from adapters.auth.passwords import hash_password, verify_password
from adapters.interfaces import ITransactionalStore
from core.domain.state_machines import VerificationStateMachine
from core.errors import (
    ConflictRetryable,
    DuplicateKeyError,
    DuplicateRegistration,
    InvalidCredentials,
    InvalidStateTransition,
    NotFound,
    PermissionDenied,
    ValidationError,
)
from core.types import Role, VerificationStatus
from core.utils.timezone import now_iso
from engine.models import Loan, Repayment, User
from engine.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)


class AccountService:
    """회원 계정 서비스

    Args:
        store: 트랜잭션 저장소
        dispatcher: 알림 디스패처
    """

    def __init__(self, store: ITransactionalStore, dispatcher: NotificationDispatcher):
        self.store = store
        self.dispatcher = dispatcher

    async def register(
        self,
        nik: str,
        name: str,
        email: str,
        password: str,
        address: str | None = None,
        phone: str | None = None,
    ) -> User:
        """회원 가입 (인증 대기 상태로 생성)

        Raises:
            ValidationError: 필수 항목 누락
            DuplicateRegistration: NIK 또는 이메일 중복
        """
        nik = (nik or "").strip()
        email = (email or "").strip().lower()
        name = (name or "").strip()

        if not nik or not email or not name:
            raise ValidationError("NIK, 이름, 이메일은 필수입니다")
        if not password:
            raise ValidationError("비밀번호는 필수입니다")

        password_hash = hash_password(password)

        try:
            async with self.store.transaction() as tx:
                row = await tx.fetchone(
                    """
                    INSERT INTO users (
                        nik, name, email, password_hash, address, phone,
                        role, verification_status, balance, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0, ?)
                    RETURNING *
                    """,
                    (
                        nik,
                        name,
                        email,
                        password_hash,
                        address,
                        phone,
                        Role.MEMBER.value,
                        VerificationStatus.PENDING.value,
                        now_iso(),
                    ),
                )
        except DuplicateKeyError as e:
            raise DuplicateRegistration() from e

        assert row is not None
        user = User.from_row(row)

        logger.info("회원 가입", extra={"user_id": user.id})
        return user

    async def authenticate(self, identity: str, password: str, role: str) -> User:
        """로그인 자격 확인

        NIK 또는 이메일로 조회. 관리자가 아닌 회원은 인증 완료 상태여야 한다.

        Raises:
            InvalidCredentials: 회원 없음, 역할 불일치, 비밀번호 불일치
            PermissionDenied: 인증 대기 또는 거절된 회원
        """
        identifier = (identity or "").strip()
        row = await self.store.fetchone(
            """
            SELECT * FROM users
            WHERE (nik = ? OR email = ?) AND role = ?
            """,
            (identifier, identifier.lower(), role),
        )
        if row is None:
            raise InvalidCredentials("회원을 찾을 수 없거나 역할이 일치하지 않습니다")

        if not verify_password(password or "", row["password_hash"]):
            raise InvalidCredentials("비밀번호가 올바르지 않습니다")

        user = User.from_row(row)

        if user.role != Role.ADMIN.value:
            if user.verification_status == VerificationStatus.PENDING.value:
                raise PermissionDenied("관리자 인증을 기다리는 중입니다")
            if user.verification_status == VerificationStatus.REJECTED.value:
                raise PermissionDenied("가입이 거절되었습니다. 마을 관리자에게 문의하세요")

        return user

    async def get_user(self, user_id: int) -> User:
        """회원 조회

        Raises:
            NotFound: 회원 없음
        """
        row = await self.store.fetchone("SELECT * FROM users WHERE id = ?", (user_id,))
        if row is None:
            raise NotFound("user", user_id)
        return User.from_row(row)

    async def list_members(self, status: str | None = None) -> list[User]:
        """회원 목록 (최근 가입순)

        Args:
            status: 인증 상태 필터 (None이면 전체)
        """
        sql = "SELECT * FROM users WHERE role = ?"
        params: list[Any] = [Role.MEMBER.value]
        if status is not None:
            sql += " AND verification_status = ?"
            params.append(status)
        sql += " ORDER BY created_at DESC, id DESC"

        rows = await self.store.fetchall(sql, tuple(params))
        return [User.from_row(row) for row in rows]

    async def set_verification(self, user_id: int, status: str) -> User:
        """회원 인증 상태 변경 (관리자)

        커밋 후 회원에게 알림.

        Raises:
            ValidationError: 알 수 없는 상태
            NotFound: 회원 없음
            InvalidStateTransition: 허용되지 않은 전이
            ConflictRetryable: 다른 관리자가 먼저 변경
        """
        try:
            target = VerificationStatus(status)
        except ValueError as e:
            raise ValidationError(f"유효하지 않은 인증 상태입니다: {status}") from e

        async with self.store.transaction() as tx:
            row = await tx.fetchone("SELECT * FROM users WHERE id = ?", (user_id,))
            if row is None:
                raise NotFound("user", user_id)

            current = row["verification_status"]
            machine = VerificationStateMachine(current)
            if not machine.can_transition(target):
                raise InvalidStateTransition(
                    f"인증 상태를 {current}에서 {target.value}(으)로 변경할 수 없습니다"
                )

            updated = await tx.fetchone(
                """
                UPDATE users SET verification_status = ?
                WHERE id = ? AND verification_status = ?
                RETURNING *
                """,
                (target.value, user_id, current),
            )
            if updated is None:
                raise ConflictRetryable()

        user = User.from_row(updated)

        logger.info(
            "회원 인증 상태 변경",
            extra={"user_id": user_id, "from": current, "to": target.value},
        )

        body = (
            "Akun kamu berhasil diverifikasi"
            if target == VerificationStatus.VERIFIED
            else "Status akun kamu diperbarui"
        )
        self.dispatcher.dispatch(user.push_subscription, body, url="/login.html")

        return user

    async def member_detail(self, user_id: int) -> dict[str, Any]:
        """회원 상세 (관리자): 기본 정보 + 진행 중 대출 + 상환 내역"""
        user = await self.get_user(user_id)

        loan_row = await self.store.fetchone(
            """
            SELECT * FROM loans
            WHERE user_id = ? AND status = 'approved'
            ORDER BY id DESC LIMIT 1
            """,
            (user_id,),
        )
        loan = Loan.from_row(loan_row) if loan_row else None

        repayments: list[Repayment] = []
        if loan is not None:
            rows = await self.store.fetchall(
                "SELECT * FROM repayments WHERE loan_id = ? ORDER BY installment_index DESC",
                (loan.id,),
            )
            repayments = [Repayment.from_row(row) for row in rows]

        return {
            "user": user.to_dict(),
            "loan": loan.to_dict() if loan else None,
            "repayments": [r.to_dict() for r in repayments],
        }

    async def save_push_subscription(self, user_id: int, subscription: dict[str, Any]) -> None:
        """푸시 구독 정보 저장

        Raises:
            ValidationError: endpoint 없음
            NotFound: 회원 없음
        """
        if not subscription or not subscription.get("endpoint"):
            raise ValidationError("구독 정보에 endpoint 가 없습니다")

        async with self.store.transaction() as tx:
            affected = await tx.execute(
                "UPDATE users SET push_subscription = ? WHERE id = ?",
                (json.dumps(subscription), user_id),
            )
            if affected == 0:
                raise NotFound("user", user_id)

        logger.debug("푸시 구독 저장", extra={"user_id": user_id})
