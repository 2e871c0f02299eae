"""
대출 서비스

신청, 관리자 결정(지급), 회차별 상환.

결정: pending 인 경우에만 조건부 UPDATE. 동시에 두 관리자가 결정하면
늦은 쪽은 ConflictRetryable.
상환: 대출 행을 먼저 UPDATE 하여 잠근 뒤 회차를 계산하므로
같은 대출의 상환은 직렬화되고 회차는 1..N 으로 빈틈없이 증가한다.
"""

import logging

from adapters.interfaces import ITransactionalStore
from core.domain.state_machines import LoanStateMachine
from core.errors import (
    ConflictRetryable,
    DuplicateKeyError,
    InsufficientFunds,
    InvalidStateTransition,
    NotFound,
    ValidationError,
)
from core.ledger.journal import append_entry
from core.types import JournalCategory, LoanStatus
from core.utils.timezone import now_iso
from engine.models import Loan, Repayment, parse_subscription
from engine.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)

DECISIONS: frozenset[str] = frozenset({LoanStatus.APPROVED.value, LoanStatus.REJECTED.value})


class LoanService:
    """대출 서비스

    Args:
        store: 트랜잭션 저장소
        dispatcher: 알림 디스패처
    """

    def __init__(self, store: ITransactionalStore, dispatcher: NotificationDispatcher):
        self.store = store
        self.dispatcher = dispatcher

    # =========================================================================
    # 신청 / 조회
    # =========================================================================

    async def apply(
        self,
        user_id: int,
        principal: int,
        term_months: int,
        installment_amount: int,
        purpose: str | None = None,
    ) -> Loan:
        """대출 신청 (pending)

        Raises:
            ValidationError: 0 이하 금액 또는 기간
        """
        if principal <= 0:
            raise ValidationError("대출 금액은 0보다 커야 합니다")
        if term_months <= 0:
            raise ValidationError("상환 기간은 1개월 이상이어야 합니다")
        if installment_amount <= 0:
            raise ValidationError("월 상환액은 0보다 커야 합니다")

        now = now_iso()
        async with self.store.transaction() as tx:
            user = await tx.fetchone("SELECT id FROM users WHERE id = ?", (user_id,))
            if user is None:
                raise NotFound("user", user_id)

            row = await tx.fetchone(
                """
                INSERT INTO loans (
                    user_id, principal, term_months, installment_amount,
                    purpose, status, applied_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                RETURNING *
                """,
                (
                    user_id,
                    principal,
                    term_months,
                    installment_amount,
                    purpose,
                    LoanStatus.PENDING.value,
                    now,
                    now,
                ),
            )

        assert row is not None
        loan = Loan.from_row(row)
        logger.info("대출 신청", extra={"loan_id": loan.id, "user_id": user_id})
        return loan

    async def get_loan(self, loan_id: int) -> Loan:
        """대출 조회

        Raises:
            NotFound: 대출 없음
        """
        row = await self.store.fetchone("SELECT * FROM loans WHERE id = ?", (loan_id,))
        if row is None:
            raise NotFound("loan", loan_id)
        return Loan.from_row(row)

    async def list_for_user(self, user_id: int) -> list[Loan]:
        """회원 대출 목록 (최신순)"""
        rows = await self.store.fetchall(
            "SELECT * FROM loans WHERE user_id = ? ORDER BY id DESC",
            (user_id,),
        )
        return [Loan.from_row(row) for row in rows]

    async def list_pending(self) -> list[Loan]:
        """심사 대기 대출 (신청순)"""
        rows = await self.store.fetchall(
            """
            SELECT l.*, u.name AS borrower_name
            FROM loans l JOIN users u ON l.user_id = u.id
            WHERE l.status = 'pending'
            ORDER BY l.id
            """
        )
        return [Loan.from_row(row) for row in rows]

    async def list_all(self) -> list[Loan]:
        """전체 대출 (관리자, 최신순)"""
        rows = await self.store.fetchall(
            """
            SELECT l.*, u.name AS borrower_name
            FROM loans l JOIN users u ON l.user_id = u.id
            ORDER BY l.id DESC
            """
        )
        return [Loan.from_row(row) for row in rows]

    async def list_repayments(self, loan_id: int) -> list[Repayment]:
        """상환 내역 (회차순)"""
        rows = await self.store.fetchall(
            "SELECT * FROM repayments WHERE loan_id = ? ORDER BY installment_index",
            (loan_id,),
        )
        return [Repayment.from_row(row) for row in rows]

    # =========================================================================
    # 결정 (지급)
    # =========================================================================

    async def decide(
        self,
        loan_id: int,
        decision: str,
        admin_note: str | None = None,
    ) -> Loan:
        """대출 승인/거절

        승인 시 원금을 회원 잔액에 입금. 커밋 후 회원에게 알림.

        Raises:
            ValidationError: approved / rejected 외의 값
            NotFound: 대출 없음
            InvalidStateTransition: 이미 결정된 대출
            ConflictRetryable: 동시 결정에서 패배
        """
        if decision not in DECISIONS:
            raise ValidationError(f"유효하지 않은 결정입니다: {decision}")

        async with self.store.transaction() as tx:
            row = await tx.fetchone(
                """
                SELECT l.*, u.push_subscription
                FROM loans l JOIN users u ON l.user_id = u.id
                WHERE l.id = ?
                """,
                (loan_id,),
            )
            if row is None:
                raise NotFound("loan", loan_id)

            if not LoanStateMachine(row["status"]).can_transition(decision):
                raise InvalidStateTransition(
                    f"이미 처리된 대출입니다 (현재 상태: {row['status']})"
                )

            now = now_iso()
            updated = await tx.fetchone(
                """
                UPDATE loans
                SET status = ?, admin_note = ?, decided_at = ?, updated_at = ?
                WHERE id = ? AND status = 'pending'
                RETURNING *
                """,
                (decision, admin_note, now, now, loan_id),
            )
            if updated is None:
                raise ConflictRetryable()

            if decision == LoanStatus.APPROVED.value:
                affected = await tx.execute(
                    "UPDATE users SET balance = balance + ? WHERE id = ?",
                    (int(row["principal"]), int(row["user_id"])),
                )
                if affected == 0:
                    raise NotFound("user", row["user_id"])

        loan = Loan.from_row(updated)

        logger.info(
            "대출 결정",
            extra={"loan_id": loan_id, "decision": decision, "principal": loan.principal},
        )

        body = (
            "Pinjaman Anda disetujui, dana sudah masuk ke saldo"
            if decision == LoanStatus.APPROVED.value
            else "Pengajuan pinjaman Anda ditolak"
        )
        self.dispatcher.dispatch(parse_subscription(row["push_subscription"]), body, url="/loans.html")

        return loan

    # =========================================================================
    # 상환
    # =========================================================================

    async def repay(self, loan_id: int, user_id: int, amount: int) -> Repayment:
        """회차 상환

        Raises:
            ValidationError: 0 이하 금액
            NotFound: 회원 소유의 대출이 없음
            InvalidStateTransition: 승인 상태가 아닌 대출 (완납 포함)
            InsufficientFunds: 잔액 부족
            ConflictRetryable: 같은 회차가 동시에 기록됨
        """
        if amount <= 0:
            raise ValidationError("상환 금액은 0보다 커야 합니다")

        async with self.store.transaction() as tx:
            # 대출 행 잠금
            loan = await tx.fetchone(
                """
                UPDATE loans SET updated_at = ?
                WHERE id = ? AND user_id = ?
                RETURNING status, term_months
                """,
                (now_iso(), loan_id, user_id),
            )
            if loan is None:
                raise NotFound("loan", loan_id)

            machine = LoanStateMachine(loan["status"])
            if not machine.accepts_repayment:
                raise InvalidStateTransition(
                    f"상환할 수 없는 대출입니다 (현재 상태: {loan['status']})"
                )

            count_row = await tx.fetchone(
                "SELECT COUNT(*) AS paid FROM repayments WHERE loan_id = ?",
                (loan_id,),
            )
            installment_index = (int(count_row["paid"]) if count_row else 0) + 1

            affected = await tx.execute(
                "UPDATE users SET balance = balance - ? WHERE id = ? AND balance >= ?",
                (amount, user_id, amount),
            )
            if affected == 0:
                raise InsufficientFunds()

            paid_at = now_iso()
            try:
                row = await tx.fetchone(
                    """
                    INSERT INTO repayments (
                        loan_id, user_id, installment_index, amount, paid_at
                    ) VALUES (?, ?, ?, ?, ?)
                    RETURNING id
                    """,
                    (loan_id, user_id, installment_index, amount, paid_at),
                )
            except DuplicateKeyError as e:
                raise ConflictRetryable() from e
            assert row is not None

            if installment_index >= int(loan["term_months"]):
                machine.transition(LoanStatus.PAID_OFF)
                await tx.execute(
                    "UPDATE loans SET status = ? WHERE id = ?",
                    (LoanStatus.PAID_OFF.value, loan_id),
                )

            member = await tx.fetchone("SELECT name FROM users WHERE id = ?", (user_id,))
            await append_entry(
                tx,
                description=(
                    f"Angsuran ke-{installment_index}: "
                    f"{member['name'] if member else user_id} (Loan ID: {loan_id})"
                ),
                category=JournalCategory.INSTALLMENT,
                debit=amount,
            )

        logger.info(
            "대출 상환",
            extra={
                "loan_id": loan_id,
                "installment_index": installment_index,
                "amount": amount,
                "status": machine.state,
            },
        )

        return Repayment(
            id=int(row["id"]),
            loan_id=loan_id,
            user_id=user_id,
            installment_index=installment_index,
            amount=amount,
            paid_at=paid_at,
        )
