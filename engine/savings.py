"""
저축 서비스

창구 입금/출금 요청과 관리자 처리.
출금 요청 시 잔액 확인은 참고용이며 자금을 묶어 두지 않는다.
승인 시점에 조건부 차감으로 다시 확인한다.
"""

import logging

from adapters.interfaces import ITransaction, ITransactionalStore
from core.domain.state_machines import SavingsStateMachine
from core.errors import (
    ConflictRetryable,
    InsufficientFunds,
    InvalidStateTransition,
    NotFound,
    ValidationError,
)
from core.ledger.journal import append_entry
from core.types import JournalCategory, SavingsStatus, SavingsType
from core.utils.timezone import now_iso
from engine.models import SavingsEntry, parse_subscription
from engine.notifications import NotificationDispatcher

logger = logging.getLogger(__name__)

ACTIONS: frozenset[str] = frozenset({SavingsStatus.APPROVED.value, SavingsStatus.REJECTED.value})


class SavingsService:
    """저축 서비스

    Args:
        store: 트랜잭션 저장소
        dispatcher: 알림 디스패처
    """

    def __init__(self, store: ITransactionalStore, dispatcher: NotificationDispatcher):
        self.store = store
        self.dispatcher = dispatcher

    # =========================================================================
    # 요청
    # =========================================================================

    async def request_withdrawal(
        self,
        user_id: int,
        amount: int,
        note: str | None = None,
    ) -> SavingsEntry:
        """출금 요청 (pending)

        Raises:
            ValidationError: 0 이하 금액
            NotFound: 회원 없음
            InsufficientFunds: 현재 잔액 부족
        """
        if amount <= 0:
            raise ValidationError("출금 금액은 0보다 커야 합니다")

        async with self.store.transaction() as tx:
            user = await tx.fetchone("SELECT balance FROM users WHERE id = ?", (user_id,))
            if user is None:
                raise NotFound("user", user_id)
            if int(user["balance"]) < amount:
                raise InsufficientFunds()

            entry = await self._insert(tx, user_id, SavingsType.WITHDRAWAL, amount, note)

        logger.info("출금 요청", extra={"savings_id": entry.id, "user_id": user_id})
        return entry

    async def request_deposit(
        self,
        user_id: int,
        amount: int,
        note: str | None = None,
    ) -> SavingsEntry:
        """창구 입금 요청 (pending, 관리자 확인 후 반영)"""
        if amount <= 0:
            raise ValidationError("입금 금액은 0보다 커야 합니다")

        async with self.store.transaction() as tx:
            user = await tx.fetchone("SELECT id FROM users WHERE id = ?", (user_id,))
            if user is None:
                raise NotFound("user", user_id)

            entry = await self._insert(tx, user_id, SavingsType.DEPOSIT, amount, note)

        logger.info("입금 요청", extra={"savings_id": entry.id, "user_id": user_id})
        return entry

    async def _insert(
        self,
        tx: ITransaction,
        user_id: int,
        entry_type: SavingsType,
        amount: int,
        note: str | None,
    ) -> SavingsEntry:
        row = await tx.fetchone(
            """
            INSERT INTO savings (user_id, type, status, amount, note, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            RETURNING *
            """,
            (user_id, entry_type.value, SavingsStatus.PENDING.value, amount, note, now_iso()),
        )
        assert row is not None
        return SavingsEntry.from_row(row)

    # =========================================================================
    # 처리 (관리자)
    # =========================================================================

    async def process(self, entry_id: int, action: str) -> SavingsEntry:
        """요청 승인/거절

        승인된 출금: 조건부 잔액 차감 + cash_withdrawal (credit)
        승인된 입금: 잔액 입금 + savings_deposit (debit)

        Raises:
            ValidationError: approved / rejected 외의 값
            NotFound: 요청 없음
            InvalidStateTransition: 이미 처리된 요청
            ConflictRetryable: 동시 처리에서 패배
            InsufficientFunds: 승인 시점 잔액 부족 (요청 상태 변경 없음)
        """
        if action not in ACTIONS:
            raise ValidationError(f"유효하지 않은 처리입니다: {action}")

        async with self.store.transaction() as tx:
            row = await tx.fetchone(
                """
                SELECT s.*, u.name AS member_name, u.push_subscription
                FROM savings s JOIN users u ON s.user_id = u.id
                WHERE s.id = ?
                """,
                (entry_id,),
            )
            if row is None:
                raise NotFound("savings", entry_id)

            if not SavingsStateMachine(row["status"]).can_transition(action):
                raise InvalidStateTransition(
                    f"이미 처리된 요청입니다 (현재 상태: {row['status']})"
                )

            processed_at = now_iso()
            updated = await tx.fetchone(
                """
                UPDATE savings SET status = ?, processed_at = ?
                WHERE id = ? AND status = 'pending'
                RETURNING *
                """,
                (action, processed_at, entry_id),
            )
            if updated is None:
                raise ConflictRetryable()

            user_id = int(row["user_id"])
            amount = int(row["amount"])

            if action == SavingsStatus.APPROVED.value:
                if row["type"] == SavingsType.WITHDRAWAL.value:
                    affected = await tx.execute(
                        "UPDATE users SET balance = balance - ? WHERE id = ? AND balance >= ?",
                        (amount, user_id, amount),
                    )
                    if affected == 0:
                        raise InsufficientFunds("회원 잔액이 부족하여 출금을 승인할 수 없습니다")

                    await append_entry(
                        tx,
                        description=f"Tarik Tunai Warga: {row['member_name']}",
                        category=JournalCategory.CASH_WITHDRAWAL,
                        credit=amount,
                    )
                else:
                    await tx.execute(
                        "UPDATE users SET balance = balance + ? WHERE id = ?",
                        (amount, user_id),
                    )
                    await append_entry(
                        tx,
                        description=f"Setoran Simpanan: {row['member_name']}",
                        category=JournalCategory.SAVINGS_DEPOSIT,
                        debit=amount,
                    )

        entry = SavingsEntry.from_row(updated)

        logger.info(
            "저축 요청 처리",
            extra={"savings_id": entry_id, "type": entry.type, "action": action},
        )

        approved = action == SavingsStatus.APPROVED.value
        kind = "Penarikan" if entry.type == SavingsType.WITHDRAWAL.value else "Setoran"
        body = f"{kind} Rp{amount:,} {'disetujui' if approved else 'ditolak'}".replace(",", ".")
        self.dispatcher.dispatch(parse_subscription(row["push_subscription"]), body, url="/savings.html")

        return entry

    # =========================================================================
    # 조회
    # =========================================================================

    async def list_for_user(self, user_id: int) -> list[SavingsEntry]:
        """회원 저축 내역 (최신순)"""
        rows = await self.store.fetchall(
            "SELECT * FROM savings WHERE user_id = ? ORDER BY id DESC",
            (user_id,),
        )
        return [SavingsEntry.from_row(row) for row in rows]

    async def list_all(self) -> list[SavingsEntry]:
        """전체 저축 내역 (관리자, 최신순)"""
        rows = await self.store.fetchall(
            """
            SELECT s.*, u.name AS member_name
            FROM savings s JOIN users u ON s.user_id = u.id
            ORDER BY s.id DESC
            """
        )
        return [SavingsEntry.from_row(row) for row in rows]

    async def list_pending_withdrawals(self) -> list[SavingsEntry]:
        """처리 대기 출금 요청 (요청순)"""
        rows = await self.store.fetchall(
            """
            SELECT s.*, u.name AS member_name
            FROM savings s JOIN users u ON s.user_id = u.id
            WHERE s.type = 'withdrawal' AND s.status = 'pending'
            ORDER BY s.id
            """
        )
        return [SavingsEntry.from_row(row) for row in rows]
