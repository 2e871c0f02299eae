"""
조회 리포트

회원 프로필, 거래 내역, 관리자 대시보드 통계, 현금 분개장 보고서.
모두 읽기 전용 조회.
"""

import logging
from typing import Any

from adapters.interfaces import ITransactionalStore
from core.constants import Limits
from core.errors import NotFound
from core.ledger.journal import CashJournal
from engine.models import Loan, User

logger = logging.getLogger(__name__)

# 회원 거래 내역: 대출 지급, 상환, 구매, 승인된 저축
HISTORY_SQL = """
    SELECT 'Pinjaman Cair' AS kind, principal AS amount,
           COALESCE(decided_at, applied_at) AS occurred_at, 'in' AS direction
    FROM loans WHERE user_id = ? AND status IN ('approved', 'paid_off')
    UNION ALL
    SELECT 'Bayar Cicilan' AS kind, amount, paid_at AS occurred_at, 'out' AS direction
    FROM repayments WHERE user_id = ?
    UNION ALL
    SELECT 'Belanja Toko' AS kind, total_amount AS amount, created_at AS occurred_at,
           CASE WHEN status = 'cancelled' THEN 'void' ELSE 'out' END AS direction
    FROM orders WHERE user_id = ?
    UNION ALL
    SELECT CASE WHEN type = 'deposit' THEN 'Setoran Simpanan' ELSE 'Penarikan Saldo' END AS kind,
           amount, COALESCE(processed_at, created_at) AS occurred_at,
           CASE WHEN type = 'deposit' THEN 'in' ELSE 'out' END AS direction
    FROM savings WHERE user_id = ? AND status = 'approved'
    ORDER BY occurred_at DESC
    LIMIT ?
"""


class ReportService:
    """리포트 서비스

    Args:
        store: 트랜잭션 저장소
    """

    def __init__(self, store: ITransactionalStore):
        self.store = store
        self.journal = CashJournal(store)

    async def transaction_history(
        self,
        user_id: int,
        limit: int = Limits.HISTORY_ROWS,
    ) -> list[dict[str, Any]]:
        """회원 거래 내역 (최신순)"""
        rows = await self.store.fetchall(
            HISTORY_SQL,
            (user_id, user_id, user_id, user_id, limit),
        )
        return [
            {
                "kind": row["kind"],
                "amount": int(row["amount"]),
                "occurred_at": row["occurred_at"],
                "direction": row["direction"],
            }
            for row in rows
        ]

    async def profile(self, user_id: int) -> dict[str, Any]:
        """회원 프로필: 기본 정보 + 진행 중 대출 + 최근 거래

        Raises:
            NotFound: 회원 없음
        """
        row = await self.store.fetchone("SELECT * FROM users WHERE id = ?", (user_id,))
        if row is None:
            raise NotFound("user", user_id)

        loan_row = await self.store.fetchone(
            """
            SELECT * FROM loans
            WHERE user_id = ? AND status = 'approved'
            ORDER BY id DESC LIMIT 1
            """,
            (user_id,),
        )

        return {
            "user": User.from_row(row).to_dict(),
            "loan": Loan.from_row(loan_row).to_dict() if loan_row else None,
            "transactions": await self.transaction_history(
                user_id, limit=Limits.PROFILE_HISTORY_ROWS
            ),
        }

    async def admin_stats(self) -> dict[str, Any]:
        """관리자 대시보드 통계"""
        members = await self.store.fetchone(
            "SELECT COUNT(*) AS total FROM users WHERE role = 'member'"
        )
        balances = await self.store.fetchone(
            "SELECT CAST(COALESCE(SUM(balance), 0) AS BIGINT) AS total FROM users"
        )
        pending_loans = await self.store.fetchone(
            "SELECT COUNT(*) AS total FROM loans WHERE status = 'pending'"
        )
        pending_orders = await self.store.fetchone(
            "SELECT COUNT(*) AS total FROM orders WHERE status = 'pending'"
        )

        recent_loans = await self.store.fetchall(
            """
            SELECT l.id, l.principal, l.purpose, l.applied_at, u.name
            FROM loans l JOIN users u ON l.user_id = u.id
            WHERE l.status = 'pending'
            ORDER BY l.id DESC LIMIT ?
            """,
            (Limits.DASHBOARD_RECENT_ROWS,),
        )
        recent_savings = await self.store.fetchall(
            """
            SELECT s.id, s.amount, s.type, s.created_at, u.name
            FROM savings s JOIN users u ON s.user_id = u.id
            WHERE s.status = 'pending'
            ORDER BY s.id DESC LIMIT ?
            """,
            (Limits.DASHBOARD_RECENT_ROWS,),
        )

        return {
            "total_members": int(members["total"]) if members else 0,
            "total_balance": int(balances["total"]) if balances else 0,
            "pending_loans": int(pending_loans["total"]) if pending_loans else 0,
            "pending_orders": int(pending_orders["total"]) if pending_orders else 0,
            "recent_loans": recent_loans,
            "recent_savings": recent_savings,
        }

    async def cash_report(self, limit: int = Limits.CASH_REPORT_ROWS) -> dict[str, Any]:
        """현금 분개장 보고서: 합계 + 최근 분개"""
        summary = await self.journal.summary()
        entries = await self.journal.latest(limit)

        return {
            "summary": {
                "total_debit": summary.total_debit,
                "total_credit": summary.total_credit,
                "balance": summary.balance,
            },
            "entries": [entry.to_dict() for entry in entries],
        }
