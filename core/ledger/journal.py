"""
현금 분개장 (Cash Journal)

BUMDes 현금 흐름을 append-only 로 기록.
각 행은 직전 행의 running_balance 에 debit 을 더하고 credit 을 뺀 값을 가진다.

동시에 두 트랜잭션이 같은 직전 잔액을 읽지 않도록
cash_journal_head 단일 행을 먼저 UPDATE 하여 행 잠금을 잡는다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from core.errors import ValidationError
from core.types import JournalCategory
from core.utils.timezone import now_iso

if TYPE_CHECKING:
    from adapters.interfaces import ITransaction, ITransactionalStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JournalEntry:
    """분개장 한 행"""

    id: int
    description: str
    debit: int
    credit: int
    running_balance: int
    category: str
    created_at: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "JournalEntry":
        """DB 행에서 생성"""
        return cls(
            id=int(row["id"]),
            description=row["description"],
            debit=int(row["debit"]),
            credit=int(row["credit"]),
            running_balance=int(row["running_balance"]),
            category=row["category"],
            created_at=row["created_at"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "debit": self.debit,
            "credit": self.credit,
            "running_balance": self.running_balance,
            "category": self.category,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class JournalSummary:
    """분개장 합계"""

    total_debit: int
    total_credit: int
    balance: int


async def append_entry(
    tx: ITransaction,
    description: str,
    category: JournalCategory | str,
    debit: int = 0,
    credit: int = 0,
) -> JournalEntry:
    """분개 한 행 추가

    호출자의 트랜잭션 안에서 실행되어야 한다.
    호출자가 롤백하면 이 행도 함께 사라진다.

    Args:
        tx: 진행 중인 트랜잭션
        description: 적요
        category: 분개 카테고리
        debit: 현금 유입액 (0 이상)
        credit: 현금 유출액 (0 이상)

    Returns:
        추가된 분개 행

    Raises:
        ValidationError: 금액이 음수이거나 둘 다 0인 경우
    """
    if debit < 0 or credit < 0:
        raise ValidationError("분개 금액은 음수일 수 없습니다")
    if debit == 0 and credit == 0:
        raise ValidationError("debit 또는 credit 중 하나는 0보다 커야 합니다")

    category_value = category.value if isinstance(category, JournalCategory) else category

    # 헤드 행 잠금: 이후 append 는 이 트랜잭션 커밋까지 대기
    await tx.execute("UPDATE cash_journal_head SET seq = seq + 1 WHERE id = 1")

    last = await tx.fetchone(
        "SELECT running_balance FROM cash_journal ORDER BY id DESC LIMIT 1"
    )
    previous = int(last["running_balance"]) if last else 0
    running_balance = previous + debit - credit

    created_at = now_iso()
    row = await tx.fetchone(
        """
        INSERT INTO cash_journal (
            description, debit, credit, running_balance, category, created_at
        ) VALUES (?, ?, ?, ?, ?, ?)
        RETURNING id
        """,
        (description, debit, credit, running_balance, category_value, created_at),
    )
    assert row is not None

    logger.debug(
        "분개 추가",
        extra={
            "category": category_value,
            "debit": debit,
            "credit": credit,
            "running_balance": running_balance,
        },
    )

    return JournalEntry(
        id=int(row["id"]),
        description=description,
        debit=debit,
        credit=credit,
        running_balance=running_balance,
        category=category_value,
        created_at=created_at,
    )


class CashJournal:
    """분개장 조회

    쓰기는 append_entry() 로 엔진 트랜잭션 안에서만 수행.

    Args:
        store: 트랜잭션 저장소
    """

    def __init__(self, store: ITransactionalStore):
        self.store = store

    async def summary(self) -> JournalSummary:
        """전체 합계 및 현재 잔액"""
        row = await self.store.fetchone(
            """
            SELECT
                CAST(COALESCE(SUM(debit), 0) AS BIGINT) AS total_debit,
                CAST(COALESCE(SUM(credit), 0) AS BIGINT) AS total_credit
            FROM cash_journal
            """
        )
        total_debit = int(row["total_debit"]) if row else 0
        total_credit = int(row["total_credit"]) if row else 0
        return JournalSummary(
            total_debit=total_debit,
            total_credit=total_credit,
            balance=total_debit - total_credit,
        )

    async def latest(self, limit: int) -> list[JournalEntry]:
        """최근 분개 (최신순)"""
        rows = await self.store.fetchall(
            "SELECT * FROM cash_journal ORDER BY id DESC LIMIT ?",
            (limit,),
        )
        return [JournalEntry.from_row(row) for row in rows]

    async def all_entries(self) -> list[JournalEntry]:
        """전체 분개 (삽입순)"""
        rows = await self.store.fetchall("SELECT * FROM cash_journal ORDER BY id")
        return [JournalEntry.from_row(row) for row in rows]
