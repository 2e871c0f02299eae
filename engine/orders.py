"""
주문 조회 및 상태 변경

취소는 재고 복원, 구매 금액 환불, 분개장 purchase_refund 기록을
하나의 트랜잭션으로 처리한다.
"""

import logging

from adapters.interfaces import ITransaction, ITransactionalStore
from core.domain.state_machines import OrderStateMachine
from core.errors import ConflictRetryable, InvalidStateTransition, NotFound, ValidationError
from core.ledger.journal import append_entry
from core.types import JournalCategory, OrderStatus
from core.utils.timezone import now_iso
from engine.models import Order, OrderLine

logger = logging.getLogger(__name__)

LINES_SQL = """
    SELECT oi.*, p.name AS product_name
    FROM order_items oi
    LEFT JOIN products p ON oi.product_id = p.id
    WHERE oi.order_id = ?
    ORDER BY oi.id
"""


class OrderService:
    """주문 서비스

    Args:
        store: 트랜잭션 저장소
    """

    def __init__(self, store: ITransactionalStore):
        self.store = store

    async def get_lines(self, order_id: int) -> list[OrderLine]:
        """주문 라인 조회 (삭제된 상품은 이름 없음)"""
        rows = await self.store.fetchall(LINES_SQL, (order_id,))
        return [OrderLine.from_row(row) for row in rows]

    async def get_order(self, order_id: int) -> Order:
        """주문 조회 (라인 포함)

        Raises:
            NotFound: 주문 없음
        """
        row = await self.store.fetchone(
            """
            SELECT o.*, u.name AS buyer_name
            FROM orders o JOIN users u ON o.user_id = u.id
            WHERE o.id = ?
            """,
            (order_id,),
        )
        if row is None:
            raise NotFound("order", order_id)
        return Order.from_row(row, await self.get_lines(order_id))

    async def list_for_user(self, user_id: int) -> list[Order]:
        """회원 주문 내역 (최신순)"""
        rows = await self.store.fetchall(
            "SELECT * FROM orders WHERE user_id = ? ORDER BY id DESC",
            (user_id,),
        )
        return [Order.from_row(row, await self.get_lines(int(row["id"]))) for row in rows]

    async def list_all(self) -> list[Order]:
        """전체 주문 (관리자, 최신순)"""
        rows = await self.store.fetchall(
            """
            SELECT o.*, u.name AS buyer_name
            FROM orders o JOIN users u ON o.user_id = u.id
            ORDER BY o.id DESC
            """
        )
        return [Order.from_row(row, await self.get_lines(int(row["id"]))) for row in rows]

    async def update_status(self, order_id: int, status: str) -> Order:
        """주문 상태 변경 (관리자)

        Raises:
            ValidationError: 알 수 없는 상태
            NotFound: 주문 없음
            InvalidStateTransition: 허용되지 않은 전이
            ConflictRetryable: 동시 변경과 충돌
        """
        try:
            target = OrderStatus(status)
        except ValueError as e:
            raise ValidationError(f"유효하지 않은 주문 상태입니다: {status}") from e

        async with self.store.transaction() as tx:
            row = await tx.fetchone("SELECT * FROM orders WHERE id = ?", (order_id,))
            if row is None:
                raise NotFound("order", order_id)

            current = row["status"]
            if not OrderStateMachine(current).can_transition(target):
                raise InvalidStateTransition(
                    f"주문 상태를 {current}에서 {target.value}(으)로 변경할 수 없습니다"
                )

            affected = await tx.execute(
                "UPDATE orders SET status = ?, updated_at = ? WHERE id = ? AND status = ?",
                (target.value, now_iso(), order_id, current),
            )
            if affected == 0:
                raise ConflictRetryable()

            if target == OrderStatus.CANCELLED:
                await self._reverse(tx, order_id, int(row["user_id"]), int(row["total_amount"]))

        logger.info(
            "주문 상태 변경",
            extra={"order_id": order_id, "from": current, "to": target.value},
        )
        return await self.get_order(order_id)

    async def _reverse(
        self,
        tx: ITransaction,
        order_id: int,
        user_id: int,
        total_amount: int,
    ) -> None:
        """취소된 주문의 재고 복원 및 환불"""
        lines = await tx.fetchall(
            "SELECT product_id, quantity FROM order_items WHERE order_id = ?",
            (order_id,),
        )
        for line in lines:
            # 삭제된 상품은 복원 대상 없음
            await tx.execute(
                "UPDATE products SET stock = stock + ? WHERE id = ?",
                (int(line["quantity"]), int(line["product_id"])),
            )

        affected = await tx.execute(
            "UPDATE users SET balance = balance + ? WHERE id = ?",
            (total_amount, user_id),
        )
        if affected == 0:
            raise NotFound("user", user_id)

        await append_entry(
            tx,
            description=f"Pembatalan Belanja #{order_id}",
            category=JournalCategory.PURCHASE_REFUND,
            credit=total_amount,
        )
