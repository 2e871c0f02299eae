"""
체크아웃 (주문 생성)

하나의 트랜잭션 안에서 순서대로:
1. 잔액 재확인
2. 주문 헤더 생성 (pending)
3. 라인별 조건부 재고 차감 + 라인 생성 (서버 단가 기준)
4. 신고 금액과 서버 계산 합계 비교 후 조건부 잔액 차감
5. 분개장 purchase 기록

어느 단계에서든 실패하면 전부 롤백된다.
"""

import logging

from adapters.interfaces import ITransactionalStore
from core.errors import InsufficientFunds, NotFound, OutOfStock, ValidationError
from core.ledger.journal import append_entry
from core.types import JournalCategory, OrderStatus
from core.utils.timezone import now_iso
from engine.models import CartLine, Order, OrderLine

logger = logging.getLogger(__name__)


def validate_cart(items: list[CartLine], declared_total: int) -> None:
    """트랜잭션 전 입력 검증

    Raises:
        ValidationError: 빈 장바구니, 0 이하 수량/금액
    """
    if not items:
        raise ValidationError("장바구니가 비어 있습니다")
    for item in items:
        if item.quantity <= 0:
            raise ValidationError(f"수량은 0보다 커야 합니다: product {item.product_id}")
    if declared_total <= 0:
        raise ValidationError("결제 금액은 0보다 커야 합니다")


class CheckoutService:
    """체크아웃 서비스

    Args:
        store: 트랜잭션 저장소
    """

    def __init__(self, store: ITransactionalStore):
        self.store = store

    async def checkout(
        self,
        user_id: int,
        items: list[CartLine],
        declared_total: int,
    ) -> Order:
        """주문 생성

        Args:
            user_id: 구매 회원 ID
            items: 장바구니 라인
            declared_total: 클라이언트가 신고한 결제 금액

        Returns:
            생성된 주문 (라인 포함)

        Raises:
            ValidationError: 잘못된 입력 또는 신고 금액 불일치
            NotFound: 회원 또는 상품 없음
            InsufficientFunds: 잔액 부족
            OutOfStock: 재고 부족
        """
        validate_cart(items, declared_total)

        async with self.store.transaction() as tx:
            user = await tx.fetchone(
                "SELECT id, name, balance FROM users WHERE id = ?",
                (user_id,),
            )
            if user is None:
                raise NotFound("user", user_id)
            if int(user["balance"]) < declared_total:
                raise InsufficientFunds()

            now = now_iso()
            header = await tx.fetchone(
                """
                INSERT INTO orders (user_id, total_amount, status, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                RETURNING id
                """,
                (user_id, declared_total, OrderStatus.PENDING.value, now, now),
            )
            assert header is not None
            order_id = int(header["id"])

            lines: list[OrderLine] = []
            computed_total = 0

            for item in items:
                product = await tx.fetchone(
                    "SELECT id, name, price FROM products WHERE id = ?",
                    (item.product_id,),
                )
                if product is None:
                    raise NotFound("product", item.product_id)

                # 재고 확인과 차감을 하나의 조건부 UPDATE 로
                affected = await tx.execute(
                    "UPDATE products SET stock = stock - ? WHERE id = ? AND stock >= ?",
                    (item.quantity, item.product_id, item.quantity),
                )
                if affected == 0:
                    raise OutOfStock(product["name"], item.product_id)

                unit_price = int(product["price"])
                subtotal = unit_price * item.quantity
                computed_total += subtotal

                line = await tx.fetchone(
                    """
                    INSERT INTO order_items (
                        order_id, product_id, quantity, unit_price, subtotal
                    ) VALUES (?, ?, ?, ?, ?)
                    RETURNING id
                    """,
                    (order_id, item.product_id, item.quantity, unit_price, subtotal),
                )
                assert line is not None
                lines.append(
                    OrderLine(
                        id=int(line["id"]),
                        order_id=order_id,
                        product_id=item.product_id,
                        quantity=item.quantity,
                        unit_price=unit_price,
                        subtotal=subtotal,
                        product_name=product["name"],
                    )
                )

            if computed_total != declared_total:
                raise ValidationError(
                    f"결제 금액이 상품 합계와 다릅니다 (신고 {declared_total}, 합계 {computed_total})"
                )

            affected = await tx.execute(
                "UPDATE users SET balance = balance - ? WHERE id = ? AND balance >= ?",
                (declared_total, user_id, declared_total),
            )
            if affected == 0:
                raise InsufficientFunds()

            await append_entry(
                tx,
                description=f"Belanja Toko #{order_id}: {user['name']}",
                category=JournalCategory.PURCHASE,
                debit=declared_total,
            )

        logger.info(
            "주문 생성",
            extra={"order_id": order_id, "user_id": user_id, "total": declared_total},
        )

        return Order(
            id=order_id,
            user_id=user_id,
            total_amount=declared_total,
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
            lines=tuple(lines),
        )
