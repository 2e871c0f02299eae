"""
주문 상태 변경 통합 테스트
"""

import pytest
import pytest_asyncio

from core.errors import InvalidStateTransition, NotFound, ValidationError
from core.ledger.journal import CashJournal
from engine.models import CartLine

pytestmark = pytest.mark.integration


@pytest_asyncio.fixture
async def placed_order(engine, make_member, make_product):
    user_id = await make_member(balance=100_000)
    product_id = await make_product(price=25_000, stock=10)
    order = await engine.checkout.checkout(
        user_id, [CartLine(product_id, 2)], declared_total=50_000
    )
    return order, user_id, product_id


class TestOrderStatus:
    """주문 상태 전이"""

    @pytest.mark.asyncio
    async def test_processing_then_completed(self, engine, placed_order) -> None:
        order, _, _ = placed_order

        processing = await engine.orders.update_status(order.id, "processing")
        completed = await engine.orders.update_status(order.id, "completed")

        assert processing.status == "processing"
        assert completed.status == "completed"

    @pytest.mark.asyncio
    async def test_completed_is_terminal(self, engine, placed_order) -> None:
        order, _, _ = placed_order
        await engine.orders.update_status(order.id, "processing")
        await engine.orders.update_status(order.id, "completed")

        with pytest.raises(InvalidStateTransition):
            await engine.orders.update_status(order.id, "cancelled")

    @pytest.mark.asyncio
    async def test_cancel_refunds_and_restocks(
        self, engine, placed_order, balance_of, stock_of
    ) -> None:
        order, user_id, product_id = placed_order

        cancelled = await engine.orders.update_status(order.id, "cancelled")

        assert cancelled.status == "cancelled"
        assert await balance_of(user_id) == 100_000
        assert await stock_of(product_id) == 10

        entries = await CashJournal(engine.store).all_entries()
        assert [e.category for e in entries] == ["purchase", "purchase_refund"]
        assert entries[-1].credit == 50_000
        assert entries[-1].running_balance == 0

    @pytest.mark.asyncio
    async def test_cancel_twice_rejected(self, engine, placed_order, balance_of) -> None:
        order, user_id, _ = placed_order
        await engine.orders.update_status(order.id, "cancelled")

        with pytest.raises(InvalidStateTransition):
            await engine.orders.update_status(order.id, "cancelled")

        assert await balance_of(user_id) == 100_000

    @pytest.mark.asyncio
    async def test_cancel_after_product_deleted(
        self, engine, placed_order, balance_of
    ) -> None:
        order, user_id, product_id = placed_order
        await engine.catalog.delete_product(product_id)

        await engine.orders.update_status(order.id, "cancelled")

        assert await balance_of(user_id) == 100_000
        stored = await engine.orders.get_order(order.id)
        assert stored.lines[0].product_name is None

    @pytest.mark.asyncio
    async def test_unknown_status(self, engine, placed_order) -> None:
        order, _, _ = placed_order

        with pytest.raises(ValidationError):
            await engine.orders.update_status(order.id, "shipped")

    @pytest.mark.asyncio
    async def test_unknown_order(self, engine) -> None:
        with pytest.raises(NotFound):
            await engine.orders.update_status(404, "processing")


class TestOrderQueries:
    """주문 조회"""

    @pytest.mark.asyncio
    async def test_list_for_user_and_all(self, engine, placed_order, make_member) -> None:
        order, user_id, _ = placed_order
        other = await make_member(name="Siti")

        assert [o.id for o in await engine.orders.list_for_user(user_id)] == [order.id]
        assert await engine.orders.list_for_user(other) == []

        everything = await engine.orders.list_all()
        assert everything[0].buyer_name == "Budi"
