"""
원장 트랜잭션 엔진

회원 잔액, 상품 재고, 현금 분개장을 원자적으로 움직이는 금융 처리.
"""

from engine.manager import LedgerEngine
from engine.models import CartLine, Loan, Order, OrderLine, Product, Repayment, SavingsEntry, User
from engine.notifications import NotificationDispatcher

__all__ = [
    "LedgerEngine",
    "NotificationDispatcher",
    "CartLine",
    "Loan",
    "Order",
    "OrderLine",
    "Product",
    "Repayment",
    "SavingsEntry",
    "User",
]
