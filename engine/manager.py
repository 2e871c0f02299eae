"""
원장 엔진

서비스들을 하나의 진입점으로 묶는다.
요청마다 생성해도 되도록 상태는 저장소와 디스패처에만 둔다.
"""

from adapters.interfaces import ITransactionalStore
from adapters.midtrans.snap_client import MidtransSnapClient
from engine.accounts import AccountService
from engine.catalog import CatalogService
from engine.checkout import CheckoutService
from engine.loans import LoanService
from engine.notifications import NotificationDispatcher
from engine.orders import OrderService
from engine.payments import PaymentService
from engine.reports import ReportService
from engine.savings import SavingsService


class LedgerEngine:
    """원장 엔진

    Args:
        store: 트랜잭션 저장소
        dispatcher: 알림 디스패처
        server_key: Midtrans server key
        snap_client: Snap 클라이언트 (선택)

    사용 예시:
    ```python
    engine = LedgerEngine(store, NotificationDispatcher(notifier), server_key="...")

    order = await engine.checkout.checkout(user_id, [CartLine(1, 2)], declared_total=50_000)
    await engine.loans.repay(loan_id, user_id, 100_000)
    ```
    """

    def __init__(
        self,
        store: ITransactionalStore,
        dispatcher: NotificationDispatcher | None = None,
        *,
        server_key: str,
        snap_client: MidtransSnapClient | None = None,
    ):
        self.store = store
        self.dispatcher = dispatcher or NotificationDispatcher()

        self.accounts = AccountService(store, self.dispatcher)
        self.catalog = CatalogService(store)
        self.checkout = CheckoutService(store)
        self.orders = OrderService(store)
        self.loans = LoanService(store, self.dispatcher)
        self.savings = SavingsService(store, self.dispatcher)
        self.payments = PaymentService(store, server_key, snap_client)
        self.reports = ReportService(store)
