"""
결제 게이트웨이 연동 (온라인 저축 입금)

Webhook 처리 순서:
1. 서명 검증 (불일치 → InvalidSignature)
2. 상태 필터 (settlement / capture 외에는 IGNORED)
3. 본문 파싱 (회원 ID, 금액)
4. 트랜잭션: external_ref 조회 → ON CONFLICT DO NOTHING 삽입 → 잔액 입금 → 분개

같은 order_id 가 다시 오면 DUPLICATE 로 응답하고 아무것도 바꾸지 않는다.
"""

import logging
from typing import Any

from adapters.interfaces import ITransactionalStore
from adapters.midtrans.models import SnapSession, WebhookNotification
from adapters.midtrans.signature import verify_signature
from adapters.midtrans.snap_client import MidtransSnapClient
from core.constants import Defaults
from core.errors import DuplicateEvent, InvalidSignature, NotFound, ValidationError
from core.ledger.journal import append_entry
from core.types import JournalCategory, SavingsStatus, SavingsType, WebhookOutcome
from core.utils.idempotency import validate_external_ref
from core.utils.timezone import now_iso

logger = logging.getLogger(__name__)


class PaymentService:
    """결제 서비스

    Args:
        store: 트랜잭션 저장소
        server_key: Midtrans server key (서명 검증용)
        snap_client: Snap 클라이언트 (결제 세션 생성 시 필요)

    Raises:
        ValueError: server_key 가 비어 있음
    """

    def __init__(
        self,
        store: ITransactionalStore,
        server_key: str,
        snap_client: MidtransSnapClient | None = None,
    ):
        if not server_key:
            raise ValueError("Midtrans server_key 는 비어 있을 수 없습니다")

        self.store = store
        self.server_key = server_key
        self.snap_client = snap_client

    async def create_topup_session(
        self,
        user_id: int,
        amount: int,
        memo: str | None = None,
    ) -> SnapSession:
        """온라인 입금 결제 세션 생성

        Raises:
            ValidationError: 0 이하 금액
            NotFound: 회원 없음
            MidtransApiError: 게이트웨이 호출 실패
        """
        if amount <= 0:
            raise ValidationError("입금 금액은 0보다 커야 합니다")
        if self.snap_client is None:
            raise RuntimeError("결제 게이트웨이 클라이언트가 설정되지 않았습니다")

        user = await self.store.fetchone(
            "SELECT id, name, email, phone FROM users WHERE id = ?",
            (user_id,),
        )
        if user is None:
            raise NotFound("user", user_id)

        return await self.snap_client.create_deposit_session(
            user_id=user_id,
            amount=amount,
            name=user["name"],
            email=user["email"],
            phone=user.get("phone"),
            memo=memo,
        )

    async def handle_notification(self, payload: dict[str, Any]) -> WebhookOutcome:
        """결제 알림 처리

        Returns:
            APPLIED / DUPLICATE / IGNORED

        Raises:
            InvalidSignature: 서명 불일치
            ValidationError: 서명은 맞지만 본문이 잘못됨
            NotFound: custom_field1 회원 없음
        """
        notification = WebhookNotification.from_api(payload)

        if not verify_signature(
            notification.order_id,
            notification.status_code,
            notification.gross_amount,
            self.server_key,
            notification.signature_key,
        ):
            logger.warning(
                "Webhook 서명 불일치",
                extra={"order_id": notification.order_id},
            )
            raise InvalidSignature()

        if not notification.is_settled:
            logger.info(
                "Webhook 상태 무시",
                extra={
                    "order_id": notification.order_id,
                    "transaction_status": notification.transaction_status,
                },
            )
            return WebhookOutcome.IGNORED

        external_ref = notification.order_id
        if not validate_external_ref(external_ref):
            raise ValidationError(f"order_id 형식 오류: {external_ref!r}")

        amount = notification.amount()
        user_id = notification.member_id()
        memo = notification.custom_field2 or Defaults.DEPOSIT_MEMO

        try:
            await self._apply_topup(external_ref, user_id, amount, memo)
        except DuplicateEvent:
            logger.info("중복 Webhook 수신", extra={"order_id": external_ref})
            return WebhookOutcome.DUPLICATE

        logger.info(
            "온라인 입금 반영",
            extra={"order_id": external_ref, "user_id": user_id, "amount": amount},
        )
        return WebhookOutcome.APPLIED

    async def _apply_topup(
        self,
        external_ref: str,
        user_id: int,
        amount: int,
        memo: str,
    ) -> None:
        """입금 반영 (단일 트랜잭션)

        Raises:
            DuplicateEvent: 이미 반영된 external_ref
            NotFound: 회원 없음
        """
        async with self.store.transaction() as tx:
            existing = await tx.fetchone(
                "SELECT id FROM savings WHERE external_ref = ?",
                (external_ref,),
            )
            if existing is not None:
                raise DuplicateEvent(external_ref)

            user = await tx.fetchone("SELECT name FROM users WHERE id = ?", (user_id,))
            if user is None:
                raise NotFound("user", user_id)

            now = now_iso()
            inserted = await tx.fetchone(
                """
                INSERT INTO savings (
                    user_id, type, status, amount, note, external_ref,
                    created_at, processed_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT (external_ref) DO NOTHING
                RETURNING id
                """,
                (
                    user_id,
                    SavingsType.DEPOSIT.value,
                    SavingsStatus.APPROVED.value,
                    amount,
                    memo,
                    external_ref,
                    now,
                    now,
                ),
            )
            if inserted is None:
                raise DuplicateEvent(external_ref)

            affected = await tx.execute(
                "UPDATE users SET balance = balance + ? WHERE id = ?",
                (amount, user_id),
            )
            if affected == 0:
                raise NotFound("user", user_id)

            await append_entry(
                tx,
                description=f"Top-up Saldo via Midtrans: {user['name']} ({external_ref})",
                category=JournalCategory.SAVINGS_TOPUP,
                debit=amount,
            )
