"""
Midtrans Snap API 클라이언트

온라인 저축 입금용 결제 세션(Snap token) 생성.
server_key 로 HTTP Basic 인증.
"""

import logging
from typing import Any

import httpx

from adapters.midtrans.models import SnapSession
from core.constants import Defaults
from core.utils.idempotency import make_deposit_order_id

logger = logging.getLogger(__name__)


class MidtransApiError(Exception):
    """Midtrans API 에러"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MidtransSnapClient:
    """Midtrans Snap 클라이언트

    Args:
        server_key: Midtrans server key
        snap_url: Snap 트랜잭션 엔드포인트 (sandbox / production)
        timeout: HTTP 요청 타임아웃 (초)

    사용 예시:
    ```python
    client = MidtransSnapClient(server_key="SB-Mid-server-xxx", snap_url=url)
    session = await client.create_deposit_session(user_id=7, amount=100_000, ...)
    ```
    """

    def __init__(
        self,
        server_key: str,
        snap_url: str,
        timeout: float = 30.0,
    ):
        self.server_key = server_key
        self.snap_url = snap_url
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _ensure_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 반환 (lazy init)"""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """HTTP 클라이언트 종료"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def create_deposit_session(
        self,
        user_id: int,
        amount: int,
        name: str,
        email: str,
        phone: str | None = None,
        memo: str | None = None,
        order_id: str | None = None,
    ) -> SnapSession:
        """입금 결제 세션 생성

        custom_field1 에 회원 ID, custom_field2 에 메모를 실어 보낸다.
        Webhook 이 돌아올 때 이 값으로 입금 대상을 찾는다.

        Args:
            user_id: 회원 ID
            amount: 입금액 (루피아)
            name: 회원 이름
            email: 회원 이메일
            phone: 회원 전화번호
            memo: 메모 (없으면 기본 메모)
            order_id: 주문 ID (없으면 새로 생성)

        Returns:
            Snap 세션

        Raises:
            MidtransApiError: API 호출 실패
        """
        if order_id is None:
            order_id = make_deposit_order_id()
        memo = memo or Defaults.DEPOSIT_MEMO

        body: dict[str, Any] = {
            "transaction_details": {
                "order_id": order_id,
                "gross_amount": amount,
            },
            # 결제 화면에 표시되는 항목
            "item_details": [
                {"id": "SETORAN", "price": amount, "quantity": 1, "name": memo},
            ],
            "customer_details": {
                "first_name": name,
                "email": email,
                "phone": phone or "",
            },
            "custom_field1": str(user_id),
            "custom_field2": memo,
        }

        data = await self._request(body)

        logger.info(
            "Midtrans 결제 세션 생성",
            extra={"order_id": order_id, "user_id": user_id, "amount": amount},
        )

        return SnapSession.from_api(order_id, data)

    async def _request(self, body: dict[str, Any]) -> dict[str, Any]:
        """Snap API 요청 실행

        Raises:
            MidtransApiError: HTTP 에러 또는 네트워크 에러
        """
        client = await self._ensure_client()
        headers = {"Accept": "application/json"}

        try:
            response = await client.post(
                self.snap_url,
                json=body,
                headers=headers,
                auth=(self.server_key, ""),
            )
        except httpx.RequestError as e:
            logger.error(f"Midtrans request error: {e}")
            raise MidtransApiError(str(e)) from e

        if response.status_code >= 400:
            error_data = response.json() if response.content else {}
            messages = error_data.get("error_messages") or [response.text]
            error_msg = "; ".join(str(m) for m in messages)
            logger.error(
                f"Midtrans API error: {response.status_code} - {error_msg}",
                extra={"order_id": body["transaction_details"]["order_id"]},
            )
            raise MidtransApiError(error_msg, response.status_code)

        data = response.json()
        if "token" not in data:
            raise MidtransApiError("Snap 응답에 token 이 없습니다", response.status_code)
        return data
