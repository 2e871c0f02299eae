"""
Midtrans Snap 클라이언트 테스트

HTTP 호출은 Mock 으로 대체.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from adapters.midtrans.snap_client import MidtransApiError, MidtransSnapClient
from core.constants import Defaults, MidtransEndpoints


@pytest.fixture
def client() -> MidtransSnapClient:
    """Snap 클라이언트 (sandbox)"""
    return MidtransSnapClient(
        server_key="SB-Mid-server-abc",
        snap_url=MidtransEndpoints.SANDBOX_SNAP_URL,
    )


def _http_client(response: httpx.Response | None = None, error: Exception | None = None) -> MagicMock:
    http = MagicMock()
    http.post = AsyncMock(return_value=response, side_effect=error)
    return http


class TestCreateDepositSession:
    """create_deposit_session 테스트"""

    @pytest.mark.asyncio
    async def test_success(self, client: MidtransSnapClient) -> None:
        response = httpx.Response(
            201,
            json={"token": "tok-123", "redirect_url": "https://app.sandbox.midtrans.com/snap/v4/tok-123"},
        )
        http = _http_client(response)

        with patch.object(client, "_ensure_client", AsyncMock(return_value=http)):
            session = await client.create_deposit_session(
                user_id=7,
                amount=100_000,
                name="Budi",
                email="budi@desa.id",
                order_id="SETOR-1-a",
            )

        assert session.order_id == "SETOR-1-a"
        assert session.token == "tok-123"

        call = http.post.await_args
        assert call.args[0] == MidtransEndpoints.SANDBOX_SNAP_URL
        assert call.kwargs["auth"] == ("SB-Mid-server-abc", "")
        body = call.kwargs["json"]
        assert body["transaction_details"] == {"order_id": "SETOR-1-a", "gross_amount": 100_000}
        assert body["custom_field1"] == "7"
        assert body["custom_field2"] == Defaults.DEPOSIT_MEMO
        assert body["item_details"][0]["price"] == 100_000
        assert body["customer_details"]["email"] == "budi@desa.id"

    @pytest.mark.asyncio
    async def test_generates_order_id(self, client: MidtransSnapClient) -> None:
        http = _http_client(httpx.Response(201, json={"token": "t", "redirect_url": "u"}))

        with patch.object(client, "_ensure_client", AsyncMock(return_value=http)):
            session = await client.create_deposit_session(
                user_id=1, amount=10_000, name="A", email="a@desa.id", memo="Tabungan"
            )

        assert session.order_id.startswith("SETOR-")
        assert http.post.await_args.kwargs["json"]["custom_field2"] == "Tabungan"

    @pytest.mark.asyncio
    async def test_api_error(self, client: MidtransSnapClient) -> None:
        response = httpx.Response(
            401,
            json={"error_messages": ["Access denied due to unauthorized transaction"]},
        )
        http = _http_client(response)

        with patch.object(client, "_ensure_client", AsyncMock(return_value=http)):
            with pytest.raises(MidtransApiError) as exc_info:
                await client.create_deposit_session(
                    user_id=1, amount=10_000, name="A", email="a@desa.id"
                )

        assert exc_info.value.status_code == 401
        assert "unauthorized" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_network_error(self, client: MidtransSnapClient) -> None:
        http = _http_client(error=httpx.ConnectError("connection refused"))

        with patch.object(client, "_ensure_client", AsyncMock(return_value=http)):
            with pytest.raises(MidtransApiError, match="connection refused"):
                await client.create_deposit_session(
                    user_id=1, amount=10_000, name="A", email="a@desa.id"
                )

    @pytest.mark.asyncio
    async def test_missing_token(self, client: MidtransSnapClient) -> None:
        http = _http_client(httpx.Response(200, json={"redirect_url": "u"}))

        with patch.object(client, "_ensure_client", AsyncMock(return_value=http)):
            with pytest.raises(MidtransApiError, match="token"):
                await client.create_deposit_session(
                    user_id=1, amount=10_000, name="A", email="a@desa.id"
                )


class TestClientLifecycle:
    """HTTP 클라이언트 생성/종료"""

    @pytest.mark.asyncio
    async def test_lazy_client(self, client: MidtransSnapClient) -> None:
        first = await client._ensure_client()
        second = await client._ensure_client()

        assert first is second

        await client.close()
        assert client._client is None

    @pytest.mark.asyncio
    async def test_close_without_client(self, client: MidtransSnapClient) -> None:
        await client.close()
