"""
Mock Notifier 테스트
"""

import pytest

from adapters.interfaces import INotifier
from adapters.mock.notifier import MockNotifier
from core.types import PushMessage


class TestMockNotifier:
    """MockNotifier 테스트"""

    def test_implements_protocol(self, mock_notifier: MockNotifier) -> None:
        assert isinstance(mock_notifier, INotifier)

    @pytest.mark.asyncio
    async def test_records_sent(self, mock_notifier: MockNotifier) -> None:
        sub = {"endpoint": "https://push.example/1"}

        result = await mock_notifier.send(sub, PushMessage(title="BUMDes", body="OK"))

        assert result is True
        assert mock_notifier.message_count == 1
        assert mock_notifier.sent_count == 1
        assert mock_notifier.last_notification.message.body == "OK"
        assert mock_notifier.last_notification.endpoint == "https://push.example/1"

    @pytest.mark.asyncio
    async def test_should_fail(self) -> None:
        notifier = MockNotifier(should_fail=True)

        result = await notifier.send({"endpoint": "e"}, PushMessage(title="t", body="b"))

        assert result is False
        assert notifier.failed_count == 1
        assert notifier.sent_count == 0

    @pytest.mark.asyncio
    async def test_get_by_endpoint_and_clear(self, mock_notifier: MockNotifier) -> None:
        await mock_notifier.send({"endpoint": "a"}, PushMessage(title="t", body="1"))
        await mock_notifier.send({"endpoint": "b"}, PushMessage(title="t", body="2"))
        await mock_notifier.send({"endpoint": "a"}, PushMessage(title="t", body="3"))

        assert [n.message.body for n in mock_notifier.get_by_endpoint("a")] == ["1", "3"]

        mock_notifier.clear()
        assert mock_notifier.message_count == 0
        assert mock_notifier.last_notification is None
