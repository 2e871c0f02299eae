"""
Mock 알림 서비스

테스트용 Mock Notifier.
INotifier Protocol 준수.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from core.types import PushMessage


@dataclass
class NotificationRecord:
    """알림 기록"""

    subscription: dict[str, Any]
    message: PushMessage
    timestamp: datetime
    sent: bool

    @property
    def endpoint(self) -> str | None:
        return self.subscription.get("endpoint")


class MockNotifier:
    """Mock 알림 서비스

    INotifier Protocol 구현.
    발송된 모든 알림을 기록하여 테스트에서 검증 가능.

    사용 예시:
    ```python
    notifier = MockNotifier()

    await notifier.send({"endpoint": "https://push.example/1"}, PushMessage("BUMDes", "OK"))

    # 발송 기록 확인
    assert notifier.message_count == 1
    assert notifier.last_notification.message.body == "OK"
    ```
    """

    def __init__(self, should_fail: bool = False):
        """
        Args:
            should_fail: True면 모든 발송 실패 (에러 시나리오 테스트용)
        """
        self.should_fail = should_fail
        self.notifications: list[NotificationRecord] = []

    async def send(
        self,
        subscription: dict[str, Any],
        message: PushMessage,
    ) -> bool:
        """알림 전송"""
        record = NotificationRecord(
            subscription=subscription,
            message=message,
            timestamp=datetime.now(timezone.utc),
            sent=not self.should_fail,
        )

        self.notifications.append(record)

        return not self.should_fail

    # -------------------------------------------------------------------------
    # 테스트 헬퍼 메서드
    # -------------------------------------------------------------------------

    def clear(self) -> None:
        """알림 기록 초기화"""
        self.notifications.clear()

    def get_by_endpoint(self, endpoint: str) -> list[NotificationRecord]:
        """특정 구독 endpoint 로 보낸 알림 조회"""
        return [n for n in self.notifications if n.endpoint == endpoint]

    @property
    def last_notification(self) -> NotificationRecord | None:
        """마지막 알림 조회"""
        return self.notifications[-1] if self.notifications else None

    @property
    def message_count(self) -> int:
        """전체 알림 수"""
        return len(self.notifications)

    @property
    def sent_count(self) -> int:
        """성공적으로 발송된 알림 수"""
        return sum(1 for n in self.notifications if n.sent)

    @property
    def failed_count(self) -> int:
        """발송 실패한 알림 수"""
        return sum(1 for n in self.notifications if not n.sent)
