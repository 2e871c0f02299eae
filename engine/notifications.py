"""
알림 디스패처

커밋 이후 회원에게 푸시 알림을 fire-and-forget 으로 보낸다.
전송 실패는 로깅만 하고 호출자에게 전파하지 않는다.
"""

import asyncio
import logging
from typing import Any

from adapters.interfaces import INotifier
from core.constants import Defaults
from core.types import PushMessage

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """알림 디스패처

    Args:
        notifier: INotifier 구현체 (None이면 알림 비활성화)

    사용 예시:
    ```python
    dispatcher = NotificationDispatcher(notifier)

    # 트랜잭션 커밋 후
    dispatcher.dispatch(subscription, "Pinjaman Anda disetujui")

    # 종료 시 남은 전송 대기
    await dispatcher.drain()
    ```
    """

    def __init__(self, notifier: INotifier | None = None):
        self.notifier = notifier
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending_count(self) -> int:
        """진행 중인 전송 수"""
        return len(self._tasks)

    def dispatch(
        self,
        subscription: dict[str, Any] | None,
        body: str,
        url: str = "/",
        title: str = Defaults.PUSH_TITLE,
    ) -> bool:
        """백그라운드 전송 예약

        Returns:
            예약 여부 (구독 없음/알림 비활성화 시 False)
        """
        if self.notifier is None or not subscription:
            return False

        message = PushMessage(title=title, body=body, url=url)
        task = asyncio.create_task(self._deliver(subscription, message))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return True

    async def _deliver(self, subscription: dict[str, Any], message: PushMessage) -> None:
        assert self.notifier is not None
        try:
            sent = await self.notifier.send(subscription, message)
        except Exception as e:
            # 알림 실패는 금융 처리 결과에 영향 없음
            logger.error(f"푸시 알림 처리 중 오류: {e}", extra={"title": message.title})
            return

        if not sent:
            logger.info("푸시 알림 미전송", extra={"body": message.body})

    async def drain(self) -> None:
        """예약된 전송이 모두 끝날 때까지 대기"""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
