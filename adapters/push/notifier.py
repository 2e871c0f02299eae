"""
웹 푸시 알림 서비스

VAPID 서명된 Web Push 로 회원 브라우저에 알림 전송.
INotifier Protocol 준수.
"""

import asyncio
import json
import logging
from typing import Any

from pywebpush import WebPushException, webpush

from core.types import PushMessage

logger = logging.getLogger(__name__)


class WebPushNotifier:
    """웹 푸시 알림 서비스

    INotifier Protocol 구현.
    pywebpush 는 동기 HTTP 호출이므로 스레드에서 실행한다.

    Args:
        vapid_private_key: VAPID 개인키
        contact: VAPID sub claim (mailto:...)
        timeout: 요청 타임아웃 (초)

    사용 예시:
    ```python
    notifier = WebPushNotifier(vapid_private_key="...", contact="mailto:admin@bumdes.com")
    await notifier.send(subscription, PushMessage(title="BUMDes", body="Pinjaman disetujui"))
    ```
    """

    def __init__(
        self,
        vapid_private_key: str,
        contact: str,
        timeout: float = 10.0,
    ):
        self.vapid_private_key = vapid_private_key
        self.contact = contact
        self.timeout = timeout

    async def send(
        self,
        subscription: dict[str, Any],
        message: PushMessage,
    ) -> bool:
        """알림 전송

        Returns:
            전송 성공 여부 (실패해도 예외를 던지지 않음)
        """
        if not subscription or not subscription.get("endpoint"):
            logger.debug("푸시 구독 정보 없음, 전송 생략")
            return False

        try:
            await asyncio.to_thread(self._send_sync, subscription, message)
        except WebPushException as e:
            status = getattr(e.response, "status_code", None)
            logger.warning(
                f"푸시 알림 전송 실패: {e}",
                extra={"status_code": status},
            )
            return False
        except Exception as e:
            logger.warning(
                f"푸시 알림 전송 오류: {e}",
                extra={"error_type": type(e).__name__},
            )
            return False

        logger.debug("푸시 알림 전송 성공", extra={"title": message.title})
        return True

    def _send_sync(self, subscription: dict[str, Any], message: PushMessage) -> None:
        webpush(
            subscription_info=subscription,
            data=json.dumps(message.to_dict()),
            vapid_private_key=self.vapid_private_key,
            vapid_claims={"sub": self.contact},
            timeout=self.timeout,
        )
