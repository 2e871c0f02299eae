"""
웹 푸시 알림 어댑터
"""

from adapters.push.notifier import WebPushNotifier

__all__ = [
    "WebPushNotifier",
]
