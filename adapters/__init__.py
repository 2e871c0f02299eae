"""
어댑터 레이어

외부 서비스(DB, 결제 게이트웨이, 푸시 알림, 토큰 검증)와의 연동을 담당.
Protocol 기반 인터페이스로 Mock 교체 가능.
"""

from adapters.interfaces import (
    IIdentityProvider,
    INotifier,
    ITransaction,
    ITransactionalStore,
)

__all__ = [
    # Interfaces
    "IIdentityProvider",
    "INotifier",
    "ITransaction",
    "ITransactionalStore",
]
