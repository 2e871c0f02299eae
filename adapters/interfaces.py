"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
모든 구현체는 이 Protocol을 준수해야 함.

SQL은 항상 `?` 위치 placeholder로 작성한다.
`$n` 번호 placeholder를 쓰는 백엔드는 어댑터 내부에서 변환한다.
"""

from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol, runtime_checkable

from core.types import Identity, PushMessage


Row = dict[str, Any]


@runtime_checkable
class ITransaction(Protocol):
    """트랜잭션 핸들 인터페이스

    하나의 원자적 작업 단위 안에서 실행되는 SQL 실행기.
    같은 트랜잭션의 커밋 전 쓰기를 조회에서 볼 수 있어야 한다.
    """

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] = (),
    ) -> int:
        """SQL 실행

        Returns:
            영향받은 행 수 (조건부 UPDATE 결과 판단용)

        Raises:
            DuplicateKeyError: UNIQUE 제약 위반
            ConflictRetryable: 저장소가 감지한 쓰기 충돌
        """
        ...

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] = (),
    ) -> Row | None:
        """단일 행 조회 (RETURNING 포함)"""
        ...

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] = (),
    ) -> list[Row]:
        """전체 행 조회"""
        ...


@runtime_checkable
class ITransactionalStore(Protocol):
    """영속 저장소 인터페이스

    begin / execute / commit / rollback 계약을 `transaction()` 컨텍스트
    매니저 하나로 노출. 성공 시 커밋, 예외 시 롤백 (all-or-nothing).
    """

    @property
    def dialect(self) -> str:
        """SQL 방언 이름 (sqlite / postgres)"""
        ...

    def transaction(self) -> AbstractAsyncContextManager[ITransaction]:
        """쓰기 트랜잭션 시작"""
        ...

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] = (),
    ) -> Row | None:
        """트랜잭션 밖 단일 행 조회 (autocommit)"""
        ...

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] = (),
    ) -> list[Row]:
        """트랜잭션 밖 전체 행 조회 (autocommit)"""
        ...

    async def close(self) -> None:
        """연결 종료"""
        ...


@runtime_checkable
class INotifier(Protocol):
    """알림 서비스 인터페이스

    회원 기기로 푸시 알림 전송. fire-and-forget:
    실패는 로깅 후 False 반환, 절대 예외를 던지지 않는다.
    """

    async def send(
        self,
        subscription: dict[str, Any],
        message: PushMessage,
    ) -> bool:
        """알림 전송

        Args:
            subscription: 브라우저 PushSubscription (endpoint, keys)
            message: 제목/본문/이동 URL

        Returns:
            전송 성공 여부
        """
        ...


@runtime_checkable
class IIdentityProvider(Protocol):
    """Identity Provider 인터페이스

    bearer 토큰을 검증하여 요청 주체를 복원.
    """

    def verify(self, token: str) -> Identity:
        """토큰 검증

        Raises:
            InvalidCredentials: 토큰 무효/만료
        """
        ...
