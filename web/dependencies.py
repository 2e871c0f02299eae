"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
"""

from typing import AsyncGenerator

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from adapters.auth.identity import JwtIdentityProvider
from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.interfaces import ITransactionalStore
from adapters.midtrans.snap_client import MidtransSnapClient
from core.config.loader import Settings, get_settings
from core.errors import InvalidCredentials, PermissionDenied
from core.types import Identity, StoreBackend
from engine.manager import LedgerEngine
from engine.notifications import NotificationDispatcher

_bearer = HTTPBearer(auto_error=False)


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


# =========================================================================
# 프로세스 공유 자원 (lifespan 에서 설정)
# =========================================================================

# PostgreSQL 커넥션 풀 (SQLite 는 요청마다 연결)
_shared_store: ITransactionalStore | None = None
_dispatcher: NotificationDispatcher = NotificationDispatcher()
_snap_client: MidtransSnapClient | None = None


def set_shared_store(store: ITransactionalStore | None) -> None:
    """공유 저장소 설정

    PostgreSQL 풀 또는 테스트용 저장소.

    Args:
        store: 저장소 (None이면 해제)
    """
    global _shared_store
    _shared_store = store


def get_shared_store() -> ITransactionalStore | None:
    """공유 저장소 반환 (없으면 None)"""
    return _shared_store


def set_dispatcher(dispatcher: NotificationDispatcher) -> None:
    """알림 디스패처 설정"""
    global _dispatcher
    _dispatcher = dispatcher


def get_dispatcher() -> NotificationDispatcher:
    """알림 디스패처 반환"""
    return _dispatcher


def set_snap_client(client: MidtransSnapClient | None) -> None:
    """Snap 클라이언트 설정"""
    global _snap_client
    _snap_client = client


def get_snap_client() -> MidtransSnapClient | None:
    """Snap 클라이언트 반환"""
    return _snap_client


# =========================================================================
# 요청 단위 의존성
# =========================================================================


async def get_store(
    settings: Settings = Depends(get_app_settings),
) -> AsyncGenerator[ITransactionalStore, None]:
    """저장소 반환

    공유 저장소가 있으면 그대로, 없으면 요청마다 SQLite 연결을 연다.
    """
    if _shared_store is not None:
        yield _shared_store
        return

    database = settings.database
    if database.backend != StoreBackend.SQLITE:
        raise RuntimeError("PostgreSQL 저장소가 초기화되지 않았습니다")

    async with SQLiteAdapter(database.sqlite_path) as db:
        yield db


def get_identity_provider(
    settings: Settings = Depends(get_app_settings),
) -> JwtIdentityProvider:
    """토큰 발급/검증기 반환"""
    return JwtIdentityProvider(settings.web_secret_key, settings.token_ttl_hours)


def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    provider: JwtIdentityProvider = Depends(get_identity_provider),
) -> Identity:
    """bearer 토큰에서 요청 주체 복원

    Raises:
        InvalidCredentials: 토큰 없음/무효
    """
    if credentials is None or not credentials.credentials:
        raise InvalidCredentials("인증 토큰이 필요합니다")
    return provider.verify(credentials.credentials)


def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    """관리자 전용

    Raises:
        PermissionDenied: 관리자가 아님
    """
    if not identity.is_admin:
        raise PermissionDenied("관리자 전용 기능입니다")
    return identity


def get_engine(
    store: ITransactionalStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> LedgerEngine:
    """원장 엔진 반환"""
    return LedgerEngine(
        store=store,
        dispatcher=_dispatcher,
        server_key=settings.midtrans.server_key,
        snap_client=_snap_client,
    )
