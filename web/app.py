"""
FastAPI 애플리케이션

라우터 등록 및 앱 설정.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config.loader import get_settings
from core.constants import Defaults
from core.errors import LedgerError
from core.logging import setup_logging

# 로깅 설정 (콘솔 + 파일)
setup_logging("web")

from web.errors import ledger_error_handler
from web.routes import (
    health,
    auth,
    members,
    products,
    orders,
    loans,
    savings,
    payments,
    reports,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리"""
    from adapters.db.factory import open_store
    from adapters.db.schema import init_schema
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from adapters.midtrans.snap_client import MidtransSnapClient
    from adapters.push.notifier import WebPushNotifier
    from core.types import StoreBackend
    from engine.notifications import NotificationDispatcher
    from web.dependencies import (
        get_dispatcher,
        get_shared_store,
        get_snap_client,
        set_dispatcher,
        set_shared_store,
        set_snap_client,
    )

    settings = get_settings()
    database = settings.database

    # 시작 시 - 저장소 준비 및 스키마 자동 초기화
    owned_store = None
    if get_shared_store() is None:
        if database.backend == StoreBackend.POSTGRES:
            owned_store = await open_store(database)
            await init_schema(owned_store)
            set_shared_store(owned_store)
            logger.info("Web: PostgreSQL 커넥션 풀 준비 완료")
        else:
            async with SQLiteAdapter(database.sqlite_path) as db:
                await init_schema(db)
            logger.info(f"Web: SQLite 스키마 확인 완료 ({database.sqlite_path})")

    # 푸시 알림 (VAPID 키가 있을 때만)
    if settings.webpush.enabled:
        set_dispatcher(
            NotificationDispatcher(
                WebPushNotifier(
                    vapid_private_key=settings.webpush.vapid_private_key,
                    contact=settings.webpush.contact,
                )
            )
        )
        logger.info("Web: 웹 푸시 알림 활성화")
    else:
        logger.info("Web: VAPID 키 없음, 푸시 알림 비활성화")

    owned_snap_client = None
    if get_snap_client() is None:
        owned_snap_client = MidtransSnapClient(
            server_key=settings.midtrans.server_key,
            snap_url=settings.midtrans.snap_url,
        )
        set_snap_client(owned_snap_client)

    yield

    # 종료 시 - 남은 알림 전송 대기 후 리소스 정리
    await get_dispatcher().drain()

    if owned_snap_client is not None:
        await owned_snap_client.close()
        set_snap_client(None)

    if owned_store is not None:
        await owned_store.close()
        set_shared_store(None)
        logger.info("Web: 저장소 연결 종료 완료")


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """예상하지 못한 예외 (세부 내용은 로그에만 남김)"""
    logger.exception("요청 처리 중 예외 발생", extra={"path": request.url.path})
    return JSONResponse(
        status_code=500,
        content={"code": "INTERNAL_ERROR", "detail": "Internal Server Error"},
    )


app = FastAPI(
    title="BUMDes Ledger API",
    description="마을 협동조합 (BUMDes) 상점 / 대출 / 저축 원장 API",
    version=Defaults.API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(LedgerError, ledger_error_handler)
app.add_exception_handler(Exception, unexpected_error_handler)

# =========================================================================
# API 라우터 등록
# =========================================================================

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(members.router)
app.include_router(products.router)
app.include_router(orders.router)
app.include_router(loans.router)
app.include_router(savings.router)
app.include_router(payments.router)
app.include_router(reports.router)
