"""
저장소 생성

설정의 database.backend 값에 따라 SQLite / PostgreSQL 어댑터 선택.
"""

import logging

from adapters.db.postgres_adapter import PostgresAdapter
from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import DatabaseConfig
from core.types import StoreBackend

logger = logging.getLogger(__name__)


def create_store(config: DatabaseConfig) -> SQLiteAdapter | PostgresAdapter:
    """설정에 맞는 어댑터 생성 (연결 전)

    Raises:
        ValueError: 지원하지 않는 backend
    """
    backend = StoreBackend(config.backend)

    if backend == StoreBackend.POSTGRES:
        return PostgresAdapter(
            dsn=config.dsn,
            min_size=config.pool_min,
            max_size=config.pool_max,
        )
    return SQLiteAdapter(config.sqlite_path)


async def open_store(config: DatabaseConfig) -> SQLiteAdapter | PostgresAdapter:
    """어댑터 생성 후 연결까지 완료하여 반환"""
    store = create_store(config)
    await store.connect()
    logger.debug("저장소 연결 완료", extra={"backend": store.dialect})
    return store
