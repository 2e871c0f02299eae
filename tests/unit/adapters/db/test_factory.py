"""
저장소 생성 테스트
"""

from pathlib import Path

import pytest

from adapters.db.factory import create_store, open_store
from adapters.db.postgres_adapter import PostgresAdapter
from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import DatabaseConfig
from core.types import StoreBackend


class TestCreateStore:
    """create_store 테스트"""

    def test_sqlite(self, tmp_path: Path) -> None:
        store = create_store(DatabaseConfig(backend=StoreBackend.SQLITE, sqlite_path=tmp_path / "a.db"))

        assert isinstance(store, SQLiteAdapter)
        assert store.db_path == tmp_path / "a.db"
        assert not store.is_connected

    def test_postgres(self) -> None:
        store = create_store(
            DatabaseConfig(
                backend=StoreBackend.POSTGRES,
                dsn="postgresql://u:p@db/bumdes",
                pool_min=1,
                pool_max=8,
            )
        )

        assert isinstance(store, PostgresAdapter)
        assert store.dsn == "postgresql://u:p@db/bumdes"
        assert (store.min_size, store.max_size) == (1, 8)

    @pytest.mark.asyncio
    async def test_open_store_connects(self, tmp_path: Path) -> None:
        store = await open_store(
            DatabaseConfig(backend=StoreBackend.SQLITE, sqlite_path=tmp_path / "b.db")
        )

        try:
            assert store.is_connected
        finally:
            await store.close()
