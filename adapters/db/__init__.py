"""
데이터베이스 어댑터

SQLite(WAL) / PostgreSQL(asyncpg 풀) 트랜잭션 저장소.
"""

from adapters.db.factory import create_store, open_store
from adapters.db.postgres_adapter import PostgresAdapter
from adapters.db.schema import init_schema, render_schema
from adapters.db.sqlite_adapter import SQLiteAdapter, create_connection

__all__ = [
    "SQLiteAdapter",
    "PostgresAdapter",
    "create_connection",
    "create_store",
    "open_store",
    "init_schema",
    "render_schema",
]
