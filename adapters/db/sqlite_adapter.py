"""
SQLite 어댑터

WAL 모드로 SQLite 연결 관리.
웹 요청마다 별도 연결을 열어도 동시 접근 가능하도록 설정.

쓰기 트랜잭션은 BEGIN IMMEDIATE 로 시작하여 시작 시점에 쓰기 잠금을 잡는다.
따라서 SQLite 에서는 쓰기 트랜잭션이 파일 단위로 직렬화된다.
"""

import asyncio
import logging
import sqlite3
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from core.constants import Defaults
from core.errors import ConflictRetryable, DuplicateKeyError

logger = logging.getLogger(__name__)


def _translate_error(exc: sqlite3.Error) -> Exception:
    """sqlite3 예외를 저장소 공통 예외로 변환"""
    message = str(exc)
    if isinstance(exc, sqlite3.IntegrityError) and "UNIQUE" in message:
        constraint = message.split(":", 1)[-1].strip()
        return DuplicateKeyError(message, constraint=constraint)
    if isinstance(exc, sqlite3.OperationalError) and "locked" in message:
        return ConflictRetryable("데이터베이스가 잠겨 있습니다. 잠시 후 다시 시도하세요")
    return exc


async def create_connection(
    db_path: Path | str,
    busy_timeout_ms: int = Defaults.SQLITE_BUSY_TIMEOUT_MS,
) -> aiosqlite.Connection:
    """SQLite 연결 생성 (WAL 모드)

    Args:
        db_path: DB 파일 경로
        busy_timeout_ms: 잠금 대기 시간

    Returns:
        aiosqlite 연결 객체
    """
    db_path_str = str(db_path)

    # 디렉토리가 없으면 생성
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    # isolation_level=None: 트랜잭션 경계를 직접 관리
    conn = await aiosqlite.connect(db_path_str, isolation_level=None)
    conn.row_factory = aiosqlite.Row

    await conn.execute("PRAGMA journal_mode=WAL")
    await conn.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")
    await conn.execute("PRAGMA foreign_keys=ON")

    logger.info(
        "SQLite 연결 생성",
        extra={"db_path": db_path_str},
    )

    return conn


class SQLiteTransaction:
    """SQLite 트랜잭션 핸들

    SQLiteAdapter.transaction() 안에서만 유효.
    """

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] = (),
    ) -> int:
        """SQL 실행 후 영향받은 행 수 반환"""
        try:
            cursor = await self._conn.execute(sql, parameters)
        except sqlite3.Error as e:
            raise _translate_error(e) from e
        rowcount = cursor.rowcount
        await cursor.close()
        return max(rowcount, 0)

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] = (),
    ) -> dict[str, Any] | None:
        """단일 행 조회"""
        rows = await self.fetchall(sql, parameters)
        return rows[0] if rows else None

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] = (),
    ) -> list[dict[str, Any]]:
        """전체 행 조회

        RETURNING 절도 커서를 끝까지 읽어야 문장이 완료되므로 항상 전부 읽는다.
        """
        try:
            cursor = await self._conn.execute(sql, parameters)
            rows = await cursor.fetchall()
            await cursor.close()
        except sqlite3.Error as e:
            raise _translate_error(e) from e
        return [dict(row) for row in rows]


class SQLiteAdapter:
    """SQLite 어댑터

    WAL 모드로 SQLite 연결 관리.
    트랜잭션 컨텍스트 매니저 제공.

    하나의 연결은 동시에 하나의 트랜잭션만 가질 수 있으므로
    같은 어댑터를 공유하는 코루틴은 asyncio.Lock 으로 순서를 맞춘다.

    Args:
        db_path: DB 파일 경로
        busy_timeout_ms: 잠금 대기 시간

    사용 예시:
    ```python
    adapter = SQLiteAdapter(db_path)
    await adapter.connect()

    async with adapter.transaction() as tx:
        await tx.execute("UPDATE users SET balance = balance - ? WHERE id = ?", (100, 1))

    await adapter.close()
    ```
    """

    dialect = "sqlite"

    def __init__(
        self,
        db_path: Path | str,
        busy_timeout_ms: int = Defaults.SQLITE_BUSY_TIMEOUT_MS,
    ):
        self.db_path = Path(db_path)
        self.busy_timeout_ms = busy_timeout_ms
        self._conn: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        """연결 상태 확인"""
        return self._conn is not None

    async def connect(self) -> None:
        """연결 생성"""
        if self._conn is not None:
            return

        self._conn = await create_connection(self.db_path, self.busy_timeout_ms)

    async def close(self) -> None:
        """연결 종료"""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.info("SQLite 연결 종료")

    def _require_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Not connected to database")
        return self._conn

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] = (),
    ) -> dict[str, Any] | None:
        """단일 행 조회 (autocommit)"""
        conn = self._require_conn()
        async with self._lock:
            return await SQLiteTransaction(conn).fetchone(sql, parameters)

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] = (),
    ) -> list[dict[str, Any]]:
        """전체 행 조회 (autocommit)"""
        conn = self._require_conn()
        async with self._lock:
            return await SQLiteTransaction(conn).fetchall(sql, parameters)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[SQLiteTransaction]:
        """트랜잭션 컨텍스트 매니저

        성공 시 자동 커밋, 예외 시 자동 롤백.

        사용 예시:
        ```python
        async with adapter.transaction() as tx:
            await tx.execute("INSERT INTO ...")
            # 성공 시 자동 커밋
        ```
        """
        conn = self._require_conn()

        async with self._lock:
            try:
                await conn.execute("BEGIN IMMEDIATE")
            except sqlite3.Error as e:
                raise _translate_error(e) from e

            try:
                yield SQLiteTransaction(conn)
            except BaseException:
                await conn.execute("ROLLBACK")
                raise

            try:
                await conn.execute("COMMIT")
            except sqlite3.Error as e:
                await conn.execute("ROLLBACK")
                raise _translate_error(e) from e

    async def table_exists(self, table_name: str) -> bool:
        """테이블 존재 여부 확인"""
        result = await self.fetchone(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,),
        )
        return result is not None

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
