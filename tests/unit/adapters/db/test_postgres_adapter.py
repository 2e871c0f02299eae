"""
PostgreSQL 어댑터 테스트

DB 없이 placeholder 변환, 상태 문자열 파싱, 예외 변환 검증.
"""

from unittest.mock import AsyncMock

import asyncpg
import pytest

from adapters.db.postgres_adapter import (
    PostgresAdapter,
    PostgresTransaction,
    parse_rowcount,
    translate_placeholders,
)
from core.errors import ConflictRetryable, DuplicateKeyError


class TestTranslatePlaceholders:
    """translate_placeholders 테스트"""

    def test_numbered(self) -> None:
        sql = "UPDATE users SET balance = balance - ? WHERE id = ? AND balance >= ?"

        assert translate_placeholders(sql) == (
            "UPDATE users SET balance = balance - $1 WHERE id = $2 AND balance >= $3"
        )

    def test_literal_untouched(self) -> None:
        sql = "SELECT * FROM users WHERE id = ? AND name = '?'"

        assert translate_placeholders(sql) == "SELECT * FROM users WHERE id = $1 AND name = '?'"

    def test_no_placeholders(self) -> None:
        sql = "SELECT COUNT(*) FROM loans WHERE status = 'pending'"

        assert translate_placeholders(sql) == sql


class TestParseRowcount:
    """parse_rowcount 테스트"""

    @pytest.mark.parametrize(
        ("status", "expected"),
        [
            ("UPDATE 1", 1),
            ("UPDATE 0", 0),
            ("INSERT 0 3", 3),
            ("DELETE 12", 12),
            ("CREATE TABLE", 0),
            ("", 0),
        ],
    )
    def test_parse(self, status: str, expected: int) -> None:
        assert parse_rowcount(status) == expected


class TestPostgresTransaction:
    """PostgresTransaction 테스트 (연결 Mock)"""

    @pytest.mark.asyncio
    async def test_execute_translates_sql(self) -> None:
        conn = AsyncMock()
        conn.execute.return_value = "UPDATE 1"
        tx = PostgresTransaction(conn)

        affected = await tx.execute("UPDATE products SET stock = stock - ? WHERE id = ?", (2, 5))

        assert affected == 1
        conn.execute.assert_awaited_once_with(
            "UPDATE products SET stock = stock - $1 WHERE id = $2", 2, 5
        )

    @pytest.mark.asyncio
    async def test_fetchone_none(self) -> None:
        conn = AsyncMock()
        conn.fetchrow.return_value = None

        assert await PostgresTransaction(conn).fetchone("SELECT 1") is None

    @pytest.mark.asyncio
    async def test_fetchall_dicts(self) -> None:
        conn = AsyncMock()
        conn.fetch.return_value = [{"id": 1}, {"id": 2}]

        rows = await PostgresTransaction(conn).fetchall("SELECT id FROM users WHERE role = ?", ("member",))

        assert rows == [{"id": 1}, {"id": 2}]
        conn.fetch.assert_awaited_once_with("SELECT id FROM users WHERE role = $1", "member")

    @pytest.mark.asyncio
    async def test_unique_violation(self) -> None:
        conn = AsyncMock()
        conn.fetchrow.side_effect = asyncpg.UniqueViolationError("duplicate key")

        with pytest.raises(DuplicateKeyError):
            await PostgresTransaction(conn).fetchone("INSERT INTO repayments VALUES (?) RETURNING id", (1,))

    @pytest.mark.asyncio
    async def test_serialization_failure(self) -> None:
        conn = AsyncMock()
        conn.execute.side_effect = asyncpg.SerializationError("could not serialize")

        with pytest.raises(ConflictRetryable):
            await PostgresTransaction(conn).execute("UPDATE loans SET status = ?", ("paid_off",))

    @pytest.mark.asyncio
    async def test_deadlock(self) -> None:
        conn = AsyncMock()
        conn.execute.side_effect = asyncpg.DeadlockDetectedError("deadlock detected")

        with pytest.raises(ConflictRetryable):
            await PostgresTransaction(conn).execute("UPDATE users SET balance = 0")


class TestPostgresAdapter:
    """PostgresAdapter 테스트 (연결 없이)"""

    def test_initial_state(self) -> None:
        adapter = PostgresAdapter("postgresql://u:p@localhost/bumdes", min_size=1, max_size=4)

        assert adapter.dialect == "postgres"
        assert not adapter.is_connected
        assert adapter.max_size == 4

    @pytest.mark.asyncio
    async def test_not_connected(self) -> None:
        adapter = PostgresAdapter("postgresql://u:p@localhost/bumdes")

        with pytest.raises(RuntimeError, match="Not connected"):
            await adapter.fetchone("SELECT 1")
