"""
저장소 스키마 테스트
"""

import pytest

from adapters.db.schema import INDEXES, SEED, TABLES, render_schema


class TestRenderSchema:
    """render_schema 테스트"""

    def test_sqlite(self) -> None:
        statements = render_schema("sqlite")

        assert len(statements) == len(TABLES) + len(INDEXES) + len(SEED)
        assert "AUTOINCREMENT" in statements[0]
        assert all("{" not in s for s in statements)

    def test_postgres(self) -> None:
        statements = render_schema("postgres")
        joined = "\n".join(statements)

        assert "BIGSERIAL PRIMARY KEY" in joined
        assert "AUTOINCREMENT" not in joined
        assert "balance              BIGINT" in joined

    def test_unknown_dialect(self) -> None:
        with pytest.raises(ValueError, match="mysql"):
            render_schema("mysql")

    def test_idempotency_constraints_present(self) -> None:
        joined = "\n".join(render_schema("sqlite"))

        assert "UNIQUE (loan_id, installment_index)" in joined
        assert "external_ref  TEXT UNIQUE" in joined
        assert "CHECK (balance >= 0)" in joined
        assert "CHECK (stock >= 0)" in joined

    def test_seed_last(self) -> None:
        statements = render_schema("sqlite")

        assert statements[-1].startswith("INSERT INTO cash_journal_head")
