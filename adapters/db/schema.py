"""
저장소 스키마

두 방언(SQLite / PostgreSQL)이 공유하는 테이블 정의.
방언별 차이는 자동 증가 PK와 정수 타입뿐이므로 템플릿 치환으로 처리.

금액은 모두 정수 루피아(최소 통화 단위)로 저장한다.
"""

from typing import Any

# 방언별 토큰
DIALECT_TOKENS: dict[str, dict[str, str]] = {
    "sqlite": {
        "pk": "INTEGER PRIMARY KEY AUTOINCREMENT",
        "money": "INTEGER",
        "ref": "INTEGER",
    },
    "postgres": {
        "pk": "BIGSERIAL PRIMARY KEY",
        "money": "BIGINT",
        "ref": "BIGINT",
    },
}


TABLES: list[str] = [
    # 회원
    """
    CREATE TABLE IF NOT EXISTS users (
        id                   {pk},
        nik                  TEXT NOT NULL UNIQUE,
        name                 TEXT NOT NULL,
        email                TEXT NOT NULL UNIQUE,
        password_hash        TEXT NOT NULL,
        address              TEXT,
        phone                TEXT,
        role                 TEXT NOT NULL DEFAULT 'member',
        verification_status  TEXT NOT NULL DEFAULT 'pending',
        balance              {money} NOT NULL DEFAULT 0 CHECK (balance >= 0),
        push_subscription    TEXT,
        created_at           TEXT NOT NULL
    )
    """,
    # 상품
    """
    CREATE TABLE IF NOT EXISTS products (
        id           {pk},
        name         TEXT NOT NULL,
        description  TEXT,
        price        {money} NOT NULL CHECK (price > 0),
        stock        INTEGER NOT NULL DEFAULT 0 CHECK (stock >= 0),
        category     TEXT,
        created_at   TEXT NOT NULL
    )
    """,
    # 주문 헤더
    """
    CREATE TABLE IF NOT EXISTS orders (
        id            {pk},
        user_id       {ref} NOT NULL REFERENCES users(id),
        total_amount  {money} NOT NULL CHECK (total_amount > 0),
        status        TEXT NOT NULL DEFAULT 'pending',
        created_at    TEXT NOT NULL,
        updated_at    TEXT NOT NULL
    )
    """,
    # 주문 라인 (구매 시점 가격 고정)
    """
    CREATE TABLE IF NOT EXISTS order_items (
        id           {pk},
        order_id     {ref} NOT NULL REFERENCES orders(id),
        product_id   {ref} NOT NULL,
        quantity     INTEGER NOT NULL CHECK (quantity > 0),
        unit_price   {money} NOT NULL,
        subtotal     {money} NOT NULL
    )
    """,
    # 대출
    """
    CREATE TABLE IF NOT EXISTS loans (
        id                  {pk},
        user_id             {ref} NOT NULL REFERENCES users(id),
        principal           {money} NOT NULL CHECK (principal > 0),
        term_months         INTEGER NOT NULL CHECK (term_months > 0),
        installment_amount  {money} NOT NULL,
        purpose             TEXT,
        status              TEXT NOT NULL DEFAULT 'pending',
        admin_note          TEXT,
        applied_at          TEXT NOT NULL,
        decided_at          TEXT,
        updated_at          TEXT NOT NULL
    )
    """,
    # 상환 (불변 기록, 회차 중복 금지)
    """
    CREATE TABLE IF NOT EXISTS repayments (
        id                 {pk},
        loan_id            {ref} NOT NULL REFERENCES loans(id),
        user_id            {ref} NOT NULL REFERENCES users(id),
        installment_index  INTEGER NOT NULL,
        amount             {money} NOT NULL CHECK (amount > 0),
        paid_at            TEXT NOT NULL,
        UNIQUE (loan_id, installment_index)
    )
    """,
    # 저축 입출금 (external_ref: 결제 게이트웨이 order_id, 멱등성 키)
    """
    CREATE TABLE IF NOT EXISTS savings (
        id            {pk},
        user_id       {ref} NOT NULL REFERENCES users(id),
        type          TEXT NOT NULL,
        status        TEXT NOT NULL DEFAULT 'pending',
        amount        {money} NOT NULL CHECK (amount > 0),
        note          TEXT,
        external_ref  TEXT UNIQUE,
        created_at    TEXT NOT NULL,
        processed_at  TEXT
    )
    """,
    # 현금 분개장 (append-only)
    """
    CREATE TABLE IF NOT EXISTS cash_journal (
        id               {pk},
        description      TEXT NOT NULL,
        debit            {money} NOT NULL DEFAULT 0 CHECK (debit >= 0),
        credit           {money} NOT NULL DEFAULT 0 CHECK (credit >= 0),
        running_balance  {money} NOT NULL,
        category         TEXT NOT NULL,
        created_at       TEXT NOT NULL
    )
    """,
    # 분개장 직렬화용 단일 행
    """
    CREATE TABLE IF NOT EXISTS cash_journal_head (
        id   INTEGER PRIMARY KEY,
        seq  {ref} NOT NULL DEFAULT 0
    )
    """,
]


INDEXES: list[str] = [
    "CREATE INDEX IF NOT EXISTS ix_orders_user ON orders(user_id)",
    "CREATE INDEX IF NOT EXISTS ix_orders_status ON orders(status)",
    "CREATE INDEX IF NOT EXISTS ix_order_items_order ON order_items(order_id)",
    "CREATE INDEX IF NOT EXISTS ix_loans_user ON loans(user_id)",
    "CREATE INDEX IF NOT EXISTS ix_loans_status ON loans(status)",
    "CREATE INDEX IF NOT EXISTS ix_savings_user ON savings(user_id)",
    "CREATE INDEX IF NOT EXISTS ix_savings_status ON savings(type, status)",
]


# 분개장 헤드 행 시드 (두 방언 모두 ON CONFLICT 지원)
SEED: list[str] = [
    "INSERT INTO cash_journal_head (id, seq) VALUES (1, 0) ON CONFLICT (id) DO NOTHING",
]


def render_schema(dialect: str) -> list[str]:
    """방언에 맞는 DDL 목록 반환

    Args:
        dialect: "sqlite" 또는 "postgres"

    Returns:
        실행 순서대로 정렬된 SQL 문 목록

    Raises:
        ValueError: 지원하지 않는 방언
    """
    tokens = DIALECT_TOKENS.get(dialect)
    if tokens is None:
        raise ValueError(f"지원하지 않는 SQL 방언입니다: {dialect}")

    statements = [ddl.format(**tokens).strip() for ddl in TABLES]
    statements.extend(INDEXES)
    statements.extend(SEED)
    return statements


async def init_schema(store: Any) -> None:
    """스키마 초기화 (테이블 생성 + 헤드 행 시드)

    Args:
        store: 연결된 ITransactionalStore 구현체
    """
    async with store.transaction() as tx:
        for statement in render_schema(store.dialect):
            await tx.execute(statement)
