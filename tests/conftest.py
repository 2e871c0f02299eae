"""
pytest 공통 fixture 정의

임시 secrets.yaml, 임시 SQLite 저장소, 엔진, 시드 데이터 헬퍼
"""

import json
import tempfile
from pathlib import Path
from typing import Any, AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio

from adapters.auth.passwords import hash_password
from adapters.db.schema import init_schema
from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.mock.notifier import MockNotifier
from core.config.loader import Settings
from core.utils.timezone import now_iso
from engine.manager import LedgerEngine
from engine.notifications import NotificationDispatcher

SERVER_KEY = "SB-Mid-server-test-key"
WEB_SECRET = "test_jwt_secret_key_xyz"
DEFAULT_PASSWORD = "rahasia123"


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def write_secrets(path: Path, sqlite_path: Path | None = None, mode: str = "sandbox") -> Path:
    """테스트용 secrets.yaml 작성"""
    database = f'  sqlite_path: "{sqlite_path.as_posix()}"\n' if sqlite_path else ""
    content = f"""# 테스트용 secrets.yaml
mode: {mode}

database:
  backend: sqlite
{database}
web:
  secret_key: "{WEB_SECRET}"
  token_ttl_hours: 2

midtrans:
  server_key: "{SERVER_KEY}"
  client_key: "SB-Mid-client-test"
"""
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def temp_secrets_file(temp_dir: Path) -> Path:
    """테스트용 secrets.yaml 파일 생성 (sandbox, SQLite)"""
    return write_secrets(temp_dir / "secrets.yaml", sqlite_path=temp_dir / "ledger.db")


@pytest.fixture
def temp_secrets_file_production(temp_dir: Path) -> Path:
    """테스트용 secrets.yaml 파일 생성 (production 모드)"""
    return write_secrets(temp_dir / "secrets_prod.yaml", mode="production")


@pytest.fixture
def settings(temp_secrets_file: Path) -> Settings:
    """임시 secrets.yaml 로 초기화된 Settings (테스트 후 초기화)"""
    Settings.reset()
    instance = Settings(temp_secrets_file)
    yield instance
    Settings.reset()


# -------------------------------------------------------------------------
# 저장소 / 엔진
# -------------------------------------------------------------------------


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """임시 SQLite 파일 경로"""
    return tmp_path / "ledger.db"


@pytest_asyncio.fixture
async def store(db_path: Path) -> AsyncGenerator[SQLiteAdapter, None]:
    """스키마가 준비된 임시 SQLite 저장소"""
    adapter = SQLiteAdapter(db_path)
    await adapter.connect()
    await init_schema(adapter)
    yield adapter
    await adapter.close()


@pytest.fixture
def mock_notifier() -> MockNotifier:
    """Mock Notifier"""
    return MockNotifier()


@pytest.fixture
def dispatcher(mock_notifier: MockNotifier) -> NotificationDispatcher:
    """MockNotifier 로 전송하는 디스패처"""
    return NotificationDispatcher(mock_notifier)


@pytest.fixture
def engine(store: SQLiteAdapter, dispatcher: NotificationDispatcher) -> LedgerEngine:
    """임시 저장소 위의 원장 엔진"""
    return LedgerEngine(store, dispatcher, server_key=SERVER_KEY)


# -------------------------------------------------------------------------
# 시드 데이터
# -------------------------------------------------------------------------


async def insert_member(
    store: Any,
    name: str = "Budi",
    balance: int = 0,
    nik: str | None = None,
    email: str | None = None,
    role: str = "member",
    status: str = "verified",
    password: str = DEFAULT_PASSWORD,
    subscription: dict[str, Any] | None = None,
) -> int:
    """회원 직접 삽입 후 ID 반환"""
    nik = nik or f"NIK-{name.lower()}"
    email = email or f"{name.lower()}@desa.id"

    async with store.transaction() as tx:
        row = await tx.fetchone(
            """
            INSERT INTO users (
                nik, name, email, password_hash, role, verification_status,
                balance, push_subscription, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            RETURNING id
            """,
            (
                nik,
                name,
                email,
                hash_password(password),
                role,
                status,
                balance,
                json.dumps(subscription) if subscription else None,
                now_iso(),
            ),
        )
    return int(row["id"])


async def insert_product(
    store: Any,
    name: str = "Beras 5kg",
    price: int = 25_000,
    stock: int = 10,
) -> int:
    """상품 직접 삽입 후 ID 반환"""
    async with store.transaction() as tx:
        row = await tx.fetchone(
            """
            INSERT INTO products (name, price, stock, created_at)
            VALUES (?, ?, ?, ?)
            RETURNING id
            """,
            (name, price, stock, now_iso()),
        )
    return int(row["id"])


@pytest.fixture
def make_member(store: SQLiteAdapter) -> Callable[..., Awaitable[int]]:
    """회원 생성 헬퍼"""

    async def _make(**kwargs: Any) -> int:
        return await insert_member(store, **kwargs)

    return _make


@pytest.fixture
def make_product(store: SQLiteAdapter) -> Callable[..., Awaitable[int]]:
    """상품 생성 헬퍼"""

    async def _make(**kwargs: Any) -> int:
        return await insert_product(store, **kwargs)

    return _make


async def fetch_balance(store: Any, user_id: int) -> int:
    """회원 잔액 조회"""
    row = await store.fetchone("SELECT balance FROM users WHERE id = ?", (user_id,))
    return int(row["balance"])


async def fetch_stock(store: Any, product_id: int) -> int:
    """상품 재고 조회"""
    row = await store.fetchone("SELECT stock FROM products WHERE id = ?", (product_id,))
    return int(row["stock"])


async def count_rows(store: Any, table: str) -> int:
    """테이블 행 수"""
    row = await store.fetchone(f"SELECT COUNT(*) AS n FROM {table}")
    return int(row["n"])


@pytest.fixture
def balance_of(store: SQLiteAdapter) -> Callable[[int], Awaitable[int]]:
    """잔액 조회 헬퍼"""

    async def _balance(user_id: int) -> int:
        return await fetch_balance(store, user_id)

    return _balance


@pytest.fixture
def stock_of(store: SQLiteAdapter) -> Callable[[int], Awaitable[int]]:
    """재고 조회 헬퍼"""

    async def _stock(product_id: int) -> int:
        return await fetch_stock(store, product_id)

    return _stock


@pytest.fixture
def row_count(store: SQLiteAdapter) -> Callable[[str], Awaitable[int]]:
    """행 수 조회 헬퍼"""

    async def _count(table: str) -> int:
        return await count_rows(store, table)

    return _count


@pytest.fixture
def member_seeder() -> Callable[..., Awaitable[int]]:
    """임의 저장소에 회원을 넣는 헬퍼 (insert_member)"""
    return insert_member


@pytest.fixture
def product_seeder() -> Callable[..., Awaitable[int]]:
    """임의 저장소에 상품을 넣는 헬퍼 (insert_product)"""
    return insert_product


@pytest.fixture
def server_key() -> str:
    """테스트용 Midtrans server key"""
    return SERVER_KEY


@pytest.fixture
def password() -> str:
    """시드 회원 기본 비밀번호"""
    return DEFAULT_PASSWORD
