"""
예외 → HTTP 응답 변환 테스트
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from core.errors import (
    ConflictRetryable,
    DuplicateEvent,
    DuplicateRegistration,
    InsufficientFunds,
    InvalidCredentials,
    InvalidSignature,
    InvalidStateTransition,
    LedgerError,
    NotFound,
    OutOfStock,
    PermissionDenied,
    ValidationError,
)
from web.errors import ledger_error_handler, status_for


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (ValidationError("bad"), 400),
        (InsufficientFunds(), 400),
        (DuplicateRegistration(), 400),
        (InvalidCredentials("bad token"), 401),
        (InvalidSignature(), 401),
        (PermissionDenied("admin only"), 403),
        (NotFound("loan", 1), 404),
        (OutOfStock("Beras"), 409),
        (ConflictRetryable(), 409),
        (InvalidStateTransition("already approved"), 409),
        (DuplicateEvent("SETOR-1"), 200),
        (LedgerError("unknown"), 500),
    ],
)
def test_status_for(error: LedgerError, expected: int) -> None:
    assert status_for(error) == expected


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    app.add_exception_handler(LedgerError, ledger_error_handler)

    @app.get("/stock")
    async def stock() -> None:
        raise OutOfStock("Beras 5kg", 1)

    @app.get("/auth")
    async def auth() -> None:
        raise InvalidCredentials("유효하지 않은 토큰입니다")

    return TestClient(app)


class TestLedgerErrorHandler:
    """ledger_error_handler 테스트"""

    def test_body(self, client: TestClient) -> None:
        response = client.get("/stock")

        assert response.status_code == 409
        assert response.json() == {
            "code": "OUT_OF_STOCK",
            "detail": "'Beras 5kg' 재고가 부족합니다",
        }

    def test_unauthorized_header(self, client: TestClient) -> None:
        response = client.get("/auth")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"
        assert response.json()["code"] == "INVALID_CREDENTIALS"
