"""
원장 엔진 모델 테스트
"""

import json

from engine.models import Order, OrderLine, User, parse_subscription

USER_ROW = {
    "id": 3,
    "nik": "3201",
    "name": "Siti",
    "email": "siti@desa.id",
    "role": "member",
    "verification_status": "verified",
    "balance": "150000",
    "push_subscription": json.dumps({"endpoint": "https://push.example/1"}),
}


class TestUser:
    """User 변환"""

    def test_from_row(self) -> None:
        user = User.from_row(USER_ROW)

        assert user.balance == 150_000
        assert user.push_subscription == {"endpoint": "https://push.example/1"}
        assert user.address is None

    def test_to_dict_hides_subscription(self) -> None:
        data = User.from_row(USER_ROW).to_dict()

        assert "push_subscription" not in data
        assert data["name"] == "Siti"


class TestOrder:
    """Order 변환"""

    def test_to_dict_with_lines(self) -> None:
        line = OrderLine.from_row(
            {
                "id": 1,
                "order_id": 9,
                "product_id": 2,
                "quantity": 2,
                "unit_price": 25_000,
                "subtotal": 50_000,
                "product_name": "Beras 5kg",
            }
        )
        order = Order.from_row(
            {
                "id": 9,
                "user_id": 3,
                "total_amount": 50_000,
                "status": "pending",
                "created_at": "2026-01-01T00:00:00+00:00",
            },
            [line],
        )

        data = order.to_dict()

        assert data["lines"][0]["product_name"] == "Beras 5kg"
        assert data["total_amount"] == 50_000
        assert data["updated_at"] is None


class TestParseSubscription:
    """저장된 구독 JSON 파싱"""

    def test_empty(self) -> None:
        assert parse_subscription(None) is None
        assert parse_subscription("") is None

    def test_dict_passthrough(self) -> None:
        assert parse_subscription({"endpoint": "e"}) == {"endpoint": "e"}

    def test_corrupted(self) -> None:
        assert parse_subscription("{not json") is None
        assert parse_subscription("[1, 2]") is None
