"""
원장 엔진 모델

DB 행을 불변 데이터클래스로 변환. 금액은 정수 루피아.
"""

import json
from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class User:
    """회원

    Attributes:
        id: 회원 ID
        nik: 주민등록번호 (NIK)
        name: 이름
        email: 이메일
        role: member / admin
        verification_status: pending / verified / rejected
        balance: 잔액 (루피아)
        push_subscription: 브라우저 PushSubscription (없으면 None)
    """

    id: int
    nik: str
    name: str
    email: str
    role: str
    verification_status: str
    balance: int
    address: str | None = None
    phone: str | None = None
    push_subscription: dict[str, Any] | None = None
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "User":
        """DB 행에서 생성"""
        return cls(
            id=int(row["id"]),
            nik=row["nik"],
            name=row["name"],
            email=row["email"],
            role=row["role"],
            verification_status=row["verification_status"],
            balance=int(row["balance"]),
            address=row.get("address"),
            phone=row.get("phone"),
            push_subscription=parse_subscription(row.get("push_subscription")),
            created_at=row.get("created_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        """응답용 딕셔너리 (구독 정보 제외)"""
        data = asdict(self)
        data.pop("push_subscription")
        return data


@dataclass(frozen=True)
class Product:
    """상품"""

    id: int
    name: str
    price: int
    stock: int
    description: str | None = None
    category: str | None = None
    created_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Product":
        """DB 행에서 생성"""
        return cls(
            id=int(row["id"]),
            name=row["name"],
            price=int(row["price"]),
            stock=int(row["stock"]),
            description=row.get("description"),
            category=row.get("category"),
            created_at=row.get("created_at"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CartLine:
    """장바구니 한 줄 (체크아웃 입력)"""

    product_id: int
    quantity: int


@dataclass(frozen=True)
class OrderLine:
    """주문 라인 (구매 시점 단가 고정)"""

    id: int
    order_id: int
    product_id: int
    quantity: int
    unit_price: int
    subtotal: int
    product_name: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "OrderLine":
        """DB 행에서 생성"""
        return cls(
            id=int(row["id"]),
            order_id=int(row["order_id"]),
            product_id=int(row["product_id"]),
            quantity=int(row["quantity"]),
            unit_price=int(row["unit_price"]),
            subtotal=int(row["subtotal"]),
            product_name=row.get("product_name"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Order:
    """주문 헤더 + 라인"""

    id: int
    user_id: int
    total_amount: int
    status: str
    created_at: str
    updated_at: str | None = None
    lines: tuple[OrderLine, ...] = field(default_factory=tuple)
    buyer_name: str | None = None

    @classmethod
    def from_row(
        cls,
        row: dict[str, Any],
        lines: list[OrderLine] | None = None,
    ) -> "Order":
        """DB 행에서 생성"""
        return cls(
            id=int(row["id"]),
            user_id=int(row["user_id"]),
            total_amount=int(row["total_amount"]),
            status=row["status"],
            created_at=row["created_at"],
            updated_at=row.get("updated_at"),
            lines=tuple(lines or ()),
            buyer_name=row.get("buyer_name"),
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["lines"] = [line.to_dict() for line in self.lines]
        return data


@dataclass(frozen=True)
class Loan:
    """대출"""

    id: int
    user_id: int
    principal: int
    term_months: int
    installment_amount: int
    status: str
    applied_at: str
    purpose: str | None = None
    admin_note: str | None = None
    decided_at: str | None = None
    borrower_name: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Loan":
        """DB 행에서 생성"""
        return cls(
            id=int(row["id"]),
            user_id=int(row["user_id"]),
            principal=int(row["principal"]),
            term_months=int(row["term_months"]),
            installment_amount=int(row["installment_amount"]),
            status=row["status"],
            applied_at=row["applied_at"],
            purpose=row.get("purpose"),
            admin_note=row.get("admin_note"),
            decided_at=row.get("decided_at"),
            borrower_name=row.get("borrower_name"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Repayment:
    """상환 기록 (불변)"""

    id: int
    loan_id: int
    user_id: int
    installment_index: int
    amount: int
    paid_at: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Repayment":
        """DB 행에서 생성"""
        return cls(
            id=int(row["id"]),
            loan_id=int(row["loan_id"]),
            user_id=int(row["user_id"]),
            installment_index=int(row["installment_index"]),
            amount=int(row["amount"]),
            paid_at=row["paid_at"],
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SavingsEntry:
    """저축 입출금 기록"""

    id: int
    user_id: int
    type: str
    status: str
    amount: int
    created_at: str
    note: str | None = None
    external_ref: str | None = None
    processed_at: str | None = None
    member_name: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "SavingsEntry":
        """DB 행에서 생성"""
        return cls(
            id=int(row["id"]),
            user_id=int(row["user_id"]),
            type=row["type"],
            status=row["status"],
            amount=int(row["amount"]),
            created_at=row["created_at"],
            note=row.get("note"),
            external_ref=row.get("external_ref"),
            processed_at=row.get("processed_at"),
            member_name=row.get("member_name"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def parse_subscription(raw: Any) -> dict[str, Any] | None:
    """저장된 PushSubscription JSON 파싱

    손상된 값은 구독 없음으로 취급
    """
    if not raw:
        return None
    if isinstance(raw, dict):
        return raw
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        return None
    return value if isinstance(value, dict) else None
