"""
상품 카탈로그 서비스 (관리자 CRUD)
"""

import logging
from typing import Any

from adapters.interfaces import ITransactionalStore
from core.errors import NotFound, ValidationError
from core.utils.timezone import now_iso
from engine.models import Product

logger = logging.getLogger(__name__)

# 수정 가능한 컬럼
EDITABLE_FIELDS: tuple[str, ...] = ("name", "description", "price", "stock", "category")


def _validate(fields: dict[str, Any]) -> None:
    if "name" in fields and not (fields["name"] or "").strip():
        raise ValidationError("상품명은 비어 있을 수 없습니다")
    if "price" in fields and (fields["price"] is None or int(fields["price"]) <= 0):
        raise ValidationError("가격은 0보다 커야 합니다")
    if "stock" in fields and (fields["stock"] is None or int(fields["stock"]) < 0):
        raise ValidationError("재고는 음수일 수 없습니다")


class CatalogService:
    """상품 카탈로그 서비스

    Args:
        store: 트랜잭션 저장소
    """

    def __init__(self, store: ITransactionalStore):
        self.store = store

    async def list_products(self) -> list[Product]:
        """상품 목록 (최근 등록순)"""
        rows = await self.store.fetchall("SELECT * FROM products ORDER BY id DESC")
        return [Product.from_row(row) for row in rows]

    async def get_product(self, product_id: int) -> Product:
        """상품 조회

        Raises:
            NotFound: 상품 없음
        """
        row = await self.store.fetchone("SELECT * FROM products WHERE id = ?", (product_id,))
        if row is None:
            raise NotFound("product", product_id)
        return Product.from_row(row)

    async def create_product(
        self,
        name: str,
        price: int,
        stock: int = 0,
        description: str | None = None,
        category: str | None = None,
    ) -> Product:
        """상품 등록"""
        _validate({"name": name, "price": price, "stock": stock})

        async with self.store.transaction() as tx:
            row = await tx.fetchone(
                """
                INSERT INTO products (name, description, price, stock, category, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                RETURNING *
                """,
                (name.strip(), description, int(price), int(stock), category, now_iso()),
            )

        assert row is not None
        product = Product.from_row(row)
        logger.info("상품 등록", extra={"product_id": product.id})
        return product

    async def update_product(self, product_id: int, **fields: Any) -> Product:
        """상품 수정 (전달된 항목만)

        Raises:
            ValidationError: 알 수 없는 항목 또는 잘못된 값
            NotFound: 상품 없음
        """
        changes = {k: v for k, v in fields.items() if v is not None}
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"수정할 수 없는 항목입니다: {sorted(unknown)}")
        _validate(changes)

        if not changes:
            return await self.get_product(product_id)

        columns = [name for name in EDITABLE_FIELDS if name in changes]
        assignments = ", ".join(f"{name} = ?" for name in columns)
        params = tuple(changes[name] for name in columns) + (product_id,)

        async with self.store.transaction() as tx:
            row = await tx.fetchone(
                f"UPDATE products SET {assignments} WHERE id = ? RETURNING *",
                params,
            )
            if row is None:
                raise NotFound("product", product_id)

        logger.info("상품 수정", extra={"product_id": product_id, "fields": columns})
        return Product.from_row(row)

    async def delete_product(self, product_id: int) -> None:
        """상품 삭제

        기존 주문 라인은 product_id 만 보존한다.

        Raises:
            NotFound: 상품 없음
        """
        async with self.store.transaction() as tx:
            affected = await tx.execute("DELETE FROM products WHERE id = ?", (product_id,))
            if affected == 0:
                raise NotFound("product", product_id)

        logger.info("상품 삭제", extra={"product_id": product_id})
