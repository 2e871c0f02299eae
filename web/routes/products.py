"""
상품 API

GET    /api/products             - 상품 목록 (회원)
POST   /api/admin/products       - 상품 등록
PUT    /api/admin/products/{id}  - 상품 수정
DELETE /api/admin/products/{id}  - 상품 삭제
"""

from typing import Any

from fastapi import APIRouter, Depends

from core.types import Identity
from engine.manager import LedgerEngine
from web.dependencies import get_current_identity, get_engine, require_admin
from web.models.requests import ProductCreateRequest, ProductUpdateRequest
from web.models.responses import MessageResponse

router = APIRouter(prefix="/api", tags=["products"])


@router.get("/products")
async def list_products(
    identity: Identity = Depends(get_current_identity),
    engine: LedgerEngine = Depends(get_engine),
) -> list[dict[str, Any]]:
    """상품 목록"""
    products = await engine.catalog.list_products()
    return [product.to_dict() for product in products]


@router.post("/admin/products", status_code=201)
async def create_product(
    request: ProductCreateRequest,
    admin: Identity = Depends(require_admin),
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """상품 등록"""
    product = await engine.catalog.create_product(
        name=request.name,
        price=request.price,
        stock=request.stock,
        description=request.description,
        category=request.category,
    )
    return product.to_dict()


@router.put("/admin/products/{product_id}")
async def update_product(
    product_id: int,
    request: ProductUpdateRequest,
    admin: Identity = Depends(require_admin),
    engine: LedgerEngine = Depends(get_engine),
) -> dict[str, Any]:
    """상품 수정 (전달된 항목만)"""
    product = await engine.catalog.update_product(
        product_id,
        **request.model_dump(exclude_unset=True),
    )
    return product.to_dict()


@router.delete("/admin/products/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: int,
    admin: Identity = Depends(require_admin),
    engine: LedgerEngine = Depends(get_engine),
) -> MessageResponse:
    """상품 삭제"""
    await engine.catalog.delete_product(product_id)
    return MessageResponse(message="Produk dihapus")
