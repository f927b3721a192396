"""Product read CRUD functions (주문 조회용 상품 조회)."""

from typing import Dict, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from common.logger import get_logger
from services.product.models.product_model import Product

logger = get_logger("product_crud")


async def get_product_by_id(db: AsyncSession, product_id: int) -> Optional[Product]:
    """상품 단건 조회 (없으면 None)"""
    result = await db.execute(select(Product).where(Product.product_id == product_id))
    product = result.scalars().first()
    if not product:
        logger.debug(f"상품 없음: product_id={product_id}")
    return product


async def get_products_by_ids(db: AsyncSession, product_ids: Iterable[int]) -> Dict[int, Product]:
    """
    상품 일괄 조회

    Returns:
        Dict[int, Product]: product_id → Product (없는 상품은 키 자체가 없음)
    """
    ids = list(set(product_ids))
    if not ids:
        return {}

    result = await db.execute(select(Product).where(Product.product_id.in_(ids)))
    products = {product.product_id: product for product in result.scalars().all()}

    missing = len(ids) - len(products)
    if missing:
        logger.debug(f"조회되지 않은 상품 {missing}건 (삭제된 상품)")
    return products
