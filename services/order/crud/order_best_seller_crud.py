"""Best-selling product aggregation over completed orders."""

from typing import List

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from common.logger import get_logger
from services.order.models.order_model import Order, OrderItem, OrderStatus
from services.product.models.product_model import Product

logger = get_logger("order_best_seller_crud")

BEST_SELLER_LIMIT = 20

async def get_best_selling_products(db: AsyncSession, limit: int = BEST_SELLER_LIMIT) -> List[dict]:
    """
    완료(completed) 주문 기준 베스트셀러 상품 조회

    Args:
        db: 데이터베이스 세션
        limit: 최대 상품 수 (기본 20)

    Returns:
        List[dict]: id, title, thumbnail, price, discount, slug, is_free_shipping,
                    total_quantity(판매 수량 합), total_orders(주문 수, 중복 제외)

    Note:
        - CRUD 계층: DB 조회만 담당, 캐시 없음 (호출마다 재계산)
        - 삭제된 상품은 결과에서 제외 (INNER JOIN)
        - 판매 수량 내림차순, 동률이면 product_id 오름차순
    """
    total_quantity = func.sum(OrderItem.quantity).label("total_quantity")
    total_orders = func.count(OrderItem.order_id.distinct()).label("total_orders")

    stmt = (
        select(
            Product.product_id.label("id"),
            Product.title.label("title"),
            Product.thumbnail.label("thumbnail"),
            Product.price.label("price"),
            Product.discount.label("discount"),
            Product.slug.label("slug"),
            Product.is_free_shipping.label("is_free_shipping"),
            total_quantity,
            total_orders,
        )
        .select_from(Order)
        .join(OrderItem, OrderItem.order_id == Order.order_id)
        .join(Product, Product.product_id == OrderItem.product_id)
        .where(Order.status == OrderStatus.COMPLETED.value)
        .group_by(
            Product.product_id,
            Product.title,
            Product.thumbnail,
            Product.price,
            Product.discount,
            Product.slug,
            Product.is_free_shipping,
        )
        .order_by(desc("total_quantity"), Product.product_id)
        .limit(limit)
    )

    try:
        rows = (await db.execute(stmt)).mappings().all()
    except Exception as e:
        logger.error(f"베스트셀러 집계 SQL 실행 실패: error={str(e)}")
        raise

    logger.debug(f"베스트셀러 집계 완료: count={len(rows)}")
    return [
        {
            "id": row["id"],
            "title": row["title"],
            "thumbnail": row["thumbnail"],
            "price": row["price"],
            "discount": row["discount"],
            "slug": row["slug"],
            "is_free_shipping": bool(row["is_free_shipping"]),
            "total_quantity": int(row["total_quantity"] or 0),
            "total_orders": int(row["total_orders"] or 0),
        }
        for row in rows
    ]
