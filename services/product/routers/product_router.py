"""
상품 조회 API 라우터 (베스트셀러, 상품 단건)
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from common.database.mariadb_service import get_maria_service_db
from common.errors import NotFoundException
from common.logger import get_logger
from services.order.crud.order_best_seller_crud import get_best_selling_products
from services.product.crud.product_crud import get_product_by_id
from services.product.schemas.product_schema import BestSellingProductsResponse, ProductRead

router = APIRouter()
logger = get_logger("product_router")


@router.get("/best-sales", response_model=BestSellingProductsResponse)
async def list_best_selling_products(
    db: AsyncSession = Depends(get_maria_service_db),
):
    """
    베스트셀러 상품 (완료 주문 기준 판매 수량 상위 20개)
    """
    products = await get_best_selling_products(db)
    logger.info(f"베스트셀러 조회 완료: count={len(products)}")
    return BestSellingProductsResponse(data=products)


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(
    product_id: int,
    db: AsyncSession = Depends(get_maria_service_db),
):
    """상품 단건 조회"""
    product = await get_product_by_id(db, product_id)
    if not product:
        raise NotFoundException("상품")
    return product
