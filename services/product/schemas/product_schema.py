"""
상품 조회 / 베스트셀러 Pydantic 스키마
"""
from pydantic import BaseModel
from typing import Optional, List


class ProductSnapshot(BaseModel):
    """주문 조회 시 함께 내려주는 상품 요약"""
    product_id: int
    title: str
    code: Optional[str] = None
    slug: str
    thumbnail: Optional[str] = None
    price: float
    discount: Optional[float] = None

    class Config:
        from_attributes = True


class ProductRead(ProductSnapshot):
    is_free_shipping: bool = False
    is_published: bool = False


class BestSellingProduct(BaseModel):
    """베스트셀러 상품 (완료 주문 기준 판매 수량 집계)"""
    id: int
    title: str
    thumbnail: Optional[str] = None
    price: float
    discount: Optional[float] = None
    slug: str
    is_free_shipping: bool = False
    total_quantity: int
    total_orders: int


class BestSellingProductsResponse(BaseModel):
    data: List[BestSellingProduct]
