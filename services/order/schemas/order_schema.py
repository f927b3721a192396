"""
주문 생성/조회/상태 변경 Pydantic 스키마 정의
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from services.order.models.order_model import OrderStatus
from services.product.schemas.product_schema import ProductSnapshot

# -----------------------------
# 주문 생성 요청 스키마
# -----------------------------

class OrderItemAttribute(BaseModel):
    """선택 옵션 (예: 색상=빨강)"""
    title: str = Field(..., description="옵션명")
    value: str = Field(..., description="옵션값")

class OrderItemCreate(BaseModel):
    product_id: int = Field(..., description="상품 ID")
    quantity: int = Field(..., ge=1, description="주문 수량")
    attributes: List[OrderItemAttribute] = Field(default_factory=list)
    price: float = Field(..., ge=0, description="정가")
    discount_price: Optional[float] = Field(None, ge=0, description="할인가")
    selling_price: float = Field(..., ge=0, description="판매가")
    subtotal: float = Field(..., ge=0, description="라인 소계")

class OrderAddressCreate(BaseModel):
    name: str = Field(..., min_length=1, description="수령인")
    phone: str = Field(..., min_length=1, description="연락처")
    address: str = Field(..., min_length=1, description="배송 주소")

class OrderCreateRequest(BaseModel):
    delivery_charge: float = Field(..., ge=0, description="배송비")
    subtotal: float = Field(..., ge=0, description="상품 합계")
    total_price: float = Field(..., ge=0, description="총 결제 금액 (subtotal + delivery_charge)")
    address: OrderAddressCreate
    order_items: List[OrderItemCreate] = Field(..., min_length=1, description="주문 상품 (1개 이상)")

# -----------------------------
# 주문 조회 응답 스키마
# -----------------------------

class OrderAddressRead(BaseModel):
    address_id: int
    order_id: int
    name: str
    phone: str
    address: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class OrderItemRead(BaseModel):
    order_item_id: int
    order_id: int
    product_id: int
    quantity: int
    attributes: List[OrderItemAttribute] = []
    price: float
    discount_price: Optional[float] = None
    selling_price: float
    subtotal: float
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class OrderListItem(OrderItemRead):
    """목록 조회용 주문 상품 (상품 스냅샷 포함, 상품이 없으면 None)"""
    product: Optional[ProductSnapshot] = None

class OrderHeaderRead(BaseModel):
    order_id: int
    order_no: str
    delivery_charge: float
    subtotal: float
    total_price: float
    status: OrderStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class OrderRead(OrderHeaderRead):
    """배송지/주문 상품이 포함된 주문"""
    address: Optional[OrderAddressRead] = None
    order_items: List[OrderItemRead] = []

class OrderListRead(OrderHeaderRead):
    address: Optional[OrderAddressRead] = None
    order_items: List[OrderListItem] = []

class PageMeta(BaseModel):
    page: int
    limit: int
    total: int

class OrderListResponse(BaseModel):
    meta: PageMeta
    data: List[OrderListRead]

class OrderFilters(BaseModel):
    """목록 조회 필터"""
    search: Optional[str] = None
    status: Optional[OrderStatus] = None
    phone: Optional[str] = None

# -----------------------------
# 상태 변경 / 삭제 스키마
# -----------------------------

class OrderStatusUpdate(BaseModel):
    status: OrderStatus = Field(..., description="변경할 주문 상태")

class OrderDeleteResponse(BaseModel):
    message: str
    order_id: int
    order_no: str
