"""Order read CRUD functions (단건 조회 + 목록 검색)."""

from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from common.errors import NotFoundException
from common.logger import get_logger
from common.pagination import Pagination
from services.order.models.order_model import Order, OrderAddress, OrderItem
from services.order.schemas.order_schema import OrderFilters, OrderListRead
from services.product.crud.product_crud import get_products_by_ids
from services.product.models.product_model import Product
from services.product.schemas.product_schema import ProductSnapshot

logger = get_logger("order_crud")

# 정렬 허용 필드 (camelCase 별칭 포함)
SORTABLE_FIELDS = {
    "created_at": Order.created_at,
    "createdAt": Order.created_at,
    "updated_at": Order.updated_at,
    "updatedAt": Order.updated_at,
    "order_no": Order.order_no,
    "orderNo": Order.order_no,
    "total_price": Order.total_price,
    "totalPrice": Order.total_price,
    "subtotal": Order.subtotal,
    "delivery_charge": Order.delivery_charge,
    "deliveryCharge": Order.delivery_charge,
    "status": Order.status,
}

async def get_order_by_id(db: AsyncSession, order_id: int) -> Order:
    """
    주문 단건 조회 (배송지, 주문 상품 포함)

    Raises:
        NotFoundException: 주문이 없을 때
    """
    result = await db.execute(
        select(Order)
        .where(Order.order_id == order_id)
        .execution_options(populate_existing=True)
    )
    order = result.scalars().first()
    if not order:
        logger.warning(f"주문을 찾을 수 없음: order_id={order_id}")
        raise NotFoundException("주문")
    return order

async def get_order_item_by_id(db: AsyncSession, order_item_id: int) -> OrderItem:
    """주문 상품 단건 조회"""
    result = await db.execute(select(OrderItem).where(OrderItem.order_item_id == order_item_id))
    order_item = result.scalars().first()
    if not order_item:
        logger.warning(f"주문 상품을 찾을 수 없음: order_item_id={order_item_id}")
        raise NotFoundException("주문 상품")
    return order_item

def _escape_like(value: str) -> str:
    """LIKE 패턴 특수문자(%, _) 이스케이프"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

def build_order_conditions(filters: OrderFilters) -> list:
    """
    목록 조회 WHERE 조건 구성

    Note:
        - search: 주문 번호 / 수령인 / 연락처 / 주소 / 상품명 / 상품 코드 중 하나라도 부분 일치 (대소문자 무시)
        - status: 정확히 일치 (search 와 AND)
        - phone: 배송지 연락처 정확히 일치
        - 조인된 컬럼을 사용하므로 _joined_order_ids() 와 함께 사용해야 함
    """
    conditions = []

    search = (filters.search or "").strip()
    if search:
        pattern = f"%{_escape_like(search)}%"
        conditions.append(
            or_(
                Order.order_no.ilike(pattern, escape="\\"),
                OrderAddress.name.ilike(pattern, escape="\\"),
                OrderAddress.phone.ilike(pattern, escape="\\"),
                OrderAddress.address.ilike(pattern, escape="\\"),
                Product.title.ilike(pattern, escape="\\"),
                Product.code.ilike(pattern, escape="\\"),
            )
        )

    if filters.status:
        conditions.append(Order.status == filters.status.value)

    if filters.phone:
        conditions.append(OrderAddress.phone == filters.phone.strip())

    return conditions

def _joined_order_ids():
    """주문 ⟕ 배송지 ⟕ 주문 상품 ⟕ 상품 (LEFT OUTER JOIN), 주문 ID 만 선택"""
    return (
        select(Order.order_id.label("order_id"))
        .select_from(Order)
        .outerjoin(OrderAddress, OrderAddress.order_id == Order.order_id)
        .outerjoin(OrderItem, OrderItem.order_id == Order.order_id)
        .outerjoin(Product, Product.product_id == OrderItem.product_id)
    )

def _resolve_sort(pagination: Pagination) -> list:
    """정렬 조건 (미지정/허용되지 않은 필드면 최신 생성순)"""
    column = SORTABLE_FIELDS.get(pagination.sort_by) if pagination.sort_by else None
    if column is None:
        if pagination.sort_by:
            logger.warning(f"허용되지 않은 정렬 필드, 기본 정렬 사용: sort_by={pagination.sort_by}")
        return [Order.created_at.desc(), Order.order_id.desc()]

    if pagination.sort_order == "asc":
        return [column.asc(), Order.order_id.asc()]
    return [column.desc(), Order.order_id.desc()]

async def get_orders(
    db: AsyncSession,
    filters: OrderFilters,
    pagination: Pagination,
) -> dict:
    """
    주문 목록 조회 (검색/필터/정렬/페이지네이션)

    Args:
        db: 데이터베이스 세션
        filters: 검색어, 상태, 연락처 필터
        pagination: 정규화된 페이지네이션 값

    Returns:
        dict: {"meta": {"page", "limit", "total"}, "data": List[OrderListRead]}

    Note:
        - CRUD 계층: DB 조회만 담당, 트랜잭션 변경 없음
        - 조인 후 필터링 → 일치한 주문 ID 집합을 기준으로 정렬/skip/limit 적용
        - 주문 상품이 없는 주문도 다른 필드로 검색됨 (LEFT JOIN)
        - total 은 페이지네이션과 무관하게 같은 조건으로 계산
        - 주문 상품별 상품 스냅샷은 일괄 조회, 삭제된 상품은 None
    """
    conditions = build_order_conditions(filters)
    matched = _joined_order_ids().where(*conditions).distinct().subquery()

    count_stmt = select(func.count()).select_from(matched)
    page_stmt = (
        select(Order)
        .where(Order.order_id.in_(select(matched.c.order_id)))
        .order_by(*_resolve_sort(pagination))
        .offset(pagination.skip)
        .limit(pagination.limit)
    )

    try:
        total = (await db.execute(count_stmt)).scalar_one()
        orders: List[Order] = list((await db.execute(page_stmt)).scalars().all())
    except Exception as e:
        logger.error(f"주문 목록 조회 SQL 실행 실패: filters={filters.model_dump()}, error={str(e)}")
        raise

    product_ids = {item.product_id for order in orders for item in order.order_items}
    products = await get_products_by_ids(db, product_ids)

    data: List[OrderListRead] = []
    for order in orders:
        order_read = OrderListRead.model_validate(order)
        for item in order_read.order_items:
            product: Optional[Product] = products.get(item.product_id)
            item.product = ProductSnapshot.model_validate(product) if product else None
        data.append(order_read)

    logger.debug(f"주문 목록 조회 완료: total={total}, page={pagination.page}, returned={len(data)}")

    return {
        "meta": {"page": pagination.page, "limit": pagination.limit, "total": total},
        "data": data,
    }
