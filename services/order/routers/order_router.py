"""
주문 생성/조회/상태 변경/삭제 API 라우터
Router 계층: HTTP 요청/응답 처리, 파라미터 검증, 의존성 주입만 담당
비즈니스 로직과 트랜잭션은 CRUD 계층에 위임
"""
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from common.conversion_api import extract_request_context, send_purchase_event
from common.database.mariadb_service import get_maria_service_db
from common.logger import get_logger
from common.pagination import Pagination, pagination_query
from services.order.crud.order_create_crud import create_order
from services.order.crud.order_delete_crud import delete_order
from services.order.crud.order_read_crud import get_order_by_id, get_order_item_by_id, get_orders
from services.order.crud.order_status_crud import (
    approve_order,
    cancel_order,
    complete_order,
    set_order_status,
)
from services.order.models.order_model import OrderStatus
from services.order.schemas.order_schema import (
    OrderCreateRequest,
    OrderDeleteResponse,
    OrderFilters,
    OrderItemRead,
    OrderListResponse,
    OrderRead,
    OrderStatusUpdate,
)

router = APIRouter()
logger = get_logger("order_router")


@router.post("/create", response_model=OrderRead, status_code=status.HTTP_201_CREATED)
async def create_order_api(
    request: Request,
    payload: OrderCreateRequest,
    background_tasks: BackgroundTasks = None,
    db: AsyncSession = Depends(get_maria_service_db),
):
    """
    주문 생성 (배송지 + 주문 상품 포함, 단일 트랜잭션)

    Note:
        - 커밋 이후 전환 API Purchase 이벤트를 백그라운드로 전송
        - 이벤트 전송 실패는 응답에 영향 없음
    """
    logger.info(f"주문 생성 요청: item_count={len(payload.order_items)}, total_price={payload.total_price}")

    try:
        order = await create_order(db, payload)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"주문 생성 실패: error={str(e)}")
        raise HTTPException(status_code=500, detail="주문 생성 중 오류가 발생했습니다.")

    if background_tasks:
        background_tasks.add_task(
            send_purchase_event,
            order_no=order.order_no,
            total_price=payload.total_price,
            items=[(item.product_id, item.quantity) for item in payload.order_items],
            context=extract_request_context(request),
        )

    logger.info(f"주문 생성 완료: order_id={order.order_id}, order_no={order.order_no}")
    return order


@router.get("/list", response_model=OrderListResponse)
async def list_orders(
    search: Optional[str] = Query(None, description="주문 번호/수령인/연락처/주소/상품명/상품 코드 검색"),
    order_status: Optional[OrderStatus] = Query(None, alias="status", description="주문 상태"),
    phone: Optional[str] = Query(None, description="배송지 연락처 (정확히 일치)"),
    pagination: Pagination = Depends(pagination_query),
    db: AsyncSession = Depends(get_maria_service_db),
):
    """주문 목록 (검색/상태 필터/정렬/페이지네이션)"""
    filters = OrderFilters(search=search, status=order_status, phone=phone)
    logger.debug(f"주문 목록 조회 요청: filters={filters.model_dump()}, page={pagination.page}, limit={pagination.limit}")

    result = await get_orders(db, filters, pagination)
    return OrderListResponse(**result)


@router.get("/items/{order_item_id}", response_model=OrderItemRead)
async def get_order_item(
    order_item_id: int,
    db: AsyncSession = Depends(get_maria_service_db),
):
    """주문 상품 단건 조회"""
    return await get_order_item_by_id(db, order_item_id)


@router.get("/{order_id}", response_model=OrderRead)
async def get_order(
    order_id: int,
    db: AsyncSession = Depends(get_maria_service_db),
):
    """주문 단건 조회 (배송지, 주문 상품 포함)"""
    logger.debug(f"주문 상세 조회 요청: order_id={order_id}")
    return await get_order_by_id(db, order_id)


@router.patch("/status/{order_id}", response_model=OrderRead)
async def update_order_status_api(
    order_id: int,
    status_update: OrderStatusUpdate,
    db: AsyncSession = Depends(get_maria_service_db),
):
    """주문 상태 변경 (허용된 전이만 가능, 같은 상태면 변경 없음)"""
    logger.info(f"주문 상태 변경 요청: order_id={order_id}, status={status_update.status.value}")
    return await set_order_status(db, order_id, status_update.status)


@router.patch("/approve/{order_id}", response_model=OrderRead)
async def approve_order_api(
    order_id: int,
    db: AsyncSession = Depends(get_maria_service_db),
):
    """주문 승인 (→ processing)"""
    logger.info(f"주문 승인 요청: order_id={order_id}")
    return await approve_order(db, order_id)


@router.patch("/complete/{order_id}", response_model=OrderRead)
async def complete_order_api(
    order_id: int,
    db: AsyncSession = Depends(get_maria_service_db),
):
    """주문 완료 (→ completed)"""
    logger.info(f"주문 완료 요청: order_id={order_id}")
    return await complete_order(db, order_id)


@router.patch("/cancel/{order_id}", response_model=OrderRead)
async def cancel_order_api(
    order_id: int,
    db: AsyncSession = Depends(get_maria_service_db),
):
    """주문 취소 (→ cancelled)"""
    logger.info(f"주문 취소 요청: order_id={order_id}")
    return await cancel_order(db, order_id)


@router.delete("/{order_id}", response_model=OrderDeleteResponse)
async def delete_order_api(
    order_id: int,
    db: AsyncSession = Depends(get_maria_service_db),
):
    """주문 삭제 (주문 상품, 배송지 함께 삭제)"""
    logger.info(f"주문 삭제 요청: order_id={order_id}")
    deleted = await delete_order(db, order_id)
    return OrderDeleteResponse(
        message="주문이 삭제되었습니다.",
        order_id=deleted["order_id"],
        order_no=deleted["order_no"],
    )
