"""Order status CRUD functions (상태 전이)."""

from typing import Dict, FrozenSet, Union

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from common.errors import InvalidStatusTransitionException, NotFoundException
from common.logger import get_logger
from services.order.models.order_model import Order, OrderStatus

logger = get_logger("order_status_crud")

# 허용되는 상태 전이 (같은 상태로의 변경은 항상 허용, 변경 없음으로 처리)
ALLOWED_STATUS_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.COMPLETED, OrderStatus.CANCELLED, OrderStatus.RETURNED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED, OrderStatus.RETURNED}),
    OrderStatus.COMPLETED: frozenset({OrderStatus.RETURNED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.RETURNED: frozenset(),
}

def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    """current → target 전이 가능 여부"""
    if current == target:
        return True
    return target in ALLOWED_STATUS_TRANSITIONS.get(current, frozenset())

async def set_order_status(
    db: AsyncSession,
    order_id: int,
    status: Union[OrderStatus, str],
) -> Order:
    """
    주문 상태 변경

    Args:
        db: 데이터베이스 세션
        order_id: 주문 ID
        status: 변경할 상태

    Returns:
        Order: 변경된 주문

    Raises:
        NotFoundException: 주문이 없을 때
        InvalidStatusTransitionException: 허용되지 않은 전이

    Note:
        - 이미 같은 상태면 쓰기 없이 그대로 반환
    """
    target = OrderStatus(status)

    result = await db.execute(select(Order).where(Order.order_id == order_id))
    order = result.scalars().first()
    if not order:
        logger.warning(f"상태 변경 대상 주문 없음: order_id={order_id}")
        raise NotFoundException("주문")

    current = OrderStatus(order.status)
    if current == target:
        logger.info(f"주문 상태 변경 없음 (동일 상태): order_id={order_id}, status={target.value}")
        return order

    if not can_transition(current, target):
        logger.warning(f"허용되지 않은 상태 전이: order_id={order_id}, {current.value} → {target.value}")
        raise InvalidStatusTransitionException(current.value, target.value)

    try:
        order.status = target.value
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"주문 상태 변경 실패: order_id={order_id}, error={str(e)}")
        raise

    logger.info(f"주문 상태 변경 완료: order_id={order_id}, {current.value} → {target.value}")
    return order

async def approve_order(db: AsyncSession, order_id: int) -> Order:
    """주문 승인 (→ processing)"""
    return await set_order_status(db, order_id, OrderStatus.PROCESSING)

async def complete_order(db: AsyncSession, order_id: int) -> Order:
    """주문 완료 (→ completed)"""
    return await set_order_status(db, order_id, OrderStatus.COMPLETED)

async def cancel_order(db: AsyncSession, order_id: int) -> Order:
    """주문 취소 (→ cancelled)"""
    return await set_order_status(db, order_id, OrderStatus.CANCELLED)
