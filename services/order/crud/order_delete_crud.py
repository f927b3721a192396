"""Order deletion CRUD functions."""

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from common.errors import NotFoundException, OrderDeleteFailedException
from common.logger import get_logger
from services.order.models.order_model import Order, OrderAddress, OrderItem

logger = get_logger("order_crud")

async def delete_order(db: AsyncSession, order_id: int) -> dict:
    """
    주문 삭제 (주문 상품, 배송지, 주문 헤더를 하나의 트랜잭션으로 삭제)

    Args:
        db: 데이터베이스 세션
        order_id: 삭제할 주문 ID

    Returns:
        dict: 삭제된 주문 정보 (order_id, order_no, deleted_item_count)

    Raises:
        NotFoundException: 주문이 없을 때
        OrderDeleteFailedException: 삭제 중 실패 (전체 롤백 후)
    """
    result = await db.execute(select(Order.order_id, Order.order_no).where(Order.order_id == order_id))
    row = result.first()
    if not row:
        logger.warning(f"삭제 대상 주문 없음: order_id={order_id}")
        raise NotFoundException("주문")

    try:
        item_result = await db.execute(delete(OrderItem).where(OrderItem.order_id == order_id))
        await db.execute(delete(OrderAddress).where(OrderAddress.order_id == order_id))
        order_result = await db.execute(delete(Order).where(Order.order_id == order_id))

        if order_result.rowcount != 1:
            raise OrderDeleteFailedException()

        await db.commit()
    except OrderDeleteFailedException:
        await db.rollback()
        logger.warning(f"주문 헤더 삭제 건수 불일치, 롤백: order_id={order_id}")
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"주문 삭제 SQL 실행 실패, 롤백: order_id={order_id}, error={str(e)}")
        raise OrderDeleteFailedException() from e

    logger.info(f"주문 삭제 완료: order_id={order_id}, order_no={row.order_no}, deleted_items={item_result.rowcount}")
    return {
        "order_id": row.order_id,
        "order_no": row.order_no,
        "deleted_item_count": item_result.rowcount,
    }
