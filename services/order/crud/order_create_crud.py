"""Order creation CRUD functions."""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from common.errors import OrderCreateFailedException
from common.logger import get_logger
from services.order.crud.order_read_crud import get_order_by_id
from services.order.models.order_model import Order, OrderAddress, OrderItem, OrderStatus
from services.order.schemas.order_schema import OrderCreateRequest
from services.order.utils.order_no import allocate_order_no

logger = get_logger("order_crud")

async def create_order(db: AsyncSession, payload: OrderCreateRequest) -> Order:
    """
    주문 헤더 + 주문 상품 + 배송지를 하나의 트랜잭션으로 생성

    Args:
        db: 데이터베이스 세션
        payload: 주문 생성 요청 데이터 (금액, 배송지, 주문 상품 목록)

    Returns:
        Order: 배송지/주문 상품이 로드된 주문

    Raises:
        OrderCreateFailedException: 어느 단계든 실패 시 (전체 롤백 후)

    Note:
        - CRUD 계층: DB 트랜잭션 처리 담당
        - 1) 주문 번호 생성 2) 헤더 INSERT 3) 주문 상품 INSERT 4) 건수 확인
          5) 배송지 INSERT 6) 헤더에 배송지/주문 상품 연결 후 commit
        - 커밋 전에는 어떤 행도 다른 세션에 보이지 않음
        - 재고 확인은 하지 않음
    """
    if not payload.order_items:
        raise OrderCreateFailedException("주문 상품이 없습니다.")

    logger.debug(f"주문 생성 시작: item_count={len(payload.order_items)}, total_price={payload.total_price}")

    try:
        order_no = await allocate_order_no(db)
        if order_no is None:
            raise OrderCreateFailedException("주문 번호 생성에 실패했습니다.")

        # 관계 컬렉션을 미리 초기화해 두어야 이후 연결 시 지연 로딩이 발생하지 않음
        order = Order(
            order_no=order_no,
            delivery_charge=payload.delivery_charge,
            subtotal=payload.subtotal,
            total_price=payload.total_price,
            status=OrderStatus.PENDING.value,
            address=None,
            order_items=[],
        )
        db.add(order)
        await db.flush()

        if order.order_id is None:
            raise OrderCreateFailedException("주문 생성에 실패했습니다.")
        order_id = order.order_id
        logger.debug(f"주문 헤더 생성: order_id={order_id}, order_no={order_no}")

        order_items = [
            OrderItem(
                order_id=order_id,
                product_id=item.product_id,
                quantity=item.quantity,
                attributes=[attribute.model_dump() for attribute in item.attributes],
                price=item.price,
                discount_price=item.discount_price,
                selling_price=item.selling_price,
                subtotal=item.subtotal,
            )
            for item in payload.order_items
        ]
        db.add_all(order_items)
        await db.flush()

        created_items = [item for item in order_items if item.order_item_id is not None]
        if len(created_items) < len(payload.order_items):
            logger.warning(f"주문 상품 일부 생성 실패: order_id={order_id}, requested={len(payload.order_items)}, created={len(created_items)}")
            raise OrderCreateFailedException("주문 상품 생성에 실패했습니다.")

        address = OrderAddress(
            order_id=order_id,
            name=payload.address.name,
            phone=payload.address.phone,
            address=payload.address.address,
        )
        db.add(address)
        await db.flush()

        if address.address_id is None:
            raise OrderCreateFailedException("배송지 생성에 실패했습니다.")

        order.address = address
        order.order_items = created_items
        await db.flush()

        await db.commit()

    except OrderCreateFailedException as e:
        await db.rollback()
        logger.warning(f"주문 생성 롤백: reason={e.detail}")
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"주문 생성 SQL 실행 실패, 롤백: error={str(e)}")
        raise OrderCreateFailedException() from e
    except Exception as e:
        await db.rollback()
        logger.error(f"주문 생성 중 예기치 못한 오류, 롤백: error={str(e)}")
        raise

    logger.info(f"주문 생성 완료: order_id={order_id}, order_no={order_no}, item_count={len(created_items)}")

    # 커밋 후 배송지/주문 상품을 포함해 다시 조회
    return await get_order_by_id(db, order_id)
