"""
주문 번호 생성 유틸
- 현재 시각(ms) 기반 6자리 번호, 중복 시 무작위 오프셋으로 재시도
"""
import random
import time
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from common.logger import get_logger
from services.order.models.order_model import Order

logger = get_logger("order_no")

ORDER_NO_MODULO = 1_000_000
ORDER_NO_MAX_ATTEMPTS = 10


def generate_order_no(now_ms: Optional[int] = None) -> str:
    """밀리초 타임스탬프를 1,000,000 으로 나눈 나머지를 6자리 0-패딩 문자열로 반환"""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{now_ms % ORDER_NO_MODULO:06d}"


async def allocate_order_no(db: AsyncSession) -> Optional[str]:
    """
    사용 중이지 않은 주문 번호 확보

    Returns:
        str: 사용 가능한 주문 번호 (시도 횟수 초과 시 None)

    Note:
        - 같은 트랜잭션 안에서 조회하므로 동시 생성 충돌은 ORDER_NO 유니크 인덱스가 최종 차단
    """
    now_ms = int(time.time() * 1000)
    candidate = generate_order_no(now_ms)

    for attempt in range(1, ORDER_NO_MAX_ATTEMPTS + 1):
        result = await db.execute(select(Order.order_id).where(Order.order_no == candidate))
        if result.first() is None:
            return candidate

        logger.warning(f"주문 번호 중복: order_no={candidate}, attempt={attempt}")
        candidate = generate_order_no(now_ms + random.randint(1, ORDER_NO_MODULO - 1))

    logger.error(f"주문 번호 확보 실패: {ORDER_NO_MAX_ATTEMPTS}회 시도")
    return None
