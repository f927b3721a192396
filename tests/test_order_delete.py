import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from common.errors import NotFoundException, OrderDeleteFailedException
from services.order.crud.order_create_crud import create_order
from services.order.crud.order_delete_crud import delete_order
from services.order.crud.order_read_crud import get_order_by_id, get_order_item_by_id
from services.order.models.order_model import OrderAddress


async def test_delete_removes_items_and_address(db, session_factory, products, make_order_request):
    order = await create_order(db, make_order_request([p.product_id for p in products]))
    keep = await create_order(db, make_order_request([products[0].product_id]))
    item_ids = [item.order_item_id for item in order.order_items]

    deleted = await delete_order(db, order.order_id)

    assert deleted["order_id"] == order.order_id
    assert deleted["order_no"] == order.order_no
    assert deleted["deleted_item_count"] == 3

    async with session_factory() as fresh:
        with pytest.raises(NotFoundException):
            await get_order_by_id(fresh, order.order_id)
        for item_id in item_ids:
            with pytest.raises(NotFoundException):
                await get_order_item_by_id(fresh, item_id)
        addresses = (await fresh.execute(
            select(func.count()).select_from(OrderAddress).where(OrderAddress.order_id == order.order_id)
        )).scalar_one()
        assert addresses == 0

        remaining = await get_order_by_id(fresh, keep.order_id)
        assert remaining.address is not None
        assert len(remaining.order_items) == 1


async def test_delete_unknown_order_raises_not_found(db):
    with pytest.raises(NotFoundException):
        await delete_order(db, 12345)


@pytest.mark.parametrize("failing_call", [3, 4])
async def test_failed_delete_step_rolls_back_everything(db, session_factory, products, make_order_request, monkeypatch, failing_call):
    # 1: 주문 조회, 2: 주문 상품 삭제, 3: 배송지 삭제, 4: 주문 헤더 삭제
    order = await create_order(db, make_order_request([products[0].product_id, products[1].product_id]))
    item_ids = [item.order_item_id for item in order.order_items]
    calls = []
    original_execute = AsyncSession.execute

    async def failing_execute(self, *args, **kwargs):
        calls.append(args)
        if len(calls) == failing_call:
            raise SQLAlchemyError("삭제 실패 유도")
        return await original_execute(self, *args, **kwargs)

    with monkeypatch.context() as m:
        m.setattr(AsyncSession, "execute", failing_execute)
        with pytest.raises(OrderDeleteFailedException) as exc_info:
            await delete_order(db, order.order_id)

    assert exc_info.value.status_code == 400
    async with session_factory() as fresh:
        remaining = await get_order_by_id(fresh, order.order_id)
        assert remaining.address is not None
        assert [item.order_item_id for item in remaining.order_items] == item_ids
        for item_id in item_ids:
            assert (await get_order_item_by_id(fresh, item_id)).order_id == order.order_id
