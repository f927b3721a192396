import pytest
import pytest_asyncio

from common.errors import InvalidStatusTransitionException, NotFoundException
from services.order.crud.order_create_crud import create_order
from services.order.crud.order_read_crud import get_order_by_id
from services.order.crud.order_status_crud import (
    approve_order,
    can_transition,
    cancel_order,
    complete_order,
    set_order_status,
)
from services.order.models.order_model import OrderStatus


@pytest_asyncio.fixture
async def order(db, products, make_order_request):
    return await create_order(db, make_order_request([products[0].product_id]))


async def test_approve_moves_pending_to_processing(db, order):
    updated = await approve_order(db, order.order_id)

    assert updated.status == OrderStatus.PROCESSING.value


async def test_complete_twice_is_a_noop(db, session_factory, order):
    first = await complete_order(db, order.order_id)
    second = await complete_order(db, order.order_id)

    assert first.status == second.status == OrderStatus.COMPLETED.value
    async with session_factory() as fresh:
        assert (await get_order_by_id(fresh, order.order_id)).status == OrderStatus.COMPLETED.value


async def test_cancel_then_approve_is_rejected(db, session_factory, order):
    await cancel_order(db, order.order_id)

    with pytest.raises(InvalidStatusTransitionException) as exc_info:
        await approve_order(db, order.order_id)

    assert exc_info.value.status_code == 400
    async with session_factory() as fresh:
        assert (await get_order_by_id(fresh, order.order_id)).status == OrderStatus.CANCELLED.value


async def test_completed_order_can_be_returned(db, order):
    await complete_order(db, order.order_id)

    updated = await set_order_status(db, order.order_id, "returned")

    assert updated.status == OrderStatus.RETURNED.value


async def test_pending_order_can_be_returned(db, session_factory, order):
    updated = await set_order_status(db, order.order_id, OrderStatus.RETURNED)

    assert updated.status == OrderStatus.RETURNED.value
    async with session_factory() as fresh:
        assert (await get_order_by_id(fresh, order.order_id)).status == OrderStatus.RETURNED.value


async def test_unknown_order_raises_not_found(db):
    with pytest.raises(NotFoundException):
        await complete_order(db, 9999)


@pytest.mark.parametrize(
    "current, target, allowed",
    [
        (OrderStatus.PENDING, OrderStatus.PROCESSING, True),
        (OrderStatus.PENDING, OrderStatus.COMPLETED, True),
        (OrderStatus.PENDING, OrderStatus.RETURNED, True),
        (OrderStatus.PROCESSING, OrderStatus.RETURNED, True),
        (OrderStatus.PROCESSING, OrderStatus.PENDING, False),
        (OrderStatus.COMPLETED, OrderStatus.CANCELLED, False),
        (OrderStatus.CANCELLED, OrderStatus.CANCELLED, True),
        (OrderStatus.RETURNED, OrderStatus.COMPLETED, False),
    ],
)
def test_transition_table(current, target, allowed):
    assert can_transition(current, target) is allowed
