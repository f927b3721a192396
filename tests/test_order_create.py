import pytest
from sqlalchemy import func, select

from common.errors import OrderCreateFailedException
from services.order.crud.order_create_crud import create_order
from services.order.crud.order_read_crud import get_order_by_id
from services.order.models.order_model import Order, OrderAddress, OrderItem, OrderStatus


async def _count(session, model) -> int:
    return (await session.execute(select(func.count()).select_from(model))).scalar_one()


async def test_create_order_writes_header_items_and_address(db, products, make_order_request):
    request = make_order_request([products[0].product_id, products[1].product_id], name="Karim Rahman")

    order = await create_order(db, request)

    assert order.order_id is not None
    assert len(order.order_no) == 6
    assert order.status == OrderStatus.PENDING.value
    assert order.total_price == request.total_price
    assert order.address is not None
    assert order.address.name == "Karim Rahman"
    assert order.address.order_id == order.order_id
    assert [item.product_id for item in order.order_items] == [products[0].product_id, products[1].product_id]
    assert all(item.order_id == order.order_id for item in order.order_items)
    assert order.order_items[0].attributes == [{"title": "Color", "value": "Black"}]


async def test_refetched_order_is_fully_populated(db, session_factory, products, make_order_request):
    request = make_order_request([products[2].product_id], quantity=2)
    created = await create_order(db, request)

    async with session_factory() as fresh:
        order = await get_order_by_id(fresh, created.order_id)

        assert order.address.phone == request.address.phone
        assert order.address.address == request.address.address
        assert len(order.order_items) == 1
        assert order.order_items[0].quantity == 2
        assert order.order_items[0].subtotal == request.order_items[0].subtotal


async def test_item_insert_failure_rolls_back_header(db, session_factory, products, make_order_request):
    request = make_order_request([products[0].product_id, products[1].product_id])
    # 스키마 검증을 우회해 DB CHECK 제약 위반 유도
    request.order_items[1].quantity = 0

    with pytest.raises(OrderCreateFailedException):
        await create_order(db, request)

    async with session_factory() as fresh:
        assert await _count(fresh, Order) == 0
        assert await _count(fresh, OrderItem) == 0
        assert await _count(fresh, OrderAddress) == 0


async def test_address_insert_failure_rolls_back_header_and_items(db, session_factory, products, make_order_request):
    request = make_order_request([products[0].product_id, products[1].product_id])
    # 배송지 INSERT 단계에서 NOT NULL 제약 위반 유도
    request.address.phone = None

    with pytest.raises(OrderCreateFailedException):
        await create_order(db, request)

    async with session_factory() as fresh:
        assert await _count(fresh, Order) == 0
        assert await _count(fresh, OrderItem) == 0
        assert await _count(fresh, OrderAddress) == 0


async def test_empty_item_list_is_rejected(db, session_factory, products, make_order_request):
    request = make_order_request([products[0].product_id])
    request.order_items = []

    with pytest.raises(OrderCreateFailedException):
        await create_order(db, request)

    async with session_factory() as fresh:
        assert await _count(fresh, Order) == 0


async def test_session_is_usable_after_failed_create(db, products, make_order_request):
    bad = make_order_request([products[0].product_id])
    bad.order_items[0].quantity = 0
    with pytest.raises(OrderCreateFailedException):
        await create_order(db, bad)

    order = await create_order(db, make_order_request([products[0].product_id]))

    assert order.order_id is not None
    assert await _count(db, Order) == 1
