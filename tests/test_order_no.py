from services.order.models.order_model import Order
from services.order.utils import order_no as order_no_utils
from services.order.utils.order_no import allocate_order_no, generate_order_no


def test_generate_order_no_is_six_digits():
    assert generate_order_no(1_700_000_123_456) == "123456"
    assert generate_order_no(1_000_000_000_042) == "000042"
    assert len(generate_order_no()) == 6


async def test_allocate_order_no_retries_on_collision(db, monkeypatch):
    monkeypatch.setattr(order_no_utils.time, "time", lambda: 1_700_000.123456)
    taken = generate_order_no(1_700_000_123)
    db.add(Order(order_no=taken, delivery_charge=0, subtotal=0, total_price=0))
    await db.commit()

    allocated = await allocate_order_no(db)

    assert allocated is not None
    assert allocated != taken
    assert len(allocated) == 6


async def test_allocate_order_no_gives_up_after_max_attempts(db, monkeypatch):
    monkeypatch.setattr(order_no_utils, "generate_order_no", lambda now_ms=None: "111111")
    db.add(Order(order_no="111111", delivery_charge=0, subtotal=0, total_price=0))
    await db.commit()

    assert await allocate_order_no(db) is None
