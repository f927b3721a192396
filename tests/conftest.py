"""
테스트 공통 설정
- 인메모리 SQLite(aiosqlite) + StaticPool 로 요청 간 같은 DB 공유
- 전환 API 설정은 비워 두어 외부 전송이 일어나지 않게 함
"""
import os

os.environ.setdefault("MARIADB_SERVICE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ["FACEBOOK_ACCESS_TOKEN"] = ""
os.environ["FACEBOOK_PIXEL_ID"] = ""

from typing import List

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from common.database.base_mariadb import MariaBase
from common.database.mariadb_service import get_maria_service_db
from gateway.main import app
from services.order.schemas.order_schema import OrderCreateRequest
from services.product.models.product_model import Product


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(MariaBase.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_maria_service_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def products(session_factory) -> List[Product]:
    """기본 상품 3종"""
    async with session_factory() as session:
        items = [
            Product(title="Wireless Earbuds", slug="wireless-earbuds", code="WE-100",
                    thumbnail="/img/earbuds.jpg", price=1500, discount=10, is_free_shipping=True, is_published=True),
            Product(title="Smart Watch", slug="smart-watch", code="SW-200",
                    thumbnail="/img/watch.jpg", price=3200, discount=None, is_free_shipping=False, is_published=True),
            Product(title="Power Bank", slug="power-bank", code="PB-300",
                    thumbnail="/img/powerbank.jpg", price=900, discount=5, is_free_shipping=False, is_published=True),
        ]
        session.add_all(items)
        await session.commit()
        return items


def build_order_payload(
    product_ids,
    name: str = "Rafiq Islam",
    phone: str = "01711000000",
    address: str = "House 12, Road 5, Dhanmondi, Dhaka",
    quantity: int = 1,
) -> dict:
    """주문 생성 요청 본문"""
    order_items = [
        {
            "product_id": product_id,
            "quantity": quantity,
            "attributes": [{"title": "Color", "value": "Black"}],
            "price": 550,
            "discount_price": 500,
            "selling_price": 500,
            "subtotal": 500 * quantity,
        }
        for product_id in product_ids
    ]
    subtotal = sum(item["subtotal"] for item in order_items)
    return {
        "delivery_charge": 60,
        "subtotal": subtotal,
        "total_price": subtotal + 60,
        "address": {"name": name, "phone": phone, "address": address},
        "order_items": order_items,
    }


@pytest.fixture
def make_order_request():
    def _make(product_ids, **kwargs) -> OrderCreateRequest:
        return OrderCreateRequest(**build_order_payload(product_ids, **kwargs))
    return _make


@pytest.fixture
def order_payload():
    return build_order_payload
