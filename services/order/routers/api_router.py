"""Order API router entrypoint."""

from fastapi import APIRouter

from services.order.routers.order_router import router as order_router

router = APIRouter(tags=["Orders"])

router.include_router(order_router, prefix="/api/orders", tags=["Orders"])
