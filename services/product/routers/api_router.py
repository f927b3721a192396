"""Product API router entrypoint."""

from fastapi import APIRouter

from services.product.routers.product_router import router as product_router

router = APIRouter(tags=["Products"])

router.include_router(product_router, prefix="/api/products", tags=["Products"])
