"""
gateway/main.py
---------------
API Gateway 서비스 진입점.
각 서비스의 FastAPI router를 통합해서 전체 API 엔드포인트로 제공한다.
- CORS, 공통 예외처리(검증 오류 → 400), 로깅 등 공통 설정도 이곳에서 적용
"""
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from common.config import get_settings
from common.logger import get_logger
from services.order.routers.api_router import router as order_router
from services.product.routers.api_router import router as product_router

logger = get_logger("gateway")
logger.info("API Gateway 초기화 시작...")

try:
    settings = get_settings()
    logger.info("설정 로드 완료")
except Exception as e:
    logger.error(f"설정 로드 실패: {e}")
    raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_tables_on_startup:
        from common.database.mariadb_service import init_models
        logger.info("테이블 자동 생성 중...")
        await init_models()
    yield
    logger.info("API Gateway 종료")


logger.info(f"FastAPI 애플리케이션 생성: 제목={settings.app_name}, 디버그={settings.debug}")

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)

# CORS 설정
logger.info("CORS 미들웨어 설정 중...")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
logger.info("CORS 미들웨어 설정 완료")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """요청 검증 실패 → 400 (필드별 오류 포함)"""
    errors = jsonable_encoder(exc.errors())
    logger.warning(f"요청 검증 실패: {request.method} {request.url.path}, error_count={len(errors)}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "요청 데이터가 올바르지 않습니다.", "errors": errors},
    )


# 라우터 등록 (각 서비스별 router를 include)
logger.info("서비스 라우터 등록 중...")

logger.debug("주문 라우터 포함 중...")
app.include_router(order_router)
logger.info("주문 라우터 포함 완료")

logger.debug("상품 라우터 포함 중...")
app.include_router(product_router)
logger.info("상품 라우터 포함 완료")

logger.info("API Gateway 시작 완료")


if __name__ == "__main__":
    uvicorn.run("gateway.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
