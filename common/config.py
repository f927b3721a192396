# common/config.py

import os
from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache
from common.logger import get_logger
from typing import List, Optional

logger = get_logger("config")

class Settings(BaseSettings):
    app_name: str = Field("Order Service", description="애플리케이션 이름")
    debug: bool = Field(False, description="디버그 모드 (SQL echo 포함)")

    mariadb_service_url: str = Field(..., description="주문/상품 데이터베이스 URL")
    create_tables_on_startup: bool = Field(False, description="기동 시 테이블 자동 생성 (로컬 개발용)")

    cors_origins: List[str] = Field(["http://localhost:3001"], description="CORS 허용 도메인")

    default_page_limit: int = Field(10, description="목록 조회 기본 페이지 크기")
    max_page_limit: int = Field(100, description="목록 조회 최대 페이지 크기")

    # Facebook 전환 API (값이 없으면 전송 건너뜀)
    facebook_access_token: Optional[str] = Field(None)
    facebook_pixel_id: Optional[str] = Field(None)
    facebook_api_version: str = Field("v18.0")
    facebook_test_event_code: Optional[str] = Field(None)
    conversion_timeout: float = Field(5.0, description="전환 API 요청 타임아웃 (초)")

    bdt_to_usd_rate: float = Field(110.0, description="BDT → USD 환산 비율")

    class Config:
        env_file = os.path.join(os.path.dirname(__file__), "..", ".env")
        env_file_encoding = "utf-8"
        extra = "ignore"  # 정의되지 않은 환경변수 무시

@lru_cache()
def get_settings() -> Settings:
    logger.debug("환경 변수에서 애플리케이션 설정 로드 중")
    try:
        settings = Settings()
        logger.info(f"설정 로드 완료: 앱명={settings.app_name}, 디버그={settings.debug}")
        logger.debug(f"전환 API 설정 여부: pixel_id={'있음' if settings.facebook_pixel_id else '없음'}")
        return settings
    except Exception as e:
        logger.error(f"설정 로드 실패: {str(e)}")
        raise
