"""
상품(PRODUCTS) ORM 모델 정의
주문 서비스에서는 조회(JOIN/스냅샷) 용도로만 사용
"""
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text

from common.database.base_mariadb import MariaBase


class Product(MariaBase):
    """PRODUCTS 테이블 (상품 기본 정보)"""

    __tablename__ = "PRODUCTS"

    product_id = Column("PRODUCT_ID", Integer, primary_key=True, autoincrement=True)
    title = Column("TITLE", String(255), nullable=False)
    slug = Column("SLUG", String(255), nullable=False, index=True)
    code = Column("CODE", String(100), nullable=True)
    thumbnail = Column("THUMBNAIL", Text, nullable=True)
    price = Column("PRICE", Float, nullable=False)
    discount = Column("DISCOUNT", Float, nullable=True)
    is_free_shipping = Column("IS_FREE_SHIPPING", Boolean, nullable=False, default=False)
    is_published = Column("IS_PUBLISHED", Boolean, nullable=False, default=False)
    created_at = Column("CREATED_AT", DateTime, nullable=False, default=datetime.now)
    updated_at = Column("UPDATED_AT", DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)
