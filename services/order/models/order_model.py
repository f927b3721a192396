"""
주문(ORDERS), 주문 상품(ORDER_ITEMS), 배송지(ORDER_ADDRESSES) ORM 모델 정의
세 테이블은 하나의 주문 단위(aggregate)로 함께 생성/삭제됨
"""
import enum
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Float, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from common.database.base_mariadb import MariaBase


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RETURNED = "returned"


class Order(MariaBase):
    """ORDERS 테이블 (주문 헤더: 금액 합계, 상태)"""

    __tablename__ = "ORDERS"
    __table_args__ = (
        CheckConstraint("DELIVERY_CHARGE >= 0", name="ck_orders_delivery_charge"),
        CheckConstraint("SUBTOTAL >= 0", name="ck_orders_subtotal"),
        CheckConstraint("TOTAL_PRICE >= 0", name="ck_orders_total_price"),
    )

    order_id = Column("ORDER_ID", Integer, primary_key=True, autoincrement=True)
    order_no = Column("ORDER_NO", String(20), nullable=False, unique=True)
    delivery_charge = Column("DELIVERY_CHARGE", Float, nullable=False, default=0)
    subtotal = Column("SUBTOTAL", Float, nullable=False)
    total_price = Column("TOTAL_PRICE", Float, nullable=False)
    status = Column("STATUS", String(20), nullable=False, default=OrderStatus.PENDING.value, index=True)
    created_at = Column("CREATED_AT", DateTime, nullable=False, default=datetime.now, index=True)
    updated_at = Column("UPDATED_AT", DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    address = relationship(
        "OrderAddress", uselist=False, back_populates="order", lazy="selectin"
    )
    order_items = relationship(
        "OrderItem", back_populates="order", lazy="selectin", order_by="OrderItem.order_item_id"
    )


class OrderItem(MariaBase):
    """ORDER_ITEMS 테이블 (주문 상품 라인, 상품 1종당 1행)"""

    __tablename__ = "ORDER_ITEMS"
    __table_args__ = (
        CheckConstraint("QUANTITY >= 1", name="ck_order_items_quantity"),
        CheckConstraint("PRICE >= 0", name="ck_order_items_price"),
        CheckConstraint("DISCOUNT_PRICE IS NULL OR DISCOUNT_PRICE >= 0", name="ck_order_items_discount_price"),
        CheckConstraint("SELLING_PRICE >= 0", name="ck_order_items_selling_price"),
        CheckConstraint("SUBTOTAL >= 0", name="ck_order_items_subtotal"),
    )

    order_item_id = Column("ORDER_ITEM_ID", Integer, primary_key=True, autoincrement=True)
    order_id = Column("ORDER_ID", Integer, ForeignKey("ORDERS.ORDER_ID"), nullable=False, index=True)
    # 상품 삭제 시 주문 상품은 유지 (약한 참조)
    product_id = Column("PRODUCT_ID", Integer, nullable=False, index=True)
    quantity = Column("QUANTITY", Integer, nullable=False)
    attributes = Column("ATTRIBUTES", JSON, nullable=False, default=list)
    price = Column("PRICE", Float, nullable=False)
    discount_price = Column("DISCOUNT_PRICE", Float, nullable=True)
    selling_price = Column("SELLING_PRICE", Float, nullable=False)
    subtotal = Column("SUBTOTAL", Float, nullable=False)
    created_at = Column("CREATED_AT", DateTime, nullable=False, default=datetime.now)
    updated_at = Column("UPDATED_AT", DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    order = relationship("Order", back_populates="order_items", lazy="noload")


class OrderAddress(MariaBase):
    """ORDER_ADDRESSES 테이블 (주문별 배송지, 주문과 1:1)"""

    __tablename__ = "ORDER_ADDRESSES"

    address_id = Column("ADDRESS_ID", Integer, primary_key=True, autoincrement=True)
    order_id = Column("ORDER_ID", Integer, ForeignKey("ORDERS.ORDER_ID"), nullable=False, unique=True)
    name = Column("NAME", String(100), nullable=False)
    phone = Column("PHONE", String(30), nullable=False, index=True)
    address = Column("ADDRESS", Text, nullable=False)
    created_at = Column("CREATED_AT", DateTime, nullable=False, default=datetime.now)
    updated_at = Column("UPDATED_AT", DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    order = relationship("Order", back_populates="address", lazy="noload")
