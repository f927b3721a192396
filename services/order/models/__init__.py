"""
주문 서비스 모델 모듈
"""
from .order_model import Order, OrderAddress, OrderItem, OrderStatus

__all__ = [
    "Order",
    "OrderAddress",
    "OrderItem",
    "OrderStatus",
]
