"""
상품 서비스 모델 모듈
"""
from .product_model import Product

__all__ = ["Product"]
