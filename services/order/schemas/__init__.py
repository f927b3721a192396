"""
주문 서비스 스키마 패키지
"""
