"""
주문 서비스 CRUD 패키지
"""
