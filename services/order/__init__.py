"""주문 서비스"""
