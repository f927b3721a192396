"""상품 서비스 (주문 목록 스냅샷, 베스트셀러 조회용)"""
