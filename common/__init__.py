"""공통 모듈 (설정, 로깅, 예외, DB, 페이지네이션, 전환 API)"""
