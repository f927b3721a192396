# errors.py
"""
공통 에러 타입 정의
"""
from fastapi import HTTPException, status

class BadRequestException(HTTPException):
    """400 에러 - 잘못된 요청"""
    def __init__(self, detail: str = "잘못된 요청입니다."):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class NotFoundException(HTTPException):
    """404 에러 - 항목 없음"""
    def __init__(self, name: str = "데이터"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=f"{name}을(를) 찾을 수 없습니다.")

class OrderCreateFailedException(BadRequestException):
    """주문 생성 트랜잭션 실패 (전체 롤백됨)"""
    def __init__(self, detail: str = "주문 생성에 실패했습니다."):
        super().__init__(detail=detail)

class OrderDeleteFailedException(BadRequestException):
    """주문 삭제 트랜잭션 실패 (전체 롤백됨)"""
    def __init__(self, detail: str = "주문 삭제에 실패했습니다."):
        super().__init__(detail=detail)

class InvalidStatusTransitionException(BadRequestException):
    """허용되지 않은 주문 상태 전이"""
    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(detail=f"주문 상태를 '{current}'에서 '{target}'(으)로 변경할 수 없습니다.")
