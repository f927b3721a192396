"""
페이지네이션/정렬 옵션 계산
- 원본 쿼리 파라미터(page, limit, sortBy, sortOrder) → 정규화된 값 (page, limit, skip, sort_by, sort_order)
- calculate_pagination 은 순수 함수 (I/O 없음)
"""
from typing import Optional

from fastapi import Query
from pydantic import BaseModel

from common.config import get_settings

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
SORT_ORDERS = ("asc", "desc")


class PaginationOptions(BaseModel):
    """요청에서 추출한 원본 페이지네이션 옵션"""
    page: Optional[int] = None
    limit: Optional[int] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None


class Pagination(BaseModel):
    """정규화된 페이지네이션 값"""
    page: int
    limit: int
    skip: int
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None


def calculate_pagination(
    options: PaginationOptions,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: Optional[int] = None,
) -> Pagination:
    """
    페이지네이션 옵션 정규화

    Args:
        options: 원본 옵션
        default_limit: limit 미지정 시 사용할 값
        max_limit: limit 상한 (None 이면 제한 없음)

    Returns:
        Pagination: skip = (page - 1) * limit

    Note:
        - page, limit 이 1 미만이면 기본값 사용
        - sort_by 만 있고 sort_order 가 없으면 desc
        - sort_by 가 없으면 sort_order 도 무시 (호출 측 기본 정렬 사용)
    """
    page = options.page if options.page and options.page > 0 else DEFAULT_PAGE
    limit = options.limit if options.limit and options.limit > 0 else default_limit
    if max_limit is not None:
        limit = min(limit, max_limit)

    sort_by = options.sort_by.strip() if options.sort_by and options.sort_by.strip() else None
    sort_order = None
    if sort_by:
        sort_order = (options.sort_order or "desc").lower()
        if sort_order not in SORT_ORDERS:
            sort_order = "desc"

    return Pagination(
        page=page,
        limit=limit,
        skip=(page - 1) * limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )


def pagination_query(
    page: Optional[int] = Query(None, description="페이지 번호 (1부터)"),
    limit: Optional[int] = Query(None, description="페이지 크기"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="정렬 필드"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="정렬 방향 (asc/desc)"),
) -> Pagination:
    """쿼리 파라미터 → Pagination (FastAPI 의존성)"""
    settings = get_settings()
    return calculate_pagination(
        PaginationOptions(page=page, limit=limit, sort_by=sort_by, sort_order=sort_order),
        default_limit=settings.default_page_limit,
        max_limit=settings.max_page_limit,
    )
