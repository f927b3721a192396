# common/conversion_api.py
"""
Facebook 전환 API(Conversion API) 서버 이벤트 전송
- 주문 생성 후 백그라운드 작업으로 호출 (응답을 기다리지 않음)
- 실패는 로그만 남기고 호출 측으로 전파하지 않음
"""
from __future__ import annotations

import json
import time
from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx
from fastapi import Request
from pydantic import BaseModel

from common.config import get_settings
from common.logger import get_logger, log_with_context

logger = get_logger("conversion_api")

GRAPH_API_BASE_URL = "https://graph.facebook.com"
ACTION_SOURCE = "website"


class RequestContext(BaseModel):
    """전환 이벤트에 필요한 요청자 정보"""
    source_url: str = ""
    client_ip_address: Optional[str] = None
    client_user_agent: Optional[str] = None
    fbp: Optional[str] = None
    fbc: Optional[str] = None


class PurchaseData(BaseModel):
    value: float
    currency: str = "USD"


def extract_request_context(request: Request) -> RequestContext:
    """
    FastAPI Request 에서 전환 이벤트용 정보 추출
    - source_url: Referer 헤더, 없으면 현재 요청 URL
    """
    return RequestContext(
        source_url=request.headers.get("referer") or str(request.url),
        client_ip_address=request.client.host if request.client else None,
        client_user_agent=request.headers.get("user-agent") or "website",
        fbp=request.cookies.get("_fbp"),
        fbc=request.cookies.get("_fbc"),
    )


def bdt_to_usd(amount_bdt: float, rate: Optional[float] = None) -> float:
    """BDT 금액을 USD 로 환산 (소수점 2자리)"""
    if rate is None:
        rate = get_settings().bdt_to_usd_rate
    if rate <= 0:
        raise ValueError("환율은 0보다 커야 합니다.")
    return round(amount_bdt / rate, 2)


def build_event_payload(
    event_name: str,
    source_url: str,
    purchase_data: Optional[PurchaseData] = None,
    contents: Optional[Iterable[Tuple[Any, int]]] = None,
    event_id: Optional[str] = None,
    context: Optional[RequestContext] = None,
    event_time: Optional[int] = None,
) -> Dict[str, Any]:
    """
    전환 API 서버 이벤트 1건 구성

    Args:
        event_name: Purchase, ViewContent, AddToCart 등
        source_url: 이벤트가 발생한 URL
        purchase_data: 금액/통화
        contents: (상품 ID, 수량) 목록
        event_id: 중복 제거용 이벤트 ID (주문 번호)
        context: 요청자 정보
        event_time: 유닉스 초 (기본: 현재 시각)
    """
    context = context or RequestContext(source_url=source_url)

    user_data: Dict[str, Any] = {}
    if context.client_ip_address:
        user_data["client_ip_address"] = context.client_ip_address
    if context.client_user_agent:
        user_data["client_user_agent"] = context.client_user_agent
    if context.fbp:
        user_data["fbp"] = context.fbp
    if context.fbc:
        user_data["fbc"] = context.fbc

    custom_data: Dict[str, Any] = {
        "contents": [
            {"id": str(product_id), "quantity": int(quantity)}
            for product_id, quantity in (contents or [])
        ],
    }
    if purchase_data is not None:
        custom_data["value"] = purchase_data.value
        custom_data["currency"] = purchase_data.currency

    event: Dict[str, Any] = {
        "event_name": event_name,
        "event_time": event_time if event_time is not None else int(time.time()),
        "action_source": ACTION_SOURCE,
        "event_source_url": source_url,
        "user_data": user_data,
        "custom_data": custom_data,
    }
    if event_id:
        event["event_id"] = event_id
    return event


def _events_url(pixel_id: str, api_version: str) -> str:
    return f"{GRAPH_API_BASE_URL}/{api_version}/{pixel_id}/events"


async def send_conversion_event(
    event_name: str,
    source_url: str,
    purchase_data: Optional[PurchaseData] = None,
    contents: Optional[Iterable[Tuple[Any, int]]] = None,
    event_id: Optional[str] = None,
    context: Optional[RequestContext] = None,
    *,
    max_attempts: int = 2,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[Dict[str, Any]]:
    """
    전환 이벤트 전송 (비동기)

    Returns:
        dict: Graph API 응답 (설정 누락 또는 실패 시 None)

    Note:
        - 예외를 호출 측으로 던지지 않음 (백그라운드 작업 전용)
        - 전송 오류/5xx 는 최대 max_attempts 회까지 시도, 4xx 는 재시도하지 않음
    """
    settings = get_settings()
    if not settings.facebook_access_token or not settings.facebook_pixel_id:
        logger.debug(f"[conversion_api] 전환 API 설정이 없어 전송 건너뜀 (event={event_name}, event_id={event_id})")
        return None

    try:
        event = build_event_payload(event_name, source_url, purchase_data, contents, event_id, context)
    except Exception as e:
        logger.error(f"[conversion_api] 이벤트 구성 실패: event={event_name}, error={str(e)}")
        return None

    body: Dict[str, Any] = {"data": [event]}
    if settings.facebook_test_event_code:
        body["test_event_code"] = settings.facebook_test_event_code

    url = _events_url(settings.facebook_pixel_id, settings.facebook_api_version)
    params = {"access_token": settings.facebook_access_token}

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.conversion_timeout)

    try:
        attempt = 0
        while attempt < max_attempts:
            attempt += 1
            try:
                resp = await client.post(url, params=params, json=body)
            except httpx.HTTPError as e:
                logger.warning(f"[conversion_api] 전송 오류 (attempt={attempt}/{max_attempts}): {str(e)}")
                continue

            if 200 <= resp.status_code < 300:
                log_with_context(
                    logger, "info", "[conversion_api] 전환 이벤트 전송 완료",
                    event_name=event_name, event_id=event_id, status=resp.status_code,
                )
                try:
                    return resp.json()
                except json.JSONDecodeError:
                    return {"raw": resp.text}

            logger.error(
                "[conversion_api] Graph API error: status=%s, event=%s, event_id=%s, body=%s",
                resp.status_code, event_name, event_id, (resp.text or "")[:2000],
            )
            if 400 <= resp.status_code < 500:
                return None

        logger.error(f"[conversion_api] 재시도 초과로 전송 실패: event={event_name}, event_id={event_id}")
        return None
    except Exception as e:
        logger.error(f"[conversion_api] 예기치 못한 오류: event={event_name}, error={str(e)}")
        return None
    finally:
        if owns_client:
            await client.aclose()


async def send_purchase_event(
    order_no: str,
    total_price: float,
    items: List[Tuple[Any, int]],
    context: Optional[RequestContext] = None,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[Dict[str, Any]]:
    """
    주문 완료(Purchase) 이벤트 전송
    - 금액은 BDT → USD 환산, 주문 번호를 event_id 로 사용
    """
    try:
        purchase_data = PurchaseData(value=bdt_to_usd(total_price), currency="USD")
    except Exception as e:
        logger.error(f"[conversion_api] 구매 금액 환산 실패: order_no={order_no}, error={str(e)}")
        return None

    context = context or RequestContext()
    return await send_conversion_event(
        "Purchase",
        context.source_url,
        purchase_data=purchase_data,
        contents=items,
        event_id=order_no,
        context=context,
        client=client,
    )
