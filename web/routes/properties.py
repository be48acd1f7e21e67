"""
Property 라우트

잔고 이벤트 저장, 잔고/이벤트/월간 리포트 조회 API
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from core.constants import CalendarRange, Defaults
from core.errors import InvalidArgumentError, LedgerError, StoreFailureError
from core.ledger.service import LedgerService
from core.types import AmountType, SortOrder
from core.utils.cursor import decode_cursor, next_page_token
from core.utils.timezone import now_utc
from web.dependencies import get_ledger_service
from web.models.requests import SaveEventRequest
from web.models.responses import (
    BalanceResponse,
    EventListResponse,
    EventResponse,
    MonthlyReportEventResponse,
    MonthlyReportResponse,
)

router = APIRouter(prefix="/property", tags=["Property"])


def _to_http_error(e: LedgerError) -> HTTPException:
    """Ledger 예외를 HTTP 오류로 변환"""
    if isinstance(e, InvalidArgumentError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, StoreFailureError):
        return HTTPException(status_code=500, detail=f"Event store failure: {e.operation}")
    return HTTPException(status_code=500, detail=str(e))


def _resolve_page(limit: int, offset: int, next_token: str | None) -> tuple[int, int]:
    """next_token이 있으면 limit/offset을 토큰 값으로 대체

    Raises:
        HTTPException: 토큰 디코딩 실패 또는 허용 범위 밖의 limit
    """
    if not next_token:
        return limit, offset

    try:
        cursor = decode_cursor(next_token)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    if not 1 <= cursor.limit <= Defaults.MAX_PAGE_LIMIT:
        raise HTTPException(
            status_code=400,
            detail=f"next_token limit must be between 1 and {Defaults.MAX_PAGE_LIMIT}",
        )
    return cursor.limit, cursor.offset


@router.post("/{property_id}", response_model=BalanceResponse)
async def save_event(
    request: SaveEventRequest,
    property_id: str = Path(..., min_length=1, description="프로퍼티 ID"),
    service: LedgerService = Depends(get_ledger_service),
) -> BalanceResponse:
    """잔고 변동 이벤트 저장

    occurred_at이 없으면 현재 시각으로 기록.
    """
    occurred_at = request.occurred_at or now_utc()

    try:
        balance = await service.save_event(property_id, request.amount, occurred_at)
    except LedgerError as e:
        raise _to_http_error(e) from e

    return BalanceResponse(balance=str(balance))


@router.get("/{property_id}/balance", response_model=BalanceResponse)
async def get_balance(
    property_id: str = Path(..., min_length=1, description="프로퍼티 ID"),
    service: LedgerService = Depends(get_ledger_service),
) -> BalanceResponse:
    """현재 잔고 조회 (이벤트가 없으면 0)"""
    try:
        balance = await service.get_balance(property_id)
    except LedgerError as e:
        raise _to_http_error(e) from e

    return BalanceResponse(balance=str(balance))


@router.get("/{property_id}/events", response_model=EventListResponse)
async def get_events(
    property_id: str = Path(..., min_length=1, description="프로퍼티 ID"),
    date_from: datetime | None = Query(default=None, description="시작 시각 (포함)"),
    date_to: datetime | None = Query(default=None, description="종료 시각 (포함)"),
    sort_order: SortOrder = Query(default=SortOrder.DESCENDING, description="정렬 방향"),
    amount_type: AmountType = Query(default=AmountType.ALL, description="금액 부호 필터"),
    offset: int = Query(default=0, ge=0, le=Defaults.MAX_OFFSET, description="조회 시작 위치"),
    limit: int = Query(
        default=Defaults.PAGE_LIMIT, ge=1, le=Defaults.MAX_PAGE_LIMIT, description="조회 제한"
    ),
    next_token: str | None = Query(default=None, description="다음 페이지 토큰"),
    service: LedgerService = Depends(get_ledger_service),
) -> EventListResponse:
    """이벤트 목록 조회

    필터, 정렬, 페이지네이션 지원.
    정렬은 한 페이지 안에서만 적용됨.
    """
    limit, offset = _resolve_page(limit, offset, next_token)

    try:
        events = await service.get_property_events(
            property_id, date_from, date_to, sort_order, amount_type, offset, limit
        )
    except LedgerError as e:
        raise _to_http_error(e) from e

    return EventListResponse(
        events=[EventResponse.from_event(e) for e in events],
        next_token=next_page_token(limit, offset, len(events)),
    )


@router.get("/{property_id}/monthly_report", response_model=MonthlyReportResponse)
async def get_monthly_report(
    property_id: str = Path(..., min_length=1, description="프로퍼티 ID"),
    month: int = Query(
        ..., ge=CalendarRange.MIN_MONTH, le=CalendarRange.MAX_MONTH, description="월 (1-12)"
    ),
    year: int = Query(
        ..., ge=CalendarRange.MIN_YEAR, le=CalendarRange.MAX_YEAR, description="연도"
    ),
    offset: int = Query(default=0, ge=0, le=Defaults.MAX_OFFSET, description="조회 시작 위치"),
    limit: int = Query(
        default=Defaults.PAGE_LIMIT, ge=1, le=Defaults.MAX_PAGE_LIMIT, description="조회 제한"
    ),
    next_token: str | None = Query(default=None, description="다음 페이지 토큰"),
    service: LedgerService = Depends(get_ledger_service),
) -> MonthlyReportResponse:
    """월간 리포트 조회

    월초 잔고와 해당 월 이벤트(발생 시각 오름차순).
    """
    limit, offset = _resolve_page(limit, offset, next_token)

    try:
        report = await service.get_monthly_report(property_id, month, year, offset, limit)
    except LedgerError as e:
        raise _to_http_error(e) from e

    return MonthlyReportResponse(
        starting_balance=str(report.starting_balance),
        events=[MonthlyReportEventResponse.from_event(e) for e in report.events],
        next_token=next_page_token(limit, offset, len(report.events)),
    )
