"""
LedgerService - 프로퍼티 잔고 원장 서비스

잔고 계산, 이벤트 필터/정렬, 월간 리포트 집계를 담당.
자체 영속 상태는 없고 모든 상태는 Event Store에 있음.

잔고 규칙:
- 현재 잔고 = 가장 최근에 "저장된" 이벤트의 post_event_balance (occurred_at 무관)
- 과거 시점 잔고 = 해당 시점 이전에 "발생한" 가장 최근 이벤트의 post_event_balance
- 이력이 없으면 잔고 0 (오류 아님)
"""

import asyncio
import logging
import weakref
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, Inexact, InvalidOperation
from typing import Any, AsyncIterator, Iterator

from core.constants import CalendarRange, Defaults
from core.domain.events import EventFilter, PropertyEvent
from core.errors import InvalidArgumentError, LedgerError, StoreFailureError
from core.storage.event_store import IEventStore
from core.types import AmountType, RecencyOrder, SortOrder
from core.utils.timezone import TIME_UNIT, ensure_utc, month_bounds

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class MonthlyReport:
    """월간 리포트

    events의 post_event_balance는 월 기준이 아닌 전체 누적 잔고.
    (events, starting_balance) 형태로 언패킹 가능.
    """

    events: list[PropertyEvent] = field(default_factory=list)
    starting_balance: Decimal = ZERO

    def __iter__(self) -> Iterator[Any]:
        yield self.events
        yield self.starting_balance


def count_digits(amount: Decimal) -> int:
    """유효 자릿수 (정수부 + 소수부, 끝자리 0 제외)

    1E+3 → 4, 0.001 → 3, 12.50 → 3
    """
    _, digits, exponent = amount.as_tuple()
    while len(digits) > 1 and digits[-1] == 0:
        digits = digits[:-1]
        exponent += 1
    if exponent >= 0:
        return len(digits) + exponent
    return max(len(digits), -exponent)


def to_amount(value: Decimal | int | float | str) -> Decimal:
    """금액을 Decimal로 변환 (float는 문자열 경유로 오차 방지)

    Raises:
        InvalidArgumentError: 숫자가 아니거나 유한하지 않은 값, 자릿수 초과
    """
    try:
        amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise InvalidArgumentError(f"잘못된 금액: {value!r}") from e

    if not amount.is_finite():
        raise InvalidArgumentError(f"잘못된 금액: {value!r}")
    if not amount.is_zero() and count_digits(amount) > Defaults.MAX_AMOUNT_DIGITS:
        raise InvalidArgumentError(
            f"금액은 최대 {Defaults.MAX_AMOUNT_DIGITS}자리까지 허용됩니다: {value!r}"
        )
    return amount


def sort_by_order(events: list[PropertyEvent], sort_order: SortOrder | str) -> None:
    """occurred_at 기준 제자리 정렬

    알 수 없는 sort_order는 무시 (Store 반환 순서 유지).
    """
    if sort_order == SortOrder.ASCENDING:
        events.sort(key=lambda e: e.occurred_at)
    elif sort_order == SortOrder.DESCENDING:
        events.sort(key=lambda e: e.occurred_at, reverse=True)


class LedgerService:
    """프로퍼티 잔고 원장 서비스

    Args:
        store: IEventStore 구현체

    같은 property_id에 대한 save_event는 인스턴스 내부 Lock으로 직렬화되어
    "직전 잔고 조회 → 저장" 사이의 lost update를 막음.
    프로세스 간 직렬화는 Event Store의 책임.

    사용 예시:
    ```python
    service = LedgerService(SQLiteEventStore(db))

    balance = await service.save_event("P1", Decimal("100"), now_utc())
    events = await service.get_property_events(
        "P1", None, None, SortOrder.ASCENDING, AmountType.ALL, 0, 10
    )
    report = await service.get_monthly_report("P1", 3, 2024, 0, 50)
    ```
    """

    def __init__(self, store: IEventStore):
        self.store = store
        self._save_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    # -------------------------------------------------------------------------
    # 저장
    # -------------------------------------------------------------------------

    async def save_event(
        self,
        property_id: str,
        amount: Decimal | int | float | str,
        occurred_at: datetime | None,
    ) -> Decimal:
        """잔고 변동 이벤트 저장

        금액이 0이면 저장하지 않고 0을 반환 (occurred_at 검사보다 먼저).
        멱등성 없음: 같은 인자로 두 번 호출하면 이벤트도 두 번 저장됨.

        Args:
            property_id: 프로퍼티 ID
            amount: 변동 금액 (음수=지출, 양수=수입)
            occurred_at: 발생 시각 (과거 시각 허용)

        Returns:
            저장 후 잔고

        Raises:
            InvalidArgumentError: 빈 property_id, 잘못된 금액, occurred_at 누락,
                잔고 자릿수 초과
            StoreFailureError: Event Store 오류
        """
        self._require_property_id(property_id)

        value = to_amount(amount)
        if value == 0:
            return ZERO

        if occurred_at is None:
            raise InvalidArgumentError("occurred_at이 지정되지 않았습니다")

        async with self._lock_for(property_id):
            prior_balance = await self._most_recent_balance(
                EventFilter(property_id=property_id), RecencyOrder.SAVED
            )
            try:
                event = PropertyEvent.create(property_id, value, prior_balance, occurred_at)
            except Inexact as e:
                raise InvalidArgumentError(
                    f"잔고 자릿수 초과: {prior_balance} + {value}"
                ) from e

            async with self._store_errors("save event", property_id):
                await self.store.save_event(event)

        logger.info(
            "이벤트 저장",
            extra={
                "property_id": property_id,
                "amount": str(value),
                "balance": str(event.post_event_balance),
            },
        )
        return event.post_event_balance

    # -------------------------------------------------------------------------
    # 잔고 조회
    # -------------------------------------------------------------------------

    async def get_balance(self, property_id: str) -> Decimal:
        """현재 잔고 (가장 최근 저장 이벤트 기준)

        Raises:
            InvalidArgumentError: 빈 property_id
            StoreFailureError: Event Store 오류
        """
        self._require_property_id(property_id)
        return await self._most_recent_balance(
            EventFilter(property_id=property_id), RecencyOrder.SAVED
        )

    async def get_balance_as_of(self, property_id: str, at_time: datetime) -> Decimal:
        """특정 시각 직전의 잔고

        occurred_at < at_time 인 이벤트 중 가장 최근 것의 잔고.
        경계 시각의 이벤트를 제외하기 위해 상한을 1 단위 앞당김.

        Args:
            property_id: 프로퍼티 ID
            at_time: 기준 시각 (이 시각의 이벤트는 포함하지 않음)
        """
        self._require_property_id(property_id)
        if at_time is None:
            raise InvalidArgumentError("at_time이 지정되지 않았습니다")

        event_filter = EventFilter(
            property_id=property_id,
            before_time=ensure_utc(at_time) - TIME_UNIT,
        )
        return await self._most_recent_balance(event_filter, RecencyOrder.OCCURRED)

    # -------------------------------------------------------------------------
    # 이벤트 조회
    # -------------------------------------------------------------------------

    async def get_property_events(
        self,
        property_id: str,
        date_from: datetime | None,
        date_to: datetime | None,
        sort_order: SortOrder | str,
        amount_type: AmountType | str,
        offset: int,
        limit: int,
    ) -> list[PropertyEvent]:
        """필터/페이지 조건으로 이벤트 조회

        페이지네이션은 Store에서, 정렬은 반환된 페이지 안에서만 수행.
        (페이지를 넘나드는 전역 정렬은 보장하지 않음)

        Args:
            property_id: 프로퍼티 ID
            date_from: 시작 시각 (포함, None이면 제한 없음)
            date_to: 종료 시각 (포함, None이면 제한 없음)
            sort_order: 정렬 방향 (알 수 없는 값이면 Store 순서 유지)
            amount_type: 금액 부호 필터 (알 수 없는 값이면 ALL)
            offset: 건너뛸 개수 (0 이상)
            limit: 최대 조회 개수 (0 이하면 제한 없음)

        Raises:
            InvalidArgumentError: 빈 property_id, date_from > date_to,
                범위 밖의 offset/limit
            StoreFailureError: Event Store 오류
        """
        self._require_property_id(property_id)
        if not 0 <= offset <= Defaults.MAX_OFFSET:
            raise InvalidArgumentError(f"offset 범위 초과: {offset}")
        if limit > Defaults.MAX_OFFSET:
            raise InvalidArgumentError(f"limit 범위 초과: {limit}")
        if date_from is not None and date_to is not None:
            if ensure_utc(date_from) > ensure_utc(date_to):
                raise InvalidArgumentError("date_from은 date_to보다 이후일 수 없습니다")

        event_filter = EventFilter(
            property_id=property_id,
            after_time=date_from,
            before_time=date_to,
            amount_type=AmountType.coerce(amount_type),
        )

        async with self._store_errors("get events for filter", property_id):
            events = await self.store.get_events_for_filter(event_filter, limit, offset)

        events = list(events)
        sort_by_order(events, sort_order)

        logger.debug(
            "이벤트 조회",
            extra={"property_id": property_id, "count": len(events), "offset": offset},
        )
        return events

    async def get_monthly_report(
        self,
        property_id: str,
        month: int,
        year: int,
        offset: int,
        limit: int,
    ) -> MonthlyReport:
        """월간 리포트 (월초 잔고 + 해당 월 이벤트)

        Args:
            property_id: 프로퍼티 ID
            month: 월 (1-12)
            year: 연도 (1970-2030)
            offset: 건너뛸 개수
            limit: 최대 조회 개수

        Returns:
            MonthlyReport (이벤트는 occurred_at 오름차순)

        Raises:
            InvalidArgumentError: 빈 property_id 또는 범위 밖의 연/월
            StoreFailureError: Event Store 오류
        """
        self._require_property_id(property_id)
        if not CalendarRange.MIN_YEAR <= year <= CalendarRange.MAX_YEAR:
            raise InvalidArgumentError(
                f"year는 {CalendarRange.MIN_YEAR}-{CalendarRange.MAX_YEAR} 범위여야 합니다: {year}"
            )
        if not CalendarRange.MIN_MONTH <= month <= CalendarRange.MAX_MONTH:
            raise InvalidArgumentError(f"month는 1-12 범위여야 합니다: {month}")

        start_of_month, end_of_month = month_bounds(year, month)

        starting_balance = await self.get_balance_as_of(property_id, start_of_month)
        events = await self.get_property_events(
            property_id,
            start_of_month,
            end_of_month,
            SortOrder.ASCENDING,
            AmountType.ALL,
            offset,
            limit,
        )

        return MonthlyReport(events=events, starting_balance=starting_balance)

    # -------------------------------------------------------------------------
    # 내부 헬퍼
    # -------------------------------------------------------------------------

    @staticmethod
    def _require_property_id(property_id: str) -> None:
        if not property_id:
            raise InvalidArgumentError("property_id가 비어 있습니다")

    async def _most_recent_balance(
        self,
        event_filter: EventFilter,
        order_by: RecencyOrder,
    ) -> Decimal:
        async with self._store_errors("get most recent event", event_filter.property_id):
            event = await self.store.get_most_recent_event_for_filter(event_filter, order_by)

        if event is None:
            return ZERO
        return event.post_event_balance

    def _lock_for(self, property_id: str) -> asyncio.Lock:
        lock = self._save_locks.get(property_id)
        if lock is None:
            lock = asyncio.Lock()
            self._save_locks[property_id] = lock
        return lock

    @asynccontextmanager
    async def _store_errors(self, operation: str, property_id: str) -> AsyncIterator[None]:
        """Store 예외를 StoreFailureError로 감싸서 전파

        LedgerError와 취소(CancelledError)는 그대로 통과.
        """
        try:
            yield
        except LedgerError:
            raise
        except Exception as e:
            logger.error(
                "Event Store 호출 실패",
                extra={"operation": operation, "property_id": property_id, "error": str(e)},
            )
            raise StoreFailureError(operation, e) from e
