"""
EventStore - 프로퍼티 이벤트 저장소

모든 잔고 변경은 PropertyEvent로 기록됨 (append-only).
LedgerService는 IEventStore Protocol에만 의존하고,
SQLiteEventStore는 그 기본 구현체.
"""

import logging
from decimal import Decimal
from typing import Any, Protocol, runtime_checkable

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.events import EventFilter, PropertyEvent
from core.errors import InvalidArgumentError
from core.types import AmountType, RecencyOrder
from core.utils.timezone import from_storage_str, to_storage_str

logger = logging.getLogger(__name__)

# amount는 str(Decimal) 문자열: 부호는 첫 글자, 0 여부는 지수부(E) 앞 가수부에 1-9가 있는지로 판단
_AMOUNT_NONZERO = "substr(amount, 1, instr(amount || 'E', 'E') - 1) GLOB '*[1-9]*'"
_AMOUNT_NEGATIVE = f"(amount LIKE '-%' AND {_AMOUNT_NONZERO})"
_AMOUNT_POSITIVE = f"(amount NOT LIKE '-%' AND {_AMOUNT_NONZERO})"


@runtime_checkable
class IEventStore(Protocol):
    """이벤트 저장소 인터페이스

    모든 구현체는 빈 필터(EventFilter.is_empty)를 거부해야 함.
    금액은 반드시 Decimal 타입 사용.
    """

    async def save_event(self, event: PropertyEvent) -> PropertyEvent:
        """이벤트 저장 (append-only)

        Returns:
            저장 순번(seq)이 할당된 이벤트
        """
        ...

    async def get_events_for_filter(
        self,
        event_filter: EventFilter,
        limit: int,
        offset: int,
    ) -> list[PropertyEvent]:
        """필터 조건 이벤트 조회 (저장 순서)

        Args:
            event_filter: 조회 조건
            limit: 최대 조회 개수 (0 이하면 제한 없음)
            offset: 건너뛸 개수
        """
        ...

    async def get_most_recent_event_for_filter(
        self,
        event_filter: EventFilter,
        order_by: RecencyOrder = RecencyOrder.SAVED,
    ) -> PropertyEvent | None:
        """필터 조건의 가장 최근 이벤트 1건 조회

        Returns:
            PropertyEvent 또는 None (해당 이벤트 없음)
        """
        ...


class SQLiteEventStore:
    """SQLite 기반 이벤트 저장소

    property_event 테이블에 append-only로 저장.
    seq(AUTOINCREMENT)가 저장 순서를 나타냄.

    Args:
        db: SQLiteAdapter 인스턴스 (init_schema 완료 상태)

    사용 예시:
    ```python
    async with SQLiteAdapter(db_path) as db:
        await init_schema(db)
        store = SQLiteEventStore(db)

        saved = await store.save_event(event)
        events = await store.get_events_for_filter(EventFilter(property_id="P1"), 10, 0)
    ```
    """

    _COLUMNS = "seq, property_id, amount, post_event_balance, occurred_at"

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def save_event(self, event: PropertyEvent) -> PropertyEvent:
        async with self.db.transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO property_event (
                    property_id, amount, post_event_balance, occurred_at
                ) VALUES (?, ?, ?, ?)
                """,
                (
                    event.property_id,
                    str(event.amount),
                    str(event.post_event_balance),
                    to_storage_str(event.occurred_at),
                ),
            )
            seq = cursor.lastrowid

        logger.debug(
            "이벤트 저장 완료",
            extra={"property_id": event.property_id, "seq": seq},
        )
        return event.with_seq(seq)

    async def get_events_for_filter(
        self,
        event_filter: EventFilter,
        limit: int,
        offset: int,
    ) -> list[PropertyEvent]:
        where_clause, params = self._build_where(event_filter)

        # SQLite: LIMIT -1 = 제한 없음
        sql = f"""
            SELECT {self._COLUMNS}
            FROM property_event
            WHERE {where_clause}
            ORDER BY seq ASC
            LIMIT ? OFFSET ?
        """
        params.extend([limit if limit > 0 else -1, max(offset, 0)])

        rows = await self.db.fetchall(sql, tuple(params))
        return [self._row_to_event(row) for row in rows]

    async def get_most_recent_event_for_filter(
        self,
        event_filter: EventFilter,
        order_by: RecencyOrder = RecencyOrder.SAVED,
    ) -> PropertyEvent | None:
        where_clause, params = self._build_where(event_filter)

        if order_by == RecencyOrder.OCCURRED:
            order_clause = "occurred_at DESC, seq DESC"
        else:
            order_clause = "seq DESC"

        row = await self.db.fetchone(
            f"""
            SELECT {self._COLUMNS}
            FROM property_event
            WHERE {where_clause}
            ORDER BY {order_clause}
            LIMIT 1
            """,
            tuple(params),
        )

        if row is None:
            return None

        return self._row_to_event(row)

    @staticmethod
    def _build_where(event_filter: EventFilter) -> tuple[str, list[Any]]:
        """EventFilter를 WHERE 절로 변환

        Raises:
            InvalidArgumentError: 조건이 하나도 없는 필터
        """
        if event_filter.is_empty:
            raise InvalidArgumentError("조회 조건이 지정되지 않았습니다")

        conditions: list[str] = []
        params: list[Any] = []

        if event_filter.property_id:
            conditions.append("property_id = ?")
            params.append(event_filter.property_id)

        if event_filter.after_time is not None:
            conditions.append("occurred_at >= ?")
            params.append(to_storage_str(event_filter.after_time))

        if event_filter.before_time is not None:
            conditions.append("occurred_at <= ?")
            params.append(to_storage_str(event_filter.before_time))

        amount_type = AmountType.coerce(event_filter.amount_type)
        if amount_type == AmountType.EXPENSE:
            conditions.append(_AMOUNT_NEGATIVE)
        elif amount_type == AmountType.INCOME:
            conditions.append(_AMOUNT_POSITIVE)

        return " AND ".join(conditions), params

    @staticmethod
    def _row_to_event(row: tuple[Any, ...]) -> PropertyEvent:
        """DB 행을 PropertyEvent로 변환

        컬럼 순서:
        0: seq, 1: property_id, 2: amount, 3: post_event_balance, 4: occurred_at
        """
        return PropertyEvent(
            property_id=row[1],
            amount=Decimal(row[2]),
            post_event_balance=Decimal(row[3]),
            occurred_at=from_storage_str(row[4]),
            seq=row[0],
        )
