"""SQLiteEventStore 통합 테스트"""

import tempfile
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from adapters.mock.event_store import MockEventStore
from core.domain.events import EventFilter, PropertyEvent
from core.errors import InvalidArgumentError
from core.storage.event_store import IEventStore, SQLiteEventStore
from core.types import AmountType, RecencyOrder


def _event(property_id: str, amount: str, balance: str, occurred_at: datetime) -> PropertyEvent:
    return PropertyEvent(
        property_id=property_id,
        amount=Decimal(amount),
        post_event_balance=Decimal(balance),
        occurred_at=occurred_at,
    )


T0 = datetime(2024, 3, 1, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def db() -> SQLiteAdapter:
    """테스트용 임시 DB (스키마 초기화 완료)"""
    with tempfile.TemporaryDirectory() as tmpdir:
        adapter = SQLiteAdapter(Path(tmpdir) / "test_events.db")
        await adapter.connect()
        await init_schema(adapter)
        yield adapter
        await adapter.close()


@pytest.fixture
def store(db: SQLiteAdapter) -> SQLiteEventStore:
    return SQLiteEventStore(db)


class TestSaveEvent:
    """save_event 테스트"""

    def test_implements_protocol(self, store: SQLiteEventStore) -> None:
        assert isinstance(store, IEventStore)

    @pytest.mark.asyncio
    async def test_assigns_increasing_seq(self, store: SQLiteEventStore) -> None:
        first = await store.save_event(_event("P1", "10", "10", T0))
        second = await store.save_event(_event("P1", "5", "15", T0))

        assert first.seq is not None
        assert second.seq > first.seq

        events = await store.get_events_for_filter(EventFilter(property_id="P1"), 0, 0)
        assert [e.seq for e in events] == [first.seq, second.seq]

    @pytest.mark.asyncio
    async def test_preserves_decimal_text(self, store: SQLiteEventStore) -> None:
        """금액 정밀도와 표기 보존"""
        await store.save_event(_event("P1", "0.10", "1234567890.123456789", T0))

        events = await store.get_events_for_filter(EventFilter(property_id="P1"), 10, 0)

        assert str(events[0].amount) == "0.10"
        assert events[0].post_event_balance == Decimal("1234567890.123456789")

    @pytest.mark.asyncio
    async def test_time_normalized_to_utc(self, store: SQLiteEventStore) -> None:
        kst = timezone(timedelta(hours=9))
        await store.save_event(_event("P1", "1", "1", datetime(2024, 3, 1, 9, tzinfo=kst)))

        events = await store.get_events_for_filter(EventFilter(property_id="P1"), 10, 0)

        assert events[0].occurred_at == T0
        assert events[0].occurred_at.tzinfo == timezone.utc


class TestGetEventsForFilter:
    """get_events_for_filter 테스트"""

    @pytest_asyncio.fixture
    async def seeded(self, store: SQLiteEventStore) -> SQLiteEventStore:
        # 저장 순서: +100(3/3), -40(3/1), -5(3/2), P2 +7(3/1)
        await store.save_event(_event("P1", "100", "100", T0 + timedelta(days=2)))
        await store.save_event(_event("P1", "-40", "60", T0))
        await store.save_event(_event("P1", "-5", "55", T0 + timedelta(days=1)))
        await store.save_event(_event("P2", "7", "7", T0))
        return store

    @pytest.mark.asyncio
    async def test_save_order(self, seeded: SQLiteEventStore) -> None:
        events = await seeded.get_events_for_filter(EventFilter(property_id="P1"), 10, 0)

        assert [e.amount for e in events] == [Decimal("100"), Decimal("-40"), Decimal("-5")]

    @pytest.mark.asyncio
    async def test_time_bounds_inclusive(self, seeded: SQLiteEventStore) -> None:
        day2 = T0 + timedelta(days=1)
        event_filter = EventFilter(property_id="P1", after_time=day2, before_time=day2)

        events = await seeded.get_events_for_filter(event_filter, 10, 0)

        assert [e.amount for e in events] == [Decimal("-5")]

    @pytest.mark.asyncio
    async def test_amount_type(self, seeded: SQLiteEventStore) -> None:
        expense = EventFilter(property_id="P1", amount_type=AmountType.EXPENSE)
        income = EventFilter(property_id="P1", amount_type=AmountType.INCOME)

        assert len(await seeded.get_events_for_filter(expense, 10, 0)) == 2
        assert [e.amount for e in await seeded.get_events_for_filter(income, 10, 0)] == [Decimal("100")]

    @pytest.mark.asyncio
    async def test_amount_type_by_decimal_sign(self, store: SQLiteEventStore) -> None:
        """REAL 범위를 벗어나는 크기와 지수 표기도 Decimal 부호대로 분류 (Mock Store와 동일)"""
        amounts = ["1E-400", "-1E-400", "-0", "0E-5", "1E+3", "-2.50"]
        events = [_event("P1", amount, "0", T0) for amount in amounts]
        for event in events:
            await store.save_event(event)
        mock = MockEventStore(events=events)

        for amount_type, expected in (
            (AmountType.INCOME, [Decimal("1E-400"), Decimal("1E+3")]),
            (AmountType.EXPENSE, [Decimal("-1E-400"), Decimal("-2.50")]),
        ):
            event_filter = EventFilter(property_id="P1", amount_type=amount_type)

            from_sqlite = await store.get_events_for_filter(event_filter, 10, 0)
            from_mock = await mock.get_events_for_filter(event_filter, 10, 0)

            assert [e.amount for e in from_sqlite] == expected
            assert [e.amount for e in from_mock] == expected

    @pytest.mark.asyncio
    async def test_limit_offset(self, seeded: SQLiteEventStore) -> None:
        event_filter = EventFilter(property_id="P1")

        page = await seeded.get_events_for_filter(event_filter, 2, 1)
        unlimited = await seeded.get_events_for_filter(event_filter, 0, 1)

        assert [e.amount for e in page] == [Decimal("-40"), Decimal("-5")]
        assert len(unlimited) == 2

    @pytest.mark.asyncio
    async def test_filter_without_property(self, seeded: SQLiteEventStore) -> None:
        """property_id 없이 시간 조건만 있어도 허용"""
        events = await seeded.get_events_for_filter(EventFilter(before_time=T0), 10, 0)

        assert {e.property_id for e in events} == {"P1", "P2"}

    @pytest.mark.asyncio
    async def test_empty_filter_rejected(self, seeded: SQLiteEventStore) -> None:
        with pytest.raises(InvalidArgumentError):
            await seeded.get_events_for_filter(EventFilter(), 10, 0)


class TestGetMostRecentEventForFilter:
    """get_most_recent_event_for_filter 테스트"""

    @pytest.mark.asyncio
    async def test_none_when_empty(self, store: SQLiteEventStore) -> None:
        result = await store.get_most_recent_event_for_filter(EventFilter(property_id="P1"))

        assert result is None

    @pytest.mark.asyncio
    async def test_saved_order(self, store: SQLiteEventStore) -> None:
        """SAVED: 마지막으로 저장된 이벤트"""
        await store.save_event(_event("P1", "100", "100", T0 + timedelta(days=5)))
        await store.save_event(_event("P1", "-40", "60", T0))

        result = await store.get_most_recent_event_for_filter(EventFilter(property_id="P1"))

        assert result.post_event_balance == Decimal("60")

    @pytest.mark.asyncio
    async def test_occurred_order(self, store: SQLiteEventStore) -> None:
        """OCCURRED: 발생 시각이 가장 늦은 이벤트"""
        await store.save_event(_event("P1", "100", "100", T0 + timedelta(days=5)))
        await store.save_event(_event("P1", "-40", "60", T0))

        result = await store.get_most_recent_event_for_filter(
            EventFilter(property_id="P1"), RecencyOrder.OCCURRED
        )

        assert result.post_event_balance == Decimal("100")

    @pytest.mark.asyncio
    async def test_occurred_tie_breaks_by_seq(self, store: SQLiteEventStore) -> None:
        await store.save_event(_event("P1", "1", "1", T0))
        await store.save_event(_event("P1", "2", "3", T0))

        result = await store.get_most_recent_event_for_filter(
            EventFilter(property_id="P1"), RecencyOrder.OCCURRED
        )

        assert result.post_event_balance == Decimal("3")

    @pytest.mark.asyncio
    async def test_respects_before_time(self, store: SQLiteEventStore) -> None:
        await store.save_event(_event("P1", "1", "1", T0))
        await store.save_event(_event("P1", "2", "3", T0 + timedelta(microseconds=1)))

        result = await store.get_most_recent_event_for_filter(
            EventFilter(property_id="P1", before_time=T0), RecencyOrder.OCCURRED
        )

        assert result.post_event_balance == Decimal("1")
