"""
core/domain/events.py 테스트

PropertyEvent 생성/직렬화, EventFilter 조건 판단 테스트
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from core.domain.events import EventFilter, PropertyEvent
from core.types import AmountType


T0 = datetime(2024, 3, 5, 12, 0, tzinfo=timezone.utc)


def _event(amount: str, occurred_at: datetime = T0, property_id: str = "P1") -> PropertyEvent:
    return PropertyEvent(
        property_id=property_id,
        amount=Decimal(amount),
        post_event_balance=Decimal(amount),
        occurred_at=occurred_at,
    )


class TestPropertyEvent:
    """PropertyEvent 테스트"""

    def test_create_accumulates_balance(self) -> None:
        """직전 잔고 + 금액"""
        event = PropertyEvent.create("P1", Decimal("-40"), Decimal("100"), T0)

        assert event.post_event_balance == Decimal("60")
        assert event.amount == Decimal("-40")
        assert event.seq is None

    def test_create_normalizes_naive_time(self) -> None:
        """naive datetime은 UTC로 간주"""
        event = PropertyEvent.create("P1", Decimal("1"), Decimal("0"), datetime(2024, 1, 1))

        assert event.occurred_at == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_create_converts_offset_to_utc(self) -> None:
        """다른 타임존은 UTC로 변환"""
        kst = timezone(timedelta(hours=9))
        event = PropertyEvent.create("P1", Decimal("1"), Decimal("0"), datetime(2024, 1, 1, 9, tzinfo=kst))

        assert event.occurred_at == datetime(2024, 1, 1, 0, tzinfo=timezone.utc)
        assert event.occurred_at.utcoffset() == timedelta(0)

    def test_with_seq(self) -> None:
        """seq는 비교에서 제외"""
        event = _event("10")
        saved = event.with_seq(7)

        assert saved.seq == 7
        assert saved == event

    def test_frozen(self) -> None:
        """불변성 확인"""
        event = _event("10")

        with pytest.raises(AttributeError):
            event.amount = Decimal("0")  # type: ignore

    def test_sign_properties(self) -> None:
        assert _event("-1").is_expense is True
        assert _event("-1").is_income is False
        assert _event("1").is_income is True

    def test_to_dict(self) -> None:
        """금액은 문자열로 직렬화"""
        data = _event("12.50").with_seq(3).to_dict()

        assert data["amount"] == "12.50"
        assert data["post_event_balance"] == "12.50"
        assert data["occurred_at"] == "2024-03-05T12:00:00+00:00"
        assert data["seq"] == 3


class TestEventFilter:
    """EventFilter 테스트"""

    def test_empty(self) -> None:
        """조건 없는 필터"""
        assert EventFilter().is_empty is True
        assert EventFilter(amount_type="unknown").is_empty is True

    def test_not_empty(self) -> None:
        assert EventFilter(property_id="P1").is_empty is False
        assert EventFilter(after_time=T0).is_empty is False
        assert EventFilter(amount_type=AmountType.INCOME).is_empty is False

    def test_matches_property(self) -> None:
        event_filter = EventFilter(property_id="P1")

        assert event_filter.matches(_event("1")) is True
        assert event_filter.matches(_event("1", property_id="P2")) is False

    def test_time_bounds_inclusive(self) -> None:
        """시간 경계는 양끝 포함"""
        event_filter = EventFilter(property_id="P1", after_time=T0, before_time=T0)

        assert event_filter.matches(_event("1", T0)) is True
        assert event_filter.matches(_event("1", T0 + timedelta(microseconds=1))) is False
        assert event_filter.matches(_event("1", T0 - timedelta(microseconds=1))) is False

    def test_naive_bounds(self) -> None:
        """naive 경계도 UTC로 비교"""
        event_filter = EventFilter(property_id="P1", before_time=datetime(2024, 3, 5, 12, 0))

        assert event_filter.matches(_event("1", T0)) is True

    @pytest.mark.parametrize(
        "amount_type,amount,expected",
        [
            (AmountType.EXPENSE, "-5", True),
            (AmountType.EXPENSE, "5", False),
            (AmountType.INCOME, "5", True),
            (AmountType.INCOME, "-5", False),
            (AmountType.ALL, "-5", True),
            ("unknown", "5", True),
        ],
    )
    def test_amount_type(self, amount_type, amount: str, expected: bool) -> None:
        event_filter = EventFilter(property_id="P1", amount_type=amount_type)

        assert event_filter.matches(_event(amount)) is expected
