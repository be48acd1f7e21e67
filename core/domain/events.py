"""
PropertyEvent 도메인 모델

프로퍼티 잔고의 모든 변경은 PropertyEvent로 기록됨 (append-only).
저장된 이벤트는 수정/삭제되지 않으며, 정정은 상쇄 이벤트로 표현.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Context, Decimal, DivisionByZero, Inexact, InvalidOperation, Overflow
from typing import Any

from core.types import AmountType
from core.utils.timezone import ensure_utc

# 잔고 누적용 컨텍스트: 반올림이 필요하면 Inexact 발생 (조용한 절사 금지)
BALANCE_CONTEXT = Context(prec=60, traps=[InvalidOperation, DivisionByZero, Overflow, Inexact])


@dataclass(frozen=True)
class PropertyEvent:
    """잔고 변동 이벤트

    post_event_balance는 저장 시점에 LedgerService가 계산한 누적 잔고 스냅샷.
    Event Store는 이 값을 다시 계산하지 않음.
    """

    property_id: str
    amount: Decimal
    post_event_balance: Decimal
    occurred_at: datetime
    seq: int | None = field(default=None, compare=False)  # Store가 부여하는 저장 순번

    @staticmethod
    def create(
        property_id: str,
        amount: Decimal,
        prior_balance: Decimal,
        occurred_at: datetime,
    ) -> "PropertyEvent":
        """직전 잔고를 기반으로 새 이벤트 생성

        Args:
            property_id: 프로퍼티 ID
            amount: 변동 금액 (음수=지출, 양수=수입)
            prior_balance: 직전 이벤트의 post_event_balance (없으면 0)
            occurred_at: 발생 시각 (naive면 UTC로 간주)

        Returns:
            새 PropertyEvent 인스턴스 (seq 미할당)

        Raises:
            decimal.Inexact: 잔고가 BALANCE_CONTEXT 정밀도를 넘는 경우
        """
        return PropertyEvent(
            property_id=property_id,
            amount=amount,
            post_event_balance=BALANCE_CONTEXT.add(prior_balance, amount),
            occurred_at=ensure_utc(occurred_at),
        )

    def with_seq(self, seq: int) -> "PropertyEvent":
        """저장 순번이 할당된 사본 반환"""
        return PropertyEvent(
            property_id=self.property_id,
            amount=self.amount,
            post_event_balance=self.post_event_balance,
            occurred_at=self.occurred_at,
            seq=seq,
        )

    @property
    def is_expense(self) -> bool:
        return self.amount < 0

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    def to_dict(self) -> dict[str, Any]:
        """딕셔너리로 변환 (직렬화용)"""
        return {
            "property_id": self.property_id,
            "amount": str(self.amount),
            "post_event_balance": str(self.post_event_balance),
            "occurred_at": self.occurred_at.isoformat(),
            "seq": self.seq,
        }


@dataclass(frozen=True)
class EventFilter:
    """이벤트 조회 조건

    시간 조건은 양끝 포함 (after_time <= occurred_at <= before_time).
    None은 해당 조건 없음을 의미.
    """

    property_id: str = ""
    after_time: datetime | None = None
    before_time: datetime | None = None
    amount_type: AmountType = AmountType.ALL

    @property
    def is_empty(self) -> bool:
        """조건이 하나도 없는 필터인지 확인

        빈 필터는 전체 조회가 되므로 Store에서 거부함.
        """
        return (
            not self.property_id
            and self.after_time is None
            and self.before_time is None
            and AmountType.coerce(self.amount_type) == AmountType.ALL
        )

    def matches(self, event: PropertyEvent) -> bool:
        """이벤트가 필터 조건을 만족하는지 확인 (메모리 내 Store용)"""
        if self.property_id and event.property_id != self.property_id:
            return False
        if self.after_time is not None and event.occurred_at < ensure_utc(self.after_time):
            return False
        if self.before_time is not None and event.occurred_at > ensure_utc(self.before_time):
            return False

        amount_type = AmountType.coerce(self.amount_type)
        if amount_type == AmountType.EXPENSE:
            return event.is_expense
        if amount_type == AmountType.INCOME:
            return event.is_income
        return True
