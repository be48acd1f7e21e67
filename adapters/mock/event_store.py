"""
Mock 이벤트 저장소

테스트용 메모리 내 Event Store.
IEventStore Protocol 준수.
"""

from dataclasses import dataclass, field

from core.domain.events import EventFilter, PropertyEvent
from core.errors import InvalidArgumentError
from core.types import RecencyOrder


@dataclass
class MockStoreState:
    """Mock 상태 (메모리 내 저장)"""

    # 저장 순서대로 보관
    events: list[PropertyEvent] = field(default_factory=list)

    # 시뮬레이션 옵션
    should_fail: bool = False
    error_message: str = "Mock store error"

    # 호출 횟수 (검증용)
    save_calls: int = 0
    query_calls: int = 0

    seq_counter: int = 0


class MockEventStore:
    """Mock Event Store

    IEventStore Protocol 구현.
    메모리 내 상태 관리로 테스트 시나리오 지원.

    사용 예시:
    ```python
    store = MockEventStore()
    service = LedgerService(store)

    await service.save_event("P1", Decimal("100"), now_utc())
    assert len(store.events) == 1

    store.state.should_fail = True  # 이후 모든 호출에서 예외 발생
    ```
    """

    def __init__(self, events: list[PropertyEvent] | None = None, should_fail: bool = False):
        self.state = MockStoreState(should_fail=should_fail)
        for event in events or []:
            self._append(event)

    @property
    def events(self) -> list[PropertyEvent]:
        """저장된 이벤트 (저장 순서)"""
        return list(self.state.events)

    def _append(self, event: PropertyEvent) -> PropertyEvent:
        self.state.seq_counter += 1
        saved = event.with_seq(self.state.seq_counter)
        self.state.events.append(saved)
        return saved

    def _check_failure(self) -> None:
        if self.state.should_fail:
            raise RuntimeError(self.state.error_message)

    async def save_event(self, event: PropertyEvent) -> PropertyEvent:
        self.state.save_calls += 1
        self._check_failure()
        return self._append(event)

    async def get_events_for_filter(
        self,
        event_filter: EventFilter,
        limit: int,
        offset: int,
    ) -> list[PropertyEvent]:
        self.state.query_calls += 1
        self._check_failure()
        if event_filter.is_empty:
            raise InvalidArgumentError("조회 조건이 지정되지 않았습니다")

        matched = [e for e in self.state.events if event_filter.matches(e)]
        start = max(offset, 0)
        if limit > 0:
            return matched[start:start + limit]
        return matched[start:]

    async def get_most_recent_event_for_filter(
        self,
        event_filter: EventFilter,
        order_by: RecencyOrder = RecencyOrder.SAVED,
    ) -> PropertyEvent | None:
        self.state.query_calls += 1
        self._check_failure()
        if event_filter.is_empty:
            raise InvalidArgumentError("조회 조건이 지정되지 않았습니다")

        matched = [e for e in self.state.events if event_filter.matches(e)]
        if not matched:
            return None

        if order_by == RecencyOrder.OCCURRED:
            return max(matched, key=lambda e: (e.occurred_at, e.seq))
        return matched[-1]
