"""
프로퍼티 잔고 원장

프로퍼티별 잔고를 append-only 이벤트로 추적.

사용 예시:
```python
from core.ledger import LedgerService

service = LedgerService(store)

# 이벤트 저장
balance = await service.save_event("P1", Decimal("-40"), now_utc())

# 잔고 조회
balance = await service.get_balance("P1")

# 월간 리포트
events, starting_balance = await service.get_monthly_report("P1", 3, 2024, 0, 50)
```
"""

from core.ledger.service import LedgerService, MonthlyReport, sort_by_order, to_amount

__all__ = [
    "LedgerService",
    "MonthlyReport",
    "sort_by_order",
    "to_amount",
]
