"""
타입 정의 모듈

이벤트 조회 필터와 정렬에 사용하는 Enum 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class SortOrder(str, Enum):
    """이벤트 정렬 방향 (occurred_at 기준)"""

    ASCENDING = "asc"
    DESCENDING = "desc"


class AmountType(str, Enum):
    """금액 부호 필터

    EXPENSE: amount < 0
    INCOME: amount > 0
    """

    ALL = "all"
    EXPENSE = "expense"
    INCOME = "income"

    @classmethod
    def coerce(cls, value: "AmountType | str | None") -> "AmountType":
        """알 수 없는 값은 ALL로 취급"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.ALL


class RecencyOrder(str, Enum):
    """가장 최근 이벤트를 판단하는 기준

    SAVED: 저장 순서 (현재 잔고)
    OCCURRED: 발생 시각, 동률이면 저장 순서 (과거 시점 잔고)
    """

    SAVED = "saved"
    OCCURRED = "occurred"
