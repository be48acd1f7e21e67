"""
타임존 유틸리티

내부 저장: UTC 원칙 준수를 위한 헬퍼 함수
"""

from datetime import datetime, timezone, timedelta

# 시간 비교의 최소 단위 (datetime 해상도)
TIME_UNIT = timedelta(microseconds=1)


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)

    datetime.now(timezone.utc)의 축약형.

    Returns:
        현재 UTC 시간 (tzinfo=timezone.utc)
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """datetime을 UTC로 정규화

    Args:
        dt: datetime 객체 (naive면 UTC로 간주)

    Returns:
        UTC 타임존의 datetime
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_storage_str(dt: datetime) -> str:
    """DB 저장용 고정 길이 ISO 8601 문자열

    마이크로초까지 항상 포함하므로 문자열 비교 = 시간 비교.

    Example:
        >>> to_storage_str(datetime(2024, 3, 5, tzinfo=timezone.utc))
        '2024-03-05T00:00:00.000000+00:00'
    """
    return ensure_utc(dt).isoformat(timespec="microseconds")


def from_storage_str(value: str) -> datetime:
    """DB 문자열을 UTC datetime으로 변환"""
    return ensure_utc(datetime.fromisoformat(value))


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """월의 시작/끝 시각 (UTC)

    Args:
        year: 연도
        month: 월 (1-12)

    Returns:
        (월 첫 순간, 다음 달 시작 직전 순간)

    Example:
        >>> month_bounds(2024, 2)[1]
        datetime.datetime(2024, 2, 29, 23, 59, 59, 999999, tzinfo=datetime.timezone.utc)
    """
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        next_start = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        next_start = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, next_start - TIME_UNIT
