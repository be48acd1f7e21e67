"""
유틸리티 패키지

페이지네이션 커서, 타임존 처리 등 공통 유틸리티
"""

from core.utils.cursor import (
    PageCursor,
    encode_cursor,
    decode_cursor,
    next_page_token,
)
from core.utils.timezone import (
    TIME_UNIT,
    now_utc,
    ensure_utc,
    to_storage_str,
    from_storage_str,
    month_bounds,
)

__all__ = [
    "PageCursor",
    "encode_cursor",
    "decode_cursor",
    "next_page_token",
    "TIME_UNIT",
    "now_utc",
    "ensure_utc",
    "to_storage_str",
    "from_storage_str",
    "month_bounds",
]
