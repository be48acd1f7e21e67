"""
페이지네이션 커서 유틸리티

{limit, offset}을 불투명한 URL-safe 토큰으로 인코딩/디코딩.
규칙: base64url(compact JSON), 패딩 제거

서명되지 않은 토큰이므로 클라이언트가 offset을 임의로 만들 수 있음.
토큰은 전송 편의를 위한 것일 뿐 필터와 묶여 있지 않음.
"""

import base64
import binascii
import json

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.constants import Defaults
from core.errors import InvalidCursorError


class PageCursor(BaseModel):
    """페이지네이션 상태"""

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    limit: int = Field(..., ge=0, le=Defaults.MAX_OFFSET, description="페이지 크기")
    offset: int = Field(..., ge=0, le=Defaults.MAX_OFFSET, description="조회 시작 위치")


def encode_cursor(limit: int, offset: int) -> str:
    """커서 토큰 생성

    Args:
        limit: 페이지 크기
        offset: 조회 시작 위치

    Returns:
        URL-safe 토큰 (limit, offset 모두 0이면 빈 문자열)

    Example:
        >>> encode_cursor(0, 0)
        ''
        >>> encode_cursor(10, 20)
        'eyJsaW1pdCI6MTAsIm9mZnNldCI6MjB9'
    """
    if limit == 0 and offset == 0:
        return ""

    try:
        cursor = PageCursor(limit=limit, offset=offset)
    except ValidationError as e:
        raise InvalidCursorError(f"커서 값 오류: limit={limit}, offset={offset}") from e

    raw = json.dumps(cursor.model_dump(), separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode_cursor(token: str) -> PageCursor:
    """커서 토큰 해석

    빈 문자열은 "커서 없음"이므로 호출자가 먼저 확인해야 함.

    Args:
        token: encode_cursor가 만든 토큰

    Returns:
        PageCursor

    Raises:
        InvalidCursorError: 디코딩 실패 또는 형식 불일치
    """
    if not token:
        raise InvalidCursorError("빈 커서 토큰은 해석할 수 없습니다")

    padded = token + "=" * (-len(token) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError, ValueError) as e:
        raise InvalidCursorError(f"커서 디코딩 실패: {e}") from e

    try:
        return PageCursor.model_validate_json(raw)
    except ValidationError as e:
        raise InvalidCursorError(f"커서 형식 오류: {e.error_count()}개 필드 검증 실패") from e


def next_page_token(limit: int, offset: int, returned: int) -> str:
    """다음 페이지 토큰 생성

    페이지가 가득 찼으면(returned >= limit) 다음 offset의 토큰을,
    아니면 빈 문자열(마지막 페이지)을 반환.
    다음 offset이 MAX_OFFSET을 넘으면 더 조회할 수 없으므로 빈 문자열.

    Args:
        limit: 요청한 페이지 크기
        offset: 요청한 시작 위치
        returned: 실제로 반환된 이벤트 수
    """
    if offset + limit > Defaults.MAX_OFFSET:
        return ""
    if returned >= limit:
        return encode_cursor(limit, offset + limit)
    return ""
