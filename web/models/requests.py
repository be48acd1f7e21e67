"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from core.constants import Defaults


class SaveEventRequest(BaseModel):
    """이벤트 저장 요청

    occurred_at을 생략하면 서버 수신 시각(UTC)으로 기록.
    """

    amount: Decimal = Field(
        ...,
        max_digits=Defaults.MAX_AMOUNT_DIGITS,
        description="변동 금액 (음수=지출, 양수=수입)",
    )
    occurred_at: datetime | None = Field(default=None, description="발생 시각 (과거 시각 허용)")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"amount": "100.50"},
                {"amount": "-40", "occurred_at": "2024-03-05T09:00:00Z"},
            ]
        }
    }

    @field_validator("amount")
    @classmethod
    def amount_must_be_nonzero(cls, value: Decimal) -> Decimal:
        if not value.is_finite():
            raise ValueError("amount는 유한한 숫자여야 합니다")
        if value == 0:
            raise ValueError("amount는 0일 수 없습니다")
        return value
