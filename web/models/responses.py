"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화
금액은 정밀도 보존을 위해 문자열로 반환
"""

from datetime import datetime

from pydantic import BaseModel, Field

from core.domain.events import PropertyEvent


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    version: str = Field(..., description="API 버전")
    database: str = Field(..., description="DB 상태 (connected/unavailable)")


class BalanceResponse(BaseModel):
    """잔고 응답"""

    balance: str = Field(..., description="잔고")


class EventResponse(BaseModel):
    """이벤트 응답"""

    property_id: str = Field(..., description="프로퍼티 ID")
    event_amount: str = Field(..., description="변동 금액")
    date: datetime = Field(..., description="발생 시각 (UTC)")

    @classmethod
    def from_event(cls, event: PropertyEvent) -> "EventResponse":
        return cls(
            property_id=event.property_id,
            event_amount=str(event.amount),
            date=event.occurred_at,
        )


class EventListResponse(BaseModel):
    """이벤트 목록 응답

    next_token이 빈 문자열이면 마지막 페이지.
    """

    events: list[EventResponse] = Field(default_factory=list, description="이벤트 목록")
    next_token: str = Field(default="", description="다음 페이지 토큰")


class MonthlyReportEventResponse(EventResponse):
    """월간 리포트 이벤트 응답

    balance는 월 기준이 아닌 전체 누적 잔고.
    """

    balance: str = Field(..., description="이벤트 반영 후 누적 잔고")

    @classmethod
    def from_event(cls, event: PropertyEvent) -> "MonthlyReportEventResponse":
        return cls(
            property_id=event.property_id,
            event_amount=str(event.amount),
            date=event.occurred_at,
            balance=str(event.post_event_balance),
        )


class MonthlyReportResponse(BaseModel):
    """월간 리포트 응답"""

    starting_balance: str = Field(..., description="월초 잔고")
    events: list[MonthlyReportEventResponse] = Field(default_factory=list, description="해당 월 이벤트")
    next_token: str = Field(default="", description="다음 페이지 토큰")
