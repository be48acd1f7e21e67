"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import SaveEventRequest
from web.models.responses import (
    BalanceResponse,
    EventListResponse,
    EventResponse,
    HealthResponse,
    MonthlyReportEventResponse,
    MonthlyReportResponse,
)

__all__ = [
    # Requests
    "SaveEventRequest",
    # Responses
    "BalanceResponse",
    "EventListResponse",
    "EventResponse",
    "HealthResponse",
    "MonthlyReportEventResponse",
    "MonthlyReportResponse",
]
