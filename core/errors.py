"""
Ledger 예외 정의

- InvalidArgumentError: 잘못된 입력 (Store 접근 전에 거부, 재시도 대상 아님)
- InvalidCursorError: 페이지네이션 토큰 디코딩 실패
- StoreFailureError: Event Store 오류 (작업 컨텍스트와 함께 그대로 전파)

"찾을 수 없음"은 오류가 아님: 이력이 없으면 잔고 0, 빈 목록으로 표현.
"""


class LedgerError(Exception):
    """Ledger 예외 기본 클래스"""

    pass


class InvalidArgumentError(LedgerError, ValueError):
    """잘못된 인자"""

    pass


class InvalidCursorError(InvalidArgumentError):
    """잘못된 페이지네이션 커서"""

    pass


class StoreFailureError(LedgerError):
    """Event Store 호출 실패

    Args:
        operation: 실패한 작업 이름 (예: "save event")
        cause: 원인 예외
    """

    def __init__(self, operation: str, cause: BaseException):
        super().__init__(f"{operation}: {cause}")
        self.operation = operation
        self.cause = cause
