"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
"""

from fastapi import HTTPException

from core.ledger.service import LedgerService


# =========================================================================
# LedgerService (프로세스 전역)
# =========================================================================

# lifespan에서 설정되는 전역 LedgerService 인스턴스
# save_event의 프로퍼티별 Lock이 요청 간에 공유되어야 하므로 요청마다 만들지 않음
_ledger_service: LedgerService | None = None


def set_ledger_service(service: LedgerService | None) -> None:
    """LedgerService 설정

    Args:
        service: LedgerService 인스턴스 (None이면 해제)
    """
    global _ledger_service
    _ledger_service = service


def is_ledger_available() -> bool:
    """LedgerService 초기화 여부"""
    return _ledger_service is not None


def get_ledger_service() -> LedgerService:
    """LedgerService 반환

    Raises:
        HTTPException: 초기화되지 않은 경우 503 반환
    """
    if _ledger_service is None:
        raise HTTPException(
            status_code=503,
            detail="Ledger service is not initialized",
        )
    return _ledger_service
