"""
FastAPI 애플리케이션

라우터 등록 및 앱 설정.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.config.loader import get_settings
from core.constants import APP_VERSION
from core.ledger.service import LedgerService
from core.logging import setup_logging
from core.storage.event_store import SQLiteEventStore
from web.dependencies import set_ledger_service
from web.routes import health, properties

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 생명주기 관리

    시작 시 로깅/DB 스키마/LedgerService 초기화, 종료 시 DB 연결 정리.
    """
    settings = get_settings()

    # 로깅 설정 (콘솔 + 파일)
    setup_logging("web", console_level=settings.log_level)

    db = SQLiteAdapter(settings.db_path, timeout=settings.db_timeout)
    await db.connect()

    try:
        # DB 스키마 자동 초기화
        await init_schema(db)

        set_ledger_service(LedgerService(SQLiteEventStore(db)))
        logger.info("Web: LedgerService 초기화 완료", extra={"db_path": str(settings.db_path)})

        yield
    finally:
        # 종료 시 - 리소스 정리
        set_ledger_service(None)
        await db.close()
        logger.info("Web: DB 연결 종료 완료")


app = FastAPI(
    title="Property Ledger API",
    description="프로퍼티별 잔고 이벤트 원장 API",
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# =========================================================================
# API 라우터 등록
# =========================================================================

app.include_router(health.router)
app.include_router(properties.router)
