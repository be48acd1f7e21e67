"""
SQLite 어댑터

property_event 저장용 SQLite 연결 (WAL 모드).
Web 프로세스 하나가 연결 하나를 공유하고, 쓰기 트랜잭션은 Lock으로 직렬화.

주의: SQLite alias로 time, count 사용 금지 (예약어)
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Sequence

import aiosqlite

from core.constants import Defaults

logger = logging.getLogger(__name__)

# property_event: append-only 잔고 이벤트
# - amount/post_event_balance: Decimal 문자열 (정밀도 보존)
# - occurred_at: 마이크로초 포함 UTC ISO 8601 (문자열 비교 = 시간 비교)
SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS property_event (
        seq                INTEGER PRIMARY KEY AUTOINCREMENT,
        property_id        TEXT NOT NULL,
        amount             TEXT NOT NULL,
        post_event_balance TEXT NOT NULL,
        occurred_at        TEXT NOT NULL,

        created_at         TEXT NOT NULL DEFAULT (datetime('now'))
    )
    """,
    # 현재 잔고 조회 (property_id + 저장 순서)
    """
    CREATE INDEX IF NOT EXISTS ix_property_event_seq
    ON property_event(property_id, seq)
    """,
    # 기간 조회 / 과거 시점 잔고 조회
    """
    CREATE INDEX IF NOT EXISTS ix_property_event_occurred_at
    ON property_event(property_id, occurred_at)
    """,
)


async def create_connection(
    db_path: Path | str,
    timeout: float = Defaults.DB_TIMEOUT_SEC,
) -> aiosqlite.Connection:
    """WAL 모드 연결 생성

    Args:
        db_path: DB 파일 경로 (상위 디렉토리는 자동 생성)
        timeout: 잠금 대기 시간 (초, busy_timeout으로 적용)
    """
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(str(path))
    await conn.execute("PRAGMA journal_mode=WAL")
    await conn.execute(f"PRAGMA busy_timeout={int(timeout * 1000)}")

    logger.info(
        "SQLite 연결 생성",
        extra={"db_path": str(path), "timeout": timeout},
    )
    return conn


class SQLiteAdapter:
    """공유 SQLite 연결 래퍼

    Args:
        db_path: DB 파일 경로
        timeout: 잠금 대기 시간 (초)

    같은 연결에서 두 트랜잭션이 섞이면 한쪽의 rollback이 다른 쪽 INSERT까지
    되돌리므로 transaction()은 인스턴스 Lock을 잡고 실행됨.

    사용 예시:
    ```python
    async with SQLiteAdapter(settings.db_path, timeout=settings.db_timeout) as db:
        await init_schema(db)

        async with db.transaction() as conn:
            await conn.execute("INSERT INTO property_event ...", params)

        rows = await db.fetchall("SELECT ... WHERE property_id = ?", ("P1",))
    ```
    """

    def __init__(
        self,
        db_path: Path | str,
        timeout: float = Defaults.DB_TIMEOUT_SEC,
    ):
        self.db_path = Path(db_path)
        self.timeout = timeout
        self._conn: aiosqlite.Connection | None = None
        self._write_lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    def _require_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError(f"DB 연결 전입니다: {self.db_path}")
        return self._conn

    async def connect(self) -> None:
        """연결 생성 (이미 연결되어 있으면 무시)"""
        if self._conn is None:
            self._conn = await create_connection(self.db_path, self.timeout)

    async def close(self) -> None:
        """연결 종료 (연결이 없으면 무시)"""
        conn, self._conn = self._conn, None
        if conn is not None:
            await conn.close()
            logger.info("SQLite 연결 종료", extra={"db_path": str(self.db_path)})

    async def execute(self, sql: str, parameters: Sequence[Any] = ()) -> aiosqlite.Cursor:
        return await self._require_conn().execute(sql, tuple(parameters))

    async def fetchone(self, sql: str, parameters: Sequence[Any] = ()) -> tuple[Any, ...] | None:
        cursor = await self.execute(sql, parameters)
        row = await cursor.fetchone()
        await cursor.close()
        return row

    async def fetchall(self, sql: str, parameters: Sequence[Any] = ()) -> list[tuple[Any, ...]]:
        cursor = await self.execute(sql, parameters)
        rows = await cursor.fetchall()
        await cursor.close()
        return list(rows)

    async def commit(self) -> None:
        await self._require_conn().commit()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """쓰기 트랜잭션

        블록이 정상 종료되면 커밋, 예외(취소 포함)면 롤백 후 재발생.
        """
        conn = self._require_conn()

        async with self._write_lock:
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                raise
            await conn.commit()

    async def table_exists(self, table_name: str) -> bool:
        row = await self.fetchone(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
            (table_name,),
        )
        return row is not None

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


async def init_schema(adapter: SQLiteAdapter) -> None:
    """property_event 테이블/인덱스 생성 (여러 번 호출해도 안전)

    Web 시작 시 lifespan에서 호출.
    """
    async with adapter.transaction() as conn:
        for statement in SCHEMA_STATEMENTS:
            await conn.execute(statement)

    logger.info("스키마 초기화 완료", extra={"db_path": str(adapter.db_path)})
