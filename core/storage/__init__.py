"""
스토리지 모듈

프로퍼티 이벤트 저장소 인터페이스 및 SQLite 구현 제공
"""

from core.storage.event_store import IEventStore, SQLiteEventStore

__all__ = [
    "IEventStore",
    "SQLiteEventStore",
]
