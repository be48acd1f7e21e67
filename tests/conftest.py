"""
pytest 공통 fixture 정의

LedgerService / Event Store / 설정 테스트용 fixture
"""

import tempfile
from pathlib import Path

import pytest

from adapters.mock.event_store import MockEventStore
from core.config.loader import Settings
from core.ledger.service import LedgerService


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_settings():
    """Settings 싱글턴 초기화 (테스트 간 격리)"""
    Settings.reset()
    yield
    Settings.reset()


@pytest.fixture
def temp_config_file(temp_dir: Path) -> Path:
    """테스트용 config.yaml 파일 생성"""
    config_content = f"""# 테스트용 config.yaml
database:
  path: {temp_dir / "ledger.db"}
  timeout: 5

web:
  host: 0.0.0.0
  port: 8080

logging:
  level: debug
"""
    config_path = temp_dir / "config.yaml"
    config_path.write_text(config_content, encoding="utf-8")
    return config_path


@pytest.fixture
def mock_store() -> MockEventStore:
    """빈 Mock Event Store"""
    return MockEventStore()


@pytest.fixture
def failing_store() -> MockEventStore:
    """모든 호출에서 예외를 던지는 Mock Event Store"""
    return MockEventStore(should_fail=True)


@pytest.fixture
def ledger_service(mock_store: MockEventStore) -> LedgerService:
    """Mock Store 기반 LedgerService"""
    return LedgerService(mock_store)
