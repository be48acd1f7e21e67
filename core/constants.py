"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → property_ledger/)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent

APP_VERSION: str = "1.0.0"


class Defaults:
    """기본값 상수 (config.yaml에 값이 없을 때 사용)"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 1323

    LOG_LEVEL: str = "INFO"
    DB_TIMEOUT_SEC: float = 30.0

    PAGE_LIMIT: int = 100
    MAX_PAGE_LIMIT: int = 500
    # SQLite INTEGER 상한 (LIMIT/OFFSET 바인딩 가능 범위)
    MAX_OFFSET: int = 2**63 - 1

    # 금액 유효 자릿수 상한 (정수부 + 소수부)
    MAX_AMOUNT_DIGITS: int = 28


class CalendarRange:
    """월간 리포트에서 허용하는 달력 범위"""

    MIN_YEAR: int = 1970
    MAX_YEAR: int = 2030
    MIN_MONTH: int = 1
    MAX_MONTH: int = 12


class EnvVars:
    """환경 변수 설정"""

    PREFIX: str = "PROP_"


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"

    # 설정 파일
    CONFIG_FILE: Path = CONFIG_DIR / "config.yaml"

    # DB 파일
    DEFAULT_DB: Path = DATA_DIR / "property_ledger.db"
