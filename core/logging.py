"""
로깅 설정

Web 프로세스 루트 로거 구성.
- 콘솔: config.yaml의 logging.level (기본 INFO)
- 파일: logs/<process>/<process>.log, 자정마다 롤링, 7일 보관

사용법:
    from core.logging import setup_logging
    setup_logging("web", console_level=settings.log_level)

모듈에서는 logging.getLogger(__name__) + extra={...} 형태로 기록.
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.constants import Paths


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 7

# 요청/쿼리마다 기록하는 라이브러리 로거 (WARNING 이상만)
NOISY_LOGGERS = (
    "aiosqlite",
    "httpcore",
    "httpx",
    "asyncio",
    "uvicorn.access",
)


def get_log_dir(process_name: str) -> Path:
    """프로세스별 로그 디렉토리 (web 외에는 logs/ 바로 아래)"""
    if process_name == "web":
        return Paths.WEB_LOGS_DIR
    return Paths.LOGS_DIR


def _console_handler(level: int | str, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _daily_file_handler(log_file: Path, level: int | str, formatter: logging.Formatter) -> logging.Handler:
    handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        interval=1,
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.suffix = "%Y-%m-%d"  # web.log.2024-03-05
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    process_name: str,
    console_level: int | str = logging.INFO,
    file_level: int | str = logging.INFO,
    log_dir: Path | None = None,
) -> logging.Logger:
    """루트 로거 초기화

    기존 루트 핸들러는 닫고 교체하므로 여러 번 호출해도 중복 출력 없음.

    Args:
        process_name: 프로세스 이름 (로그 파일명/디렉토리 결정)
        console_level: 콘솔 로그 레벨
        file_level: 파일 로그 레벨
        log_dir: 로그 디렉토리 (None이면 get_log_dir 결과)

    Returns:
        루트 Logger
    """
    log_dir = log_dir or get_log_dir(process_name)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{process_name}.log"

    root_logger = logging.getLogger()
    # 필터링은 핸들러 레벨에서
    root_logger.setLevel(logging.DEBUG)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    root_logger.addHandler(_console_handler(console_level, formatter))
    root_logger.addHandler(_daily_file_handler(log_file, file_level, formatter))

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger.info(
        "로깅 초기화 완료",
        extra={
            "process_name": process_name,
            "console_level": str(console_level),
            "log_file": str(log_file),
        },
    )
    return root_logger
