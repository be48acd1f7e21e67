"""
설정 로더

config.yaml 로드 + PROP_ 환경 변수 덮어쓰기

우선순위: 환경 변수 > config.yaml > 기본값
예) PROP_DATABASE_PATH=/tmp/ledger.db → database.path
"""

import argparse
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

from core.constants import PROJECT_ROOT, Defaults, EnvVars, Paths


@dataclass(frozen=True)
class DatabaseConfig:
    """DB 연결 설정"""

    path: Path = Paths.DEFAULT_DB
    timeout: float = Defaults.DB_TIMEOUT_SEC


@dataclass(frozen=True)
class WebConfig:
    """Web 서버 설정"""

    host: str = Defaults.WEB_HOST
    port: int = Defaults.WEB_PORT


@dataclass(frozen=True)
class LoggingConfig:
    """로깅 설정"""

    level: str = Defaults.LOG_LEVEL


@dataclass(frozen=True)
class AppConfig:
    """애플리케이션 설정

    불변 데이터 구조로 설정 변경 방지
    """

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    web: WebConfig = field(default_factory=WebConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoadError(Exception):
    """설정 로드 실패 예외"""

    pass


_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def config_path_from_args(argv: Sequence[str] | None = None) -> Path:
    """명령행 인자에서 설정 파일 경로 추출

    -c/--config 외의 인자는 무시.

    Args:
        argv: 명령행 인자 (None이면 sys.argv[1:])
    """
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Paths.CONFIG_FILE,
        help="설정 파일 경로",
    )
    args, _ = parser.parse_known_args(argv)
    return args.config


def _read_yaml(path: Path) -> dict[str, Any]:
    """YAML 파일 읽기 (파일이 없으면 빈 dict)"""
    if not path.exists():
        return {}

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"설정 파일 파싱 실패: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(f"설정 파일 최상위는 매핑이어야 합니다: {path}")
    return data


def _apply_env_overrides(data: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    """PROP_ 환경 변수를 점 표기 키로 변환하여 덮어쓰기

    PROP_WEB_PORT → web.port
    """
    merged = {key: dict(value) if isinstance(value, dict) else value for key, value in data.items()}

    for env_key, env_value in environ.items():
        if not env_key.startswith(EnvVars.PREFIX):
            continue

        path = env_key[len(EnvVars.PREFIX):].lower().split("_", 1)
        if len(path) != 2:
            continue

        section, key = path
        section_data = merged.setdefault(section, {})
        if not isinstance(section_data, dict):
            raise ConfigLoadError(f"'{section}' 섹션은 매핑이어야 합니다")
        section_data[key] = env_value

    return merged


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigLoadError(f"'{name}' 섹션은 매핑이어야 합니다")
    return value


def _build_config(data: dict[str, Any]) -> AppConfig:
    """dict를 AppConfig로 변환 및 검증"""
    db_data = _section(data, "database")
    web_data = _section(data, "web")
    log_data = _section(data, "logging")

    try:
        timeout = float(db_data.get("timeout", Defaults.DB_TIMEOUT_SEC))
        port = int(web_data.get("port", Defaults.WEB_PORT))
    except (TypeError, ValueError) as e:
        raise ConfigLoadError(f"숫자 설정 값이 잘못되었습니다: {e}") from e

    if timeout <= 0:
        raise ConfigLoadError(f"database.timeout은 0보다 커야 합니다: {timeout}")
    if not 0 < port < 65536:
        raise ConfigLoadError(f"web.port 범위 오류: {port}")

    db_path = Path(db_data.get("path", Paths.DEFAULT_DB))
    if not db_path.is_absolute():
        db_path = PROJECT_ROOT / db_path

    level = str(log_data.get("level", Defaults.LOG_LEVEL)).upper()
    if level not in _VALID_LOG_LEVELS:
        raise ConfigLoadError(
            f"유효하지 않은 logging.level입니다: '{level}'. 유효한 값: {list(_VALID_LOG_LEVELS)}"
        )

    return AppConfig(
        database=DatabaseConfig(path=db_path, timeout=timeout),
        web=WebConfig(host=str(web_data.get("host", Defaults.WEB_HOST)), port=port),
        logging=LoggingConfig(level=level),
    )


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """설정 로드

    Args:
        path: config.yaml 경로 (None이면 기본 경로, 파일이 없으면 기본값 사용)
        environ: 환경 변수 (None이면 os.environ)

    Returns:
        AppConfig 인스턴스

    Raises:
        ConfigLoadError: 파일 형식 또는 값이 잘못된 경우
    """
    if path is None:
        path = Paths.CONFIG_FILE
    if environ is None:
        environ = os.environ

    data = _read_yaml(path)
    data = _apply_env_overrides(data, environ)
    return _build_config(data)


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    config.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _config: AppConfig | None = None

    def __new__(cls, config_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, config_path: Path | None = None) -> None:
        if self._config is None:
            type(self)._config = load_config(config_path)

    @property
    def config(self) -> AppConfig:
        """전체 설정"""
        assert self._config is not None
        return self._config

    @property
    def db_path(self) -> Path:
        """DB 파일 경로"""
        return self.config.database.path

    @property
    def db_timeout(self) -> float:
        """DB 잠금 대기 시간 (초)"""
        return self.config.database.timeout

    @property
    def log_level(self) -> str:
        """로그 레벨"""
        return self.config.logging.level

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(config_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        config_path: config.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(config_path)
