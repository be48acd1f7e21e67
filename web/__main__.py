"""
Web 진입점

실행 방법:
    python -m web
    python -m web -c config/config.yaml
"""

import sys

import uvicorn

from core.config.loader import ConfigLoadError, config_path_from_args, get_settings


def main() -> int:
    try:
        settings = get_settings(config_path_from_args(sys.argv[1:]))
    except ConfigLoadError as e:
        print(f"설정 로드 실패: {e}", file=sys.stderr)
        return 1

    web_config = settings.config.web
    uvicorn.run(
        "web.app:app",
        host=web_config.host,
        port=web_config.port,
        reload=False,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
