"""
원장 로깅 설정

엔진 모듈은 logging.getLogger(__name__)만 사용하고, 핸들러 구성은
프론트엔드(파서, REPL, 스크립트)가 시작 시 한 번 호출.

    from core.config.loader import load_config
    from core.logging import setup_logging_from_config

    setup_logging_from_config(load_config(), "ledger")

핸들러:
- stdout StreamHandler (console_level)
- logs/<process>.log TimedRotatingFileHandler, 자정 롤링 (file_level)
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from core.constants import Paths

if TYPE_CHECKING:
    from core.config.loader import LedgerConfig


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 7

# 환율 조회 시 요청마다 INFO를 남기는 HTTP 라이브러리
NOISY_LOGGERS = [
    "httpcore",
    "httpx",
    "urllib3",
]


def get_log_file_path(process_name: str, log_dir: Path | None = None) -> Path:
    """<log_dir>/<process_name>.log (log_dir 기본: Paths.LOGS_DIR)"""
    return (log_dir or Paths.LOGS_DIR) / f"{process_name}.log"


def parse_log_level(name: str) -> int:
    """레벨 이름을 logging 상수로 (알 수 없는 이름은 INFO)"""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def _console_handler(level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _file_handler(log_file: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        interval=1,
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    # 백업 파일: ledger.log.2024-03-06
    handler.suffix = "%Y-%m-%d"
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    process_name: str,
    console_level: int = logging.INFO,
    file_level: int = logging.INFO,
    log_dir: Path | None = None,
) -> logging.Logger:
    """루트 로거에 콘솔/파일 핸들러 설치

    다시 호출하면 기존 핸들러를 닫고 교체 (핸들러가 쌓이지 않음).

    Args:
        process_name: 로그 파일 이름
        console_level: 콘솔 레벨
        file_level: 파일 레벨
        log_dir: 로그 디렉토리 (None이면 Paths.LOGS_DIR, 없으면 생성)

    Returns:
        루트 Logger
    """
    log_file = get_log_file_path(process_name, log_dir)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    # 필터링은 핸들러 레벨에서
    root_logger.setLevel(logging.DEBUG)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    root_logger.addHandler(_console_handler(console_level, formatter))
    root_logger.addHandler(_file_handler(log_file, file_level, formatter))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.info(
        f"로깅 초기화: {process_name} "
        f"(콘솔 {logging.getLevelName(console_level)}, "
        f"파일 {log_file} {logging.getLevelName(file_level)})"
    )
    return root_logger


def setup_logging_from_config(
    config: LedgerConfig,
    process_name: str,
    log_dir: Path | None = None,
) -> logging.Logger:
    """ledger.yaml의 log_level을 콘솔/파일 양쪽에 적용"""
    level = config.log_level_value
    return setup_logging(process_name, console_level=level, file_level=level, log_dir=log_dir)
