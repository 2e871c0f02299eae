"""
로깅 설정 유틸리티

Web 프로세스에서 사용하는 공통 로깅 설정.
- 콘솔: INFO 레벨
- 파일: INFO 레벨 (TimedRotatingFileHandler, daily)
- `extra={...}` 로 넘긴 필드는 메시지 뒤에 key=value 로 붙는다

사용법:
    from core.logging import setup_logging
    setup_logging("web")

    logger.info("대출 상환", extra={"loan_id": 3, "installment_index": 2})
    # 2026-10-19 09:00:00 | INFO     | engine.loans | 대출 상환 | loan_id=3 installment_index=2
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.constants import Paths


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 14  # 2주치 보관

# 로그에 남기면 안 되는 extra 키
REDACTED_KEYS = frozenset({"password", "password_hash", "token", "signature_key", "server_key"})

# 로그 볼륨이 큰 라이브러리 로거
NOISY_LOGGERS = [
    "aiosqlite",      # 쿼리마다 executing/completed 로그
    "asyncpg",
    "httpcore",
    "httpx",
    "urllib3",        # pywebpush 내부 requests
    "asyncio",
]

# LogRecord 기본 속성 (extra 로 취급하지 않음)
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


class ExtraFormatter(logging.Formatter):
    """extra 필드를 key=value 로 덧붙이는 포매터

    비밀 값(REDACTED_KEYS)은 *** 로 가린다.
    """

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)

        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if not extras:
            return line

        pairs = " ".join(
            f"{key}={'***' if key in REDACTED_KEYS else value}"
            for key, value in extras.items()
        )

        # 예외 traceback 이 붙은 경우 첫 줄 뒤에 끼워 넣는다
        head, sep, tail = line.partition("\n")
        return f"{head} | {pairs}{sep}{tail}"


def get_log_dir(process_name: str) -> Path:
    """프로세스별 로그 디렉토리"""
    if process_name == "web":
        return Paths.WEB_LOGS_DIR
    return Paths.LOGS_DIR


def setup_logging(
    process_name: str,
    console_level: int = logging.INFO,
    file_level: int = logging.INFO,
    log_dir: Path | None = None,
) -> logging.Logger:
    """로깅 설정 초기화

    Args:
        process_name: 프로세스 이름 ("web" 등), 로그 파일명으로도 사용
        console_level: 콘솔 로그 레벨
        file_level: 파일 로그 레벨
        log_dir: 로그 디렉토리 (None이면 프로세스별 기본 경로)

    Returns:
        설정된 루트 Logger
    """
    if log_dir is None:
        log_dir = get_log_dir(process_name)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{process_name}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # 핸들러에서 필터링

    # 재호출 시 중복 출력 방지
    root_logger.handlers.clear()

    formatter = ExtraFormatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        interval=1,
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.suffix = "%Y-%m-%d"  # web.log.2026-10-19
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger.info(
        "로깅 초기화 완료",
        extra={"process_name": process_name, "log_file": str(log_file)},
    )

    return root_logger
