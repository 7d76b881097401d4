import logging
import sys
import os
from typing import Optional, Dict
from concurrent_log_handler import ConcurrentTimedRotatingFileHandler

from utils.config import Config

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - [%(process)d:%(thread)d] - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# 이름별로 한 번만 생성
_loggers: Dict[str, logging.Logger] = {}

# uvicorn 내부 로거도 같은 포맷으로 stdout 출력
UVICORN_LOG_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            "datefmt": DATE_FORMAT,
        },
    },
    "handlers": {
        "default": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "stream": "ext://sys.stdout",
        },
    },
    "loggers": {
        "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
        "uvicorn.error": {"handlers": ["default"], "level": "INFO", "propagate": False},
        "uvicorn.access": {"handlers": ["default"], "level": "INFO", "propagate": False},
    },
}


def setup_logger(name: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    콘솔(INFO)과 회전 로그 파일(DEBUG)에 함께 기록하는 로거를 반환합니다.

    Args:
        name: 로거 이름 (기본값: None, 'root')
        log_file: 로그 파일 경로 (기본값: None, LOG_DIR/app_server.log)

    Returns:
        logging.Logger: 설정된 로거 인스턴스
    """
    if name in _loggers:
        return _loggers[name]

    if not log_file:
        log_file = os.path.join(Config.LOG_DIR, 'app_server.log')

    log_dir = os.path.dirname(log_file)
    if log_dir and not os.path.exists(log_dir):
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger(name or 'root')

    # 핸들러 중복 방지
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setLevel(logging.INFO)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    # 멀티프로세스 안전, 자정마다 회전
    file_handler = ConcurrentTimedRotatingFileHandler(
        filename=log_file,
        mode='a',
        when='midnight',
        interval=1,
        backupCount=30,
        encoding='utf-8',
        delay=False,
        utc=False
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logger.propagate = False
    logger.debug(f"Logger '{name}' initialized with log file: {log_file}")

    _loggers[name] = logger
    return logger
