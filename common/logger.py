# logger.py
"""
로깅 설정 및 logger 객체 반환 함수

    - ✅ 터미널 출력: 기본적으로 활성화
    - ✅ 구조화된 로깅: JSON 형식 지원 (LOG_JSON_FORMAT=true)
    - ✅ 로그 레벨별 색상 구분
    - ✅ 환경 변수 LOG_LEVEL 로 기본 레벨 제어
"""
import logging
import os
import json
from datetime import datetime
from typing import Optional

class ColoredFormatter(logging.Formatter):
    """컬러 로그 포맷터"""

    COLORS = {
        'DEBUG': '\033[36m',      # 청록색
        'INFO': '\033[32m',       # 초록색
        'WARNING': '\033[33m',    # 노란색
        'ERROR': '\033[31m',      # 빨간색
        'CRITICAL': '\033[35m',   # 보라색
        'RESET': '\033[0m'        # 리셋
    }

    def format(self, record):
        # 원본 레코드를 다른 핸들러와 공유하므로 levelname 은 복사본에만 색상 적용
        colored = logging.makeLogRecord(record.__dict__)
        levelname = colored.levelname
        if levelname in self.COLORS:
            colored.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"

        return super().format(colored)

class JSONFormatter(logging.Formatter):
    """JSON 형식 로그 포맷터"""

    def format(self, record):
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        # 예외 정보가 있으면 추가
        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        # 추가 필드가 있으면 추가
        if hasattr(record, 'extra_fields'):
            log_entry.update(record.extra_fields)

        return json.dumps(log_entry, ensure_ascii=False, default=str)

def get_logger(
    name: str = "app",
    level: Optional[str] = None,
    enable_json_format: Optional[bool] = None,
) -> logging.Logger:
    """
    logger 객체 생성 및 포맷 지정

    Args:
        name: 로거 이름
        level: 로그 레벨 (DEBUG, INFO, WARNING, ERROR, CRITICAL), 없으면 LOG_LEVEL 환경 변수
        enable_json_format: JSON 형식 로깅 사용 여부, 없으면 LOG_JSON_FORMAT 환경 변수
    """
    # SQLAlchemy 쿼리 로깅 비활성화 (echo 는 엔진 설정으로 제어)
    logging.getLogger('sqlalchemy.pool').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.dialects').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.orm').setLevel(logging.WARNING)

    logger = logging.getLogger(name)

    # 이미 핸들러가 설정되어 있으면 기존 로거 반환
    if logger.handlers:
        return logger

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if enable_json_format is None:
        enable_json_format = os.getenv("LOG_JSON_FORMAT", "false").lower() == "true"

    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(log_level)

    console_handler = logging.StreamHandler()

    if enable_json_format:
        console_formatter = JSONFormatter()
    else:
        console_formatter = ColoredFormatter(
            '[%(asctime)s] %(levelname)s - %(name)s - %(message)s'
        )

    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    return logger

def log_with_context(logger: logging.Logger, level: str, message: str, **kwargs):
    """
    컨텍스트 정보와 함께 로깅 (JSON 포맷에서 추가 필드로 출력)

    Args:
        logger: 로거 객체
        level: 로그 레벨
        message: 로그 메시지
        **kwargs: 추가 컨텍스트 정보
    """
    log_method = getattr(logger, level.lower(), logger.info)
    log_method(message, extra={'extra_fields': kwargs})
