from contextvars import ContextVar
from datetime import datetime
from enum import StrEnum
import logging
import os
import re
import sys

from loguru import logger as loguru_logger

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR
from src.platform.logging.service_context import get_service_context


# Test runs write next to the test suite
LOG_DIR = os.environ.get('TEST_LOG_DIR', LOG_DIR)

# Values under these keys never reach a log line
SENSITIVE_KEYWORDS = {
    'password',
    'card_source',
    'stripe_customer',
}

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


# Third-party loggers whose DEBUG output is noise
_QUIET_PREFIXES = ('aiosqlite', 'asyncio', 'sqlalchemy.pool')

# granian access line: '127.0.0.1 - "PUT /guest/12 HTTP/1.1" - 200 - 8ms'
_ACCESS_STATUS = re.compile(r'HTTP/[\d.]+" - (\d{3}) ')


def access_line_level(message: str) -> str | None:
    """Log level for a granian access line, by status class; None for other lines."""
    match = _ACCESS_STATUS.search(message)
    if match is None:
        return None
    status_code = int(match.group(1))
    if status_code >= 500:
        return 'CRITICAL'
    if status_code >= 400:
        return 'ERROR'
    if status_code >= 300:
        return 'WARNING'
    return 'SUCCESS'


loguru_logger.remove()
custom_logger = loguru_logger.bind(
    **{
        ExtraField.SERVICE_CONTEXT: get_service_context(),
        ExtraField.CHAIN_START_TIME: '',
        ExtraField.CALL_TARGET: '',
    }
)


class InterceptHandler(logging.Handler):
    """Routes stdlib logging (granian, SQLAlchemy, aiosqlite) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno <= logging.DEBUG and record.name.startswith(_QUIET_PREFIXES):
            return

        message = record.getMessage()
        level: str | int | None = access_line_level(message)
        if level is None:
            try:
                level = loguru_logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

        # Point loguru at the frame that called logging, not at this handler
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        custom_logger.opt(depth=depth, exception=record.exc_info).log(level, message)


io_log_format = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)


def _configure_sinks() -> None:
    level = 'DEBUG' if settings.DEBUG else 'INFO'
    custom_logger.add(sys.stdout, format=io_log_format, level=level, enqueue=True)

    # Production ships stdout only
    if not settings.DEBUG:
        return
    prefix = 'test_' if os.environ.get('TEST_LOG_DIR') else ''
    custom_logger.add(
        f'{LOG_DIR}/{prefix}{datetime.now():%Y-%m-%d_%H}.log',
        format=io_log_format,
        level=level,
        rotation='1 hour',
        retention='7 days',
        compression='gz',
        enqueue=True,
    )


_configure_sinks()
logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
