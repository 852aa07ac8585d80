import logging
import os
import sys

from pythonjsonlogger import jsonlogger

_QUIET_LOGGERS = ["botocore", "boto3", "s3transfer", "urllib3", "httpx", "httpcore"]


def setup_logging(level: int | str | None = None):
    """
    Configures structured JSON logging for the CLI.

    Logs go to stderr so that stdout stays free for the summary itself. The
    JSON formatter includes timestamp, level, logger name, message, trace_id
    and span_id (populated when ddtrace log injection is active). Client
    library loggers are pinned to WARNING so that a verbose run shows the
    pipeline's own events rather than every HTTP request.

    Args:
        level: Log level name or number. Falls back to the LOG_LEVEL
            environment variable, then WARNING.

    Returns:
        logging.Logger: The configured root logger instance.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "WARNING")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s"
    )
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []
    root_logger.addHandler(stream_handler)

    for logger_name in _QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(max(level, logging.WARNING))

    return root_logger
