"""Process logging: loguru sinks plus stdlib (Flask, werkzeug) interception."""

import logging
import sys

from loguru import logger

log_format = " | ".join(
    (
        "<lk>{time:YYYY-MM-DD HH:mm:ss.SSS}</>",
        "<lvl>{level:<8}</>",
        "<c>{name}:{function}:{line}</>",
        "{message}",
    )
)


class InterceptHandler(logging.Handler):
    """Routes stdlib logging records into loguru."""

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(app):
    level = app.config.get("LOG_LEVEL", "INFO")

    logger.remove()
    logger.add(sys.stderr, format=log_format, level=level)

    log_dir = app.config.get("LOG_DIR")
    if log_dir:
        logger.add(
            f"{log_dir}/bookit_{{time:YYYY-MM-DD}}.log",
            format=log_format,
            level=level,
            rotation="1 day",
            retention="30 days",
            compression="zip",
            enqueue=True,
        )

    handler = InterceptHandler()
    app.logger.handlers = [handler]
    app.logger.propagate = False
    logging.getLogger("werkzeug").handlers = [handler]
    logging.getLogger("werkzeug").propagate = False
