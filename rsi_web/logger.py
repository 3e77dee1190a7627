import logging
import sys
from logging import Formatter, Logger, StreamHandler

from .settings import settings


logging_formatter = Formatter("[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s")

_handler = StreamHandler(sys.stdout)
_handler.setFormatter(logging_formatter)


def get_logger(name: str) -> Logger:
    logger: Logger = logging.getLogger(name)
    logger.setLevel(settings.log_level)
    if _handler not in logger.handlers:
        logger.addHandler(_handler)
    return logger


def setup_sentry() -> None:
    if not settings.sentry_dsn:
        return

    import sentry_sdk
    from sentry_sdk.integrations.logging import LoggingIntegration

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.sentry_environment,
        integrations=[LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)],
    )
