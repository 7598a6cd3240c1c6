import logging
import sys
from app.core.config import settings

# Top-level packages whose loggers follow settings.engine_log_level
ENGINE_LOGGERS = ("validation", "orchestration", "repositories")


def configure_logging() -> None:
    """
    Install one stdout handler on the root logger using settings.log_format.

    The root level comes from settings.log_level; the validation engine's own
    packages can be turned up or down separately with settings.engine_log_level.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=settings.log_format, datefmt="%Y-%m-%dT%H:%M:%S%z"))
    root_logger.addHandler(handler)

    for name in ENGINE_LOGGERS:
        logging.getLogger(name).setLevel(settings.engine_log_level)

    # Silence per-request access lines
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
