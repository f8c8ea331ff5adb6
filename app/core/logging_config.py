import logging
import sys

from app.core.config import get_settings


def setup_logging(level: str = None) -> logging.Logger:
    logger = logging.getLogger("app")
    if logger.handlers:
        return logger  # already configured
    logger.setLevel((level or get_settings().log_level).upper())
    handler = logging.StreamHandler(sys.stdout)
    fmt = logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    handler.setFormatter(fmt)
    logger.addHandler(handler)
    # keep request logs quiet unless debugging
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    return logger
