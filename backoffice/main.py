from typing import Optional

from sqlalchemy.engine import Engine

from backoffice.core.logging_config import logger, setup_logging
from backoffice.db import engine, init_db


def startup(bind: Optional[Engine] = None) -> None:
    """Call once at process start, before the first OrderService is built."""
    setup_logging()
    init_db(bind or engine)
    logger.info("startup", service="backoffice")
