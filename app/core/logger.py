import logging
import sys

from app.core.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
HANDLER_NAME = "storefront"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Attach a single stream handler to the root logger (idempotent)."""
    root = logging.getLogger()
    root.setLevel(level)

    if any(h.get_name() == HANDLER_NAME for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.set_name(HANDLER_NAME)
    root.addHandler(handler)

    # sqlalchemy echo is controlled by SQL_ECHO, keep its logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
