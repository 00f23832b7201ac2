import logging
import sys

from core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

def setup_logger(name: str = "expense_tracker") -> logging.Logger:
    """Create the application logger with a single stdout handler."""
    log = logging.getLogger(name)
    log.setLevel(getattr(logging, settings.LOG_LEVEL, logging.INFO))

    # Avoid stacking handlers when the module is reloaded (uvicorn --reload)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)

    return log

logger = setup_logger()
