import os
import getpass
import logging
from logging.handlers import TimedRotatingFileHandler

import config

logger = logging.getLogger("quiz")


def current_user():
    try:
        return getpass.getuser()
    except Exception:
        return "unknown_user"


class _ActionDefaults(logging.Filter):
    """Fill user/action/detail for records not written through log_action()."""

    def filter(self, record):
        if not hasattr(record, "user"):
            record.user = current_user()
        if not hasattr(record, "action"):
            record.action = record.levelname
        if not hasattr(record, "detail"):
            record.detail = record.getMessage()
        return True


def setup_logging(log_dir=None):
    """Attach the daily rotating action log. Safe to call more than once."""
    log_dir = log_dir or config.LOG_DIR
    logger.setLevel(logging.DEBUG if config.DEBUG else logging.INFO)
    if not logger.handlers:
        os.makedirs(log_dir, exist_ok=True)
        handler = TimedRotatingFileHandler(
            os.path.join(log_dir, "quiz.log"), when="midnight", backupCount=14, encoding="utf-8"
        )
        handler.addFilter(_ActionDefaults())
        handler.setFormatter(logging.Formatter("%(asctime)s | %(user)s | %(action)s | %(detail)s"))
        logger.addHandler(handler)
    return logger


def log_action(action: str, detail: str = "", user: str = None):
    """Log with structured info; user defaults to the OS login."""
    logger.info("%s %s", action, detail, extra={"user": user or current_user(), "action": action, "detail": detail})
