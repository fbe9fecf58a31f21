"""Application and account event logging.

Human readable logs go to a rotating skillz.log. Account events (logins,
registrations, password changes) are also written as JSON lines to a separate
rotating file so they can be shipped to a log collector.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional

from accounts.config import (
    EVENT_LOG_FILE_NAME,
    LOG_BACKUP_COUNT,
    LOG_DIR,
    LOG_FILE_NAME,
    LOG_LEVEL,
    LOG_MAX_BYTES,
)

EVENT_LOGGER_NAME = "skillz.events"

# Module-level state
_logging_configured = False

event_logger = logging.getLogger(EVENT_LOGGER_NAME)


def _ensure_log_dir(log_dir: str) -> None:
    if sys.platform != "win32":
        os.makedirs(log_dir, mode=0o700, exist_ok=True)
    else:
        os.makedirs(log_dir, exist_ok=True)


def configure_logging(log_dir: str = LOG_DIR, level: str = LOG_LEVEL) -> None:
    """Configure standard logging with rotation on first use.

    Args:
        log_dir: Directory for skillz.log and the JSONL event log
        level: Root log level name
    """
    global _logging_configured
    if _logging_configured:
        return

    _ensure_log_dir(log_dir)

    handler = RotatingFileHandler(
        os.path.join(log_dir, LOG_FILE_NAME),
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
    )
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))

    logger = logging.getLogger()
    logger.setLevel(level.upper())
    logger.addHandler(handler)

    # Raw JSON lines, kept out of skillz.log
    event_handler = RotatingFileHandler(
        os.path.join(log_dir, EVENT_LOG_FILE_NAME),
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
    )
    event_handler.setFormatter(logging.Formatter("%(message)s"))
    event_logger.setLevel(logging.INFO)
    event_logger.addHandler(event_handler)
    event_logger.propagate = False

    _logging_configured = True


def log_account_event(
    event_type: str,
    status: str,
    username: Optional[str] = None,
    details: Optional[dict] = None,
) -> None:
    """Log an account event as a single JSON object.

    Args:
        event_type: Kind of event (e.g., 'login', 'register', 'password_change')
        status: Event status (e.g., 'SUCCESS', 'FAILURE', 'LOCKOUT')
        username: Account involved, if known
        details: Optional additional event details
    """
    event = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event_type": event_type,
        "status": status,
        "username": username,
        "source": "skillz_cli",
    }

    if details:
        event["details"] = details

    event_logger.info(json.dumps(event))
