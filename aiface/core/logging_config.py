"""
Logging configuration for AiFace API.

One root configuration for the whole process: console output always, a
rotating file when LOG_DIR is set. Payloads from Google or OpenAI go
through sanitize_log_data before they are logged.
"""
import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Optional

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_NAME = "aiface.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Chatty at INFO: request lines, SDK retries, HTTP client internals
QUIET_LOGGERS = ("uvicorn.access", "openai", "httpx", "httpcore", "urllib3")

REDACTED = "***REDACTED***"
SENSITIVE_KEYS = (
    "password", "token", "secret", "key", "authorization",
    "code", "database_url",
)


def setup_logging(log_level: str = "INFO", log_dir: Optional[str] = "logs") -> logging.Logger:
    """
    Configure the root logger.

    Args:
        log_level: Logging level name; unknown names fall back to INFO
        log_dir: Directory for the rotating log file, or None/"" for console only

    Returns:
        The configured root logger
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(console_handler)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path / LOG_FILE_NAME,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root


def sanitize_log_data(data: Any) -> Any:
    """
    Return a copy of data with secret-looking values redacted.

    Keys are matched case-insensitively against SENSITIVE_KEYS, so
    "access_token", "id_token" and "client_secret" are all hidden.
    Nested dicts and lists are walked; other values are returned as is.
    """
    if isinstance(data, dict):
        return {
            key: REDACTED if _is_sensitive(key) else sanitize_log_data(value)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [sanitize_log_data(item) for item in data]
    return data


def _is_sensitive(key: Any) -> bool:
    name = str(key).lower()
    return any(sensitive in name for sensitive in SENSITIVE_KEYS)
