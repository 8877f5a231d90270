#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""Logging for redmineone.

Every request, listing refresh and rejected reply is written to a rotating
``app.log``. API keys, passwords and auth headers are masked before a
record reaches the file.

The log directory defaults to ``logs/`` under the working directory and
can be moved with the ``REDMINEONE_LOG_DIR`` environment variable.
"""
import logging
import os
import re
from logging.handlers import RotatingFileHandler
from typing import Dict, List, Pattern


WORK_PATH = os.path.abspath(os.getcwd())
LOGGER = os.environ.get("REDMINEONE_LOG_DIR") or os.path.join(WORK_PATH, "logs")

LOG_FILE = "app.log"
MAX_BYTES = 1000000
BACKUP_COUNT = 20

LOG_LEVELS: Dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

# First group is kept, second group is masked
SENSITIVE_PATTERNS: List[Pattern] = [
    re.compile(r'(X-Redmine-API-Key["\s:=]+["\']?)([A-Za-z0-9]+)', re.I),
    re.compile(r'([?&]key=)([A-Za-z0-9]+)', re.I),
    re.compile(r'(api[_-]?key["\s:=]+["\']?)([A-Za-z0-9_\-\.]+)', re.I),
    re.compile(r'((?:password|passwd|pwd)["\s:=]+["\']?)([^\s"\',]+)', re.I),
    re.compile(r'(<password>)([^<]+)', re.I),
    re.compile(r'(Basic\s+)([A-Za-z0-9+/=]+)', re.I),
    re.compile(r'(Bearer\s+)([A-Za-z0-9_\-\.]+)', re.I),
]

MASK = "***MASKED***"


def mask_credentials(message: str) -> str:
    """Replace every credential found in ``message`` by the mask.

    :param message: Text about to be logged
    :return: The text with credentials masked

    Example::

        mask_credentials("GET /issues.json?key=0123abcd")
        # "GET /issues.json?key=***MASKED***"
    """
    for pattern in SENSITIVE_PATTERNS:
        message = pattern.sub(rf"\1{MASK}", message)
    return message


class CredentialMaskingFilter(logging.Filter):
    """Mask credentials in the message and string arguments of a record."""

    MASK = MASK

    def filter(self, record: logging.LogRecord) -> bool:
        if record.msg:
            record.msg = mask_credentials(str(record.msg))
        if record.args:
            record.args = tuple(
                mask_credentials(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )
        return True


class SecureFormatter(logging.Formatter):
    """Formatter masking credentials in the final text, tracebacks included."""

    def format(self, record: logging.LogRecord) -> str:
        return mask_credentials(super().format(record))


def _file_handler(directory: str) -> RotatingFileHandler:
    os.makedirs(directory, exist_ok=True)
    file_handler = RotatingFileHandler(
        os.path.join(directory, LOG_FILE),
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
    )
    file_handler.setFormatter(SecureFormatter(
        "%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]"
    ))
    file_handler.addFilter(credential_filter)
    return file_handler


logger = logging.getLogger(__name__)
credential_filter = CredentialMaskingFilter()
logger.addFilter(credential_filter)
logger.addHandler(_file_handler(LOGGER))


def add_log(message: str, level: str) -> None:
    """Write a log entry with credentials masked.

    Unknown level names log at info.

    :param message: The message to log
    :param level: One of debug, info, warning, error

    Example::

        from redmineone import add_log

        add_log("Refreshing project listing", "debug")
        add_log("The server replied with 422", "error")
    """
    level_no = LOG_LEVELS.get(level.lower(), logging.INFO)
    logger.setLevel(level_no)
    logger.log(level_no, message)


def mask_sensitive_string(value: str) -> str:
    """Mask a secret for display, keeping its first and last two characters.

    :param value: The secret
    :return: The masked form, ``***`` for values shorter than four characters

    Example::

        mask_sensitive_string("0123456789abcdef")
        # "01***ef"
    """
    if not value or len(value) < 4:
        return "***"
    return f"{value[:2]}***{value[-2:]}"
