"""
Logging module for ghc.

Provides a simple interface to configure and retrieve loggers using Python's
built-in logging module. Every handler installed by setup_logging() carries a
TokenMaskingFilter so GitHub tokens never reach log output.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler

# Prefixes of GitHub token formats: classic PAT, OAuth, user-to-server,
# server-to-server, refresh, and fine-grained PAT
TOKEN_RE = re.compile(r"\b(?:(gh[pousr]_)[A-Za-z0-9]{8,}|(github_pat_)[A-Za-z0-9_]{8,})")

def _redact_token(match: re.Match) -> str:
    """Replace a matched token with its type prefix followed by asterisks."""
    prefix = match.group(1) or match.group(2)
    return prefix + "*" * (len(match.group(0)) - len(prefix))


LOG_FORMAT = "[%(asctime)s] %(levelname)s %(threadName)s %(name)s: %(message)s"


# ANSI color codes
class Colors:
    RESET = "\033[0m"
    RED = "\033[31m"
    YELLOW = "\033[33m"
    GRAY = "\033[90m"


class DateRotatingFileHandler(RotatingFileHandler):
    """RotatingFileHandler that adds date (yyyy-mm-dd) to backup filenames."""

    def rotation_filename(self, default_name: str) -> str:
        """Generate backup filename with date."""
        # default_name is like "ghc.log.1"; we want "ghc.2024-01-15.log.1"
        base = self.baseFilename
        dirname = os.path.dirname(base)
        basename = os.path.basename(base)
        suffix = default_name[len(base) :]
        date_str = datetime.now().strftime("%Y-%m-%d")

        if "." in basename:
            name_part, ext = basename.rsplit(".", 1)
            new_name = f"{name_part}.{date_str}.{ext}{suffix}"
        else:
            new_name = f"{basename}.{date_str}{suffix}"

        return os.path.join(dirname, new_name)


class ColoredFormatter(logging.Formatter):
    """Formatter that colors WARNING and above, and dims DEBUG."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)

        if record.levelno >= logging.ERROR:
            return f"{Colors.RED}{message}{Colors.RESET}"
        elif record.levelno >= logging.WARNING:
            return f"{Colors.YELLOW}{message}{Colors.RESET}"
        elif record.levelno <= logging.DEBUG:
            return f"{Colors.GRAY}{message}{Colors.RESET}"

        return message


class TokenMaskingFilter(logging.Filter):
    """Filter that masks GitHub tokens, and optionally a GHES hostname, in log records.

    Everything after the token type prefix is masked, so only the type stays
    visible ("ghp_******", "github_pat_******"). When a GHES hostname is given
    it is replaced with <GHES>.
    """

    def __init__(self, ghes_host: str | None = None) -> None:
        """Initialize TokenMaskingFilter.

        Args:
            ghes_host: GitHub Enterprise Server hostname to mask (e.g., "github.corp.com").
                       If None or "github.com", hostnames are left alone.
        """
        super().__init__()
        self.ghes_host = ghes_host if ghes_host != "github.com" else None

    def filter(self, record: logging.LogRecord) -> bool:
        """Apply masking to the log record in place.

        Returns:
            True to allow all records through.
        """
        if record.msg:
            record.msg = self._mask_value(str(record.msg))

        if record.args:
            if isinstance(record.args, dict):
                record.args = {
                    k: self._mask_value(v) if isinstance(v, str) else v
                    for k, v in record.args.items()
                }
            elif isinstance(record.args, tuple):
                record.args = tuple(
                    self._mask_value(arg) if isinstance(arg, str) else arg for arg in record.args
                )

        return True

    def _mask_value(self, value: str) -> str:
        value = TOKEN_RE.sub(_redact_token, value)
        if self.ghes_host:
            value = value.replace(self.ghes_host, "<GHES>")
        return value


def setup_logging(
    log_file: str | None = None,
    log_size: int = 10 * 1024 * 1024,
    log_backups: int = 5,
    ghes_host: str | None = None,
) -> None:
    """
    Configure the root logger with a standard format and level.

    The log level can be configured via the LOG_LEVEL environment variable.
    Default level is INFO.

    Args:
        log_file: Optional path to a log file, rotated by size.
        log_size: Max size in bytes before rotation. Default: 10MB
        log_backups: Number of backup files to keep. Default: 5
        ghes_host: GitHub Enterprise Server hostname to mask in log output.

    Output: stdout for INFO/DEBUG, stderr for WARNING+, plus the file if given.
    """
    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    masking_filter = TokenMaskingFilter(ghes_host)
    formatter = ColoredFormatter(LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(lambda record: record.levelno < logging.WARNING)
    stdout_handler.addFilter(masking_filter)
    stdout_handler.setFormatter(formatter)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.addFilter(masking_filter)
    stderr_handler.setFormatter(formatter)

    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(stderr_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = DateRotatingFileHandler(
            log_file,
            maxBytes=log_size,
            backupCount=log_backups,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.addFilter(masking_filter)
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger with the specified name.

    Args:
        name: The name for the logger, typically __name__ of the calling module

    Returns:
        A configured Logger instance
    """
    return logging.getLogger(name)


def is_debug_mode() -> bool:
    """Check if logging is set to DEBUG level."""
    return logging.getLogger().level <= logging.DEBUG


def log_message(logger: logging.Logger, label: str, content: str) -> None:
    """Log message content - full in debug mode, truncated otherwise.

    Args:
        logger: The logger instance to use
        label: A descriptive label for the log entry
        content: The content to log (will be truncated if not in debug mode)
    """
    if is_debug_mode():
        logger.debug(f"{label}:\n{content}")
    else:
        logger.debug(f"{label}: {content[:100]}...")
