"""Logging configuration for the shardcache command line.

The store modules only create module-level loggers; the CLI composition root
calls `setup_logging` once per invocation with the level, format and file
taken from the `logging.*` configuration keys. Library users who never call
it keep Python's default handling.
"""

import logging
import sys
from typing import Optional, Union

# Quiet by default: cache hits and misses are logged at DEBUG, self-healing at INFO
DEFAULT_LOG_LEVEL = logging.WARNING
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def resolve_level(level: Union[int, str, None], fallback: int = DEFAULT_LOG_LEVEL) -> int:
    """Turns a configured level such as 'debug' or 10 into a logging level.

    Unknown names fall back to `fallback` instead of failing the command.
    """
    if isinstance(level, int):
        return level
    if level is None:
        return fallback
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else fallback


def setup_logging(
    log_level: int = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = None
) -> None:
    """Routes shardcache log records to stderr and, optionally, a log file.

    Records go to stderr so that `shardcache get` output on stdout can be piped
    without log lines mixed in. Handlers from an earlier call are replaced.

    Args:
        log_level: Minimum level, `logging.DEBUG` under `--verbose`.
        log_format: Format string from `logging.format`.
        log_file: Path from `logging.file`; an unusable path is reported and
            skipped so the cache command still runs.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
        except OSError as e:
            logging.error(f"Cannot write shardcache log file {log_file}: {e}")
        else:
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            logging.info(f"Writing shardcache log to: {log_file}")

    logging.debug(f"shardcache logging configured. Level={logging.getLevelName(log_level)}")
