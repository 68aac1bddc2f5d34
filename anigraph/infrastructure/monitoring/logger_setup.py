"""Centralized logging configuration for anigraph programs.

The library only creates module loggers; handlers are attached here, by
whatever program embeds it (the demonstration CLI calls setup_logging).
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_LOG_LEVEL = logging.WARNING
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# httpx logs every request at INFO; the dispatcher already reports each attempt
NOISY_LOGGERS = ("httpx", "httpcore")

def setup_logging(
    log_level: int = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = None,
    console: Optional[Console] = None,
) -> None:
    """Configures the root logger for a catalog session.

    Console records go through rich on stderr so they never interleave with
    rendered tables on stdout. The file handler, when requested, uses the
    plain `log_format`.

    Args:
        log_level: Minimum level for anigraph records (e.g. logging.INFO with --verbose).
        log_format: Format string for the file handler.
        log_file: Optional path to append log records to.
        console: Console for the rich handler; a stderr console is created if None.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
        except OSError as e:
            logging.getLogger(__name__).error(f"Cannot log to {log_file}: {e}")
        else:
            file_handler.setLevel(log_level)
            file_handler.setFormatter(logging.Formatter(log_format))
            root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    logging.getLogger(__name__).debug(
        f"Logging configured. Level={logging.getLevelName(log_level)}, file={log_file or '-'}"
    )
