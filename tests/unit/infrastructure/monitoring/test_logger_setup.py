import io
import logging

import pytest
from rich.console import Console
from rich.logging import RichHandler

from anigraph.infrastructure.monitoring.logger_setup import NOISY_LOGGERS, setup_logging


@pytest.fixture
def restore_root_logger():
    """Drops the handlers setup_logging attached and restores logger levels."""
    root = logging.getLogger()
    levels = {name: logging.getLogger(name).level for name in NOISY_LOGGERS}
    root_level = root.level
    yield root
    for handler in root.handlers[:]:
        if type(handler) in (RichHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(root_level)
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)


@pytest.fixture
def stderr_buffer():
    return Console(file=io.StringIO(), width=200)


def test_setup_logging_replaces_handlers(restore_root_logger, stderr_buffer):
    setup_logging(log_level=logging.INFO, console=stderr_buffer)
    setup_logging(log_level=logging.DEBUG, console=stderr_buffer)

    assert restore_root_logger.level == logging.DEBUG
    assert [type(h) for h in restore_root_logger.handlers] == [RichHandler]


def test_console_records_go_to_rich_console(restore_root_logger, stderr_buffer):
    setup_logging(log_level=logging.INFO, console=stderr_buffer)

    logging.getLogger("anigraph.test").warning("quota exhausted")

    assert "quota exhausted" in stderr_buffer.file.getvalue()


def test_setup_logging_writes_to_file(restore_root_logger, stderr_buffer, tmp_path):
    log_file = tmp_path / "anigraph.log"
    setup_logging(log_level=logging.INFO, log_file=str(log_file), console=stderr_buffer)

    logging.getLogger("anigraph.test").info("dispatch finished")
    for handler in restore_root_logger.handlers:
        handler.flush()

    content = log_file.read_text(encoding="utf-8")
    assert "anigraph.test - INFO - dispatch finished" in content


def test_http_library_loggers_stay_at_warning(restore_root_logger, stderr_buffer):
    setup_logging(log_level=logging.DEBUG, console=stderr_buffer)

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING
