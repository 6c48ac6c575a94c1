# File: tests/test_logger.py
import logging

import click

from docs_walker.logger import ColorFormatter, configure


def _record(level: int, msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("DocsWalker", level, __file__, 1, msg, None, None)


def test_errors_are_red():
    line = ColorFormatter("%(levelname)s %(message)s").format(_record(logging.ERROR, "boom"))
    assert line == click.style("ERROR boom", fg="red")


def test_info_is_plain():
    line = ColorFormatter("%(message)s").format(_record(logging.INFO))
    assert line == "hello"


def test_configure_with_file(tmp_path):
    log_file = tmp_path / "walk.log"
    lg = configure(level="DEBUG", log_file=log_file, color=False)
    try:
        assert lg.level == logging.DEBUG
        assert len(lg.handlers) == 2
        assert lg.propagate is False
        lg.warning("Failed %s", "https://example.com/x")
        for handler in lg.handlers:
            handler.flush()
        assert "Failed https://example.com/x" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in lg.handlers:
            handler.close()
        configure(level="INFO", color=False)
