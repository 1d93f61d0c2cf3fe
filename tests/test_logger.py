# test_logger.py

import logging

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from textpane.logger import Logger


class TestLogger:
    """Handler setup of the logging wrapper."""

    def test_disabled_logger_is_silent(self):
        logger = Logger('textpane.test.disabled')
        assert logger.name == 'textpane.test.disabled'
        handlers = logging.getLogger('textpane.test.disabled').handlers
        assert [type(h) for h in handlers] == [logging.NullHandler]
        logger.debug("nothing to see")

    def test_log_file(self, tmp_path):
        path = tmp_path / "pane.log"
        logger = Logger('textpane.test.file', logging_enabled=True, log_file=str(path))
        logger.warning("colour trouble")
        for handler in logging.getLogger('textpane.test.file').handlers:
            handler.flush()
        content = path.read_text()
        assert "WARNING" in content
        assert "colour trouble" in content

    def test_handlers_are_not_duplicated(self):
        Logger('textpane.test.stdout', logging_enabled=True, log_file="-")
        Logger('textpane.test.stdout', logging_enabled=True, log_file="-")
        handlers = logging.getLogger('textpane.test.stdout').handlers
        assert len(handlers) == 1
