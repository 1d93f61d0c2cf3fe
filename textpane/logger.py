# logger.py

import os, sys, logging
from typing import Optional
from functools import partial

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_LOG_NAME = 'textpane_debug.log'


class Logger:
    """
    Thin wrapper over a standard logger.

    Disabled loggers get a NullHandler. Enabled loggers write to ``log_file``,
    to stdout when it is "-", or to logs/textpane_debug.log beside the package.
    Repeated construction with the same name reuses the existing handler.
    """

    def __init__(self, name: str, logging_enabled: bool = False, log_file: Optional[str] = None):
        self._logger = logging.getLogger(name)
        if logging_enabled:
            self._add_handler(self._make_handler(log_file))
            self._logger.setLevel(logging.DEBUG)
        elif not self._logger.handlers:
            self._logger.addHandler(logging.NullHandler())

        # Dynamically create logging methods
        for level in ['debug', 'info', 'warning', 'error']:
            setattr(self, level, partial(self._log, level))

    @staticmethod
    def _make_handler(log_file: Optional[str]) -> logging.Handler:
        if log_file == "-":
            return logging.StreamHandler(sys.stdout)
        if log_file is None:
            project_root = os.path.dirname(os.path.dirname(__file__))
            os.makedirs(os.path.join(project_root, 'logs'), exist_ok=True)
            log_file = os.path.join(project_root, 'logs', DEFAULT_LOG_NAME)
        return logging.FileHandler(log_file)

    @staticmethod
    def _target(handler: logging.Handler):
        return getattr(handler, 'baseFilename', None) or getattr(handler, 'stream', None)

    def _add_handler(self, handler: logging.Handler) -> None:
        if any(self._target(existing) == self._target(handler) for existing in self._logger.handlers):
            handler.close()
            return
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        self._logger.addHandler(handler)

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(self, level: str, msg: str, exc_info: Optional[bool] = None) -> None:
        getattr(self._logger, level)(msg, exc_info=exc_info)
