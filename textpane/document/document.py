# document/document.py

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple, Union

from ..config import ConfigProvider
from ..display.sink import DEFAULT_FONT_NAME, DEFAULT_FONT_SIZE
from ..events import ListenerList, Subscription
from ..messages.codes import strip_control_codes
from .properties import EMPTY_PROPERTIES, DisplayProperty, DisplayPropertyMap

DEFAULT_TIMESTAMP_FORMAT = '[%H:%M:%S] '

Timestamp = Union[str, datetime, None]


def split_lines(text: str) -> List[str]:
    """
    Split text into physical lines at line feeds, dropping a carriage return
    before each one.

    Only line feeds end a line; other separators recognised by
    str.splitlines() double as formatting codes (italic is one of them). A
    single trailing line feed does not start an empty line.
    """
    parts = text.split('\n')
    if len(parts) > 1 and parts[-1] == '':
        parts.pop()
    return [part[:-1] if part.endswith('\r') else part for part in parts]


@dataclass
class Line:
    """
    One physical line of the scrollback.

    The text fields never change after the line is created; the font fields
    follow the document's settings.
    """
    timestamp: str
    text: str
    properties: DisplayPropertyMap = field(default_factory=lambda: EMPTY_PROPERTIES)
    font_size: int = DEFAULT_FONT_SIZE
    font_name: str = DEFAULT_FONT_NAME

    @property
    def parts(self) -> Tuple[str, str]:
        return self.timestamp, self.text

    def get_text(self) -> str:
        """Return the line as plain text, timestamp included."""
        return strip_control_codes(self.timestamp + self.text)

    def get_length(self) -> int:
        return len(self.get_text())


class DocumentListener:
    """Base class for document listeners; override the notifications you need."""

    def lines_added(self, start: int, count: int, size: int) -> None:
        pass

    def trimmed(self, new_size: int, trimmed_count: int) -> None:
        pass

    def cleared(self) -> None:
        pass

    def repaint_needed(self) -> None:
        pass


class Document:
    """
    Ordered, optionally bounded scrollback of lines.

    Mutations are serialised by a single lock. Listeners are notified after
    the lock has been released, with the sizes seen while it was held, so a
    listener may read the document but must not expect the size to be
    unchanged by the time it runs.
    """

    def __init__(self, config: Optional[ConfigProvider] = None, logger=None):
        self.config = config or ConfigProvider()
        self.logger = logger or logging.getLogger(__name__)
        self._lines: List[Line] = []
        self._lock = threading.Lock()
        self._listeners = ListenerList()

        self._read_settings()
        self._subscription = self.config.add_change_listener('ui', None, self._config_changed)

    def _read_settings(self) -> None:
        self.font_name = self.config.get_option('ui', 'textPaneFontName', DEFAULT_FONT_NAME)
        self.font_size = self.config.get_option_int('ui', 'textPaneFontSize', DEFAULT_FONT_SIZE)
        self.frame_buffer_size = self.config.get_option_int('ui', 'frameBufferSize', 0) or 0
        self.timestamp_format = self.config.get_option('ui', 'timestamp', DEFAULT_TIMESTAMP_FORMAT)

    def _config_changed(self, domain: str, key: str) -> None:
        if key in ('textPaneFontName', 'textPaneFontSize', 'frameBufferSize', 'timestamp'):
            self.refresh_settings()

    def add_listener(self, listener: DocumentListener) -> Subscription:
        return self._listeners.add(listener)

    def remove_listener(self, listener: DocumentListener) -> None:
        self._listeners.remove(listener)

    def _format_timestamp(self, timestamp: Timestamp) -> str:
        if timestamp is None:
            return ''
        if isinstance(timestamp, datetime):
            return timestamp.strftime(self.timestamp_format)
        return timestamp

    def append(self, timestamp: Timestamp, properties: Optional[DisplayPropertyMap],
               text: str) -> int:
        """
        Add text to the end of the document.

        Args:
            timestamp: Preformatted timestamp, a datetime formatted with
                ``ui.timestamp``, or None for no timestamp
            properties: Display overrides shared by every resulting line
            text: Text to add; each physical line becomes its own Line

        Returns:
            Number of lines added
        """
        properties = properties if properties is not None else EMPTY_PROPERTIES
        if properties.get(DisplayProperty.DO_NOT_DISPLAY):
            return 0

        stamp = self._format_timestamp(timestamp)
        physical = split_lines(text)

        with self._lock:
            for part in physical:
                self._lines.append(Line(stamp, part, properties, self.font_size, self.font_name))
            excess = self._evict(self.frame_buffer_size)
            size = len(self._lines)

        # Lines pushed straight out again by the trim are not reported as added
        kept = min(len(physical), size)
        self.logger.debug(f"Appended {len(physical)} line(s) at {size - kept}")
        self._listeners.fire('lines_added', size - kept, kept, size)
        if excess:
            self._fire_trimmed(size, excess)
        return len(physical)

    def _evict(self, max_lines: int) -> int:
        """Drop the oldest lines beyond ``max_lines``; the caller holds the lock."""
        if self.frame_buffer_size <= 0 or max_lines < 0:
            return 0
        excess = len(self._lines) - max_lines
        if excess <= 0:
            return 0
        del self._lines[:excess]
        return excess

    def _fire_trimmed(self, size: int, excess: int) -> None:
        self.logger.debug(f"Trimmed {excess} line(s), {size} remain")
        self._listeners.fire('trimmed', size, excess)

    def trim(self, max_lines: int) -> int:
        """
        Evict the oldest lines beyond ``max_lines``.

        Only applies when a positive frame buffer size is configured.

        Returns:
            Number of lines evicted
        """
        with self._lock:
            excess = self._evict(max_lines)
            size = len(self._lines)

        if excess:
            self._fire_trimmed(size, excess)
        return excess

    def clear(self) -> None:
        """Remove every line."""
        with self._lock:
            if self._lines:
                self._lines.clear()
        self.logger.debug("Document cleared")
        self._listeners.fire('cleared')

    def refresh_settings(self) -> None:
        """Re-read font, buffer size and timestamp settings and apply them to every line."""
        self._read_settings()
        with self._lock:
            for line in self._lines:
                line.font_name = self.font_name
                line.font_size = self.font_size
        self.trim(self.frame_buffer_size)
        self._listeners.fire('repaint_needed')

    def get_num_lines(self) -> int:
        with self._lock:
            return len(self._lines)

    def __len__(self) -> int:
        return self.get_num_lines()

    def get_line(self, index: int) -> Line:
        """Return the line at ``index``; raises IndexError when out of range."""
        with self._lock:
            if not 0 <= index < len(self._lines):
                raise IndexError(f"Line {index} out of range (0-{len(self._lines) - 1})")
            return self._lines[index]

    def get_line_text(self, index: int) -> str:
        return self.get_line(index).get_text()

    def get_line_length(self, index: int) -> int:
        return self.get_line(index).get_length()

    def get_line_height(self, index: int) -> int:
        return self.get_line(index).font_size

    def snapshot(self) -> Tuple[Line, ...]:
        """Return the current lines as a tuple."""
        with self._lock:
            return tuple(self._lines)

    def close(self) -> None:
        self._subscription.cancel()
