# document/cache.py

from collections import deque
from typing import Any, Callable, Deque, Optional, Tuple

from ..config import ConfigProvider
from ..display.sink import StyleSink
from ..messages.colours import COLOUR_DOMAIN
from ..messages.styliser import Styliser
from .document import Document, DocumentListener, Line
from .properties import DisplayProperty

DEFAULT_CAPACITY = 50


class RenderCache(DocumentListener):
    """
    Fixed-size cache of styled lines.

    Entries are kept newest first and looked up by line equality. The cache
    empties itself when the document is cleared or needs a repaint, and when
    display or colour settings change.
    """

    def __init__(self, document: Document, styliser: Styliser,
                 sink_factory: Callable[[], StyleSink], capacity: int = DEFAULT_CAPACITY,
                 config: Optional[ConfigProvider] = None):
        if capacity <= 0:
            raise ValueError(f"Cache capacity must be positive, got {capacity}")
        self.document = document
        self.styliser = styliser
        self.sink_factory = sink_factory
        self.capacity = capacity
        self._entries: Deque[Tuple[Line, Any]] = deque(maxlen=capacity)

        self._subscriptions = [document.add_listener(self)]
        if config is not None:
            for domain in ('ui', COLOUR_DOMAIN):
                self._subscriptions.append(
                    config.add_change_listener(domain, None, lambda d, k: self.invalidate()))

    def __len__(self) -> int:
        return len(self._entries)

    def rendered_line(self, index: int) -> Any:
        """Return the styled form of line ``index``, rendering it on a miss."""
        line = self.document.get_line(index)
        for cached, rendered in self._entries:
            if cached == line:
                return rendered

        rendered = self.render(line)
        self._entries.appendleft((line, rendered))
        return rendered

    def render(self, line: Line) -> Any:
        """Style a line onto a fresh sink without touching the cache."""
        sink = self.sink_factory()
        sink.set_default_font(line.font_name, line.font_size)
        foreground = line.properties.get(DisplayProperty.FOREGROUND_COLOUR)
        if foreground is not None:
            sink.set_default_foreground(foreground)
        background = line.properties.get(DisplayProperty.BACKGROUND_COLOUR)
        if background is not None:
            sink.set_default_background(background)
        self.styliser.style(sink, *line.parts)
        return sink.get_styled_message()

    def invalidate(self) -> None:
        self._entries.clear()

    def cleared(self) -> None:
        self.invalidate()

    def repaint_needed(self) -> None:
        self.invalidate()

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions = []
