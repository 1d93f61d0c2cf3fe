# interface.py

from typing import Callable, Iterator, Optional, Union

from rich.console import Console
from rich.text import Text

from .config import ConfigProvider
from .display.rich_sink import RichStyleSink
from .display.sink import StyleSink
from .document.cache import RenderCache
from .document.document import Document, Timestamp
from .document.properties import DisplayPropertyMap
from .document.searcher import DocumentSearcher, LinePosition
from .logger import Logger
from .messages.codes import strip_control_codes
from .messages.colours import ColourResolver
from .messages.styliser import Styliser


class TextPane:
    """
    Main entry point that assembles the configuration, styliser, document and render cache.
    """

    def __init__(self, config: Optional[Union[ConfigProvider, str]] = None,
                 channel_prefixes: Optional[str] = None,
                 logging_enabled: bool = False,
                 log_file: Optional[str] = None,
                 sink_factory: Callable[[], StyleSink] = RichStyleSink):
        """
        Initialize components with optional configuration and logging.

        Args:
            config: A ConfigProvider, a path to a JSON config file, or None for defaults.
            channel_prefixes: Channel prefix characters (e.g. "#&") used to link channel names.
            logging_enabled: Enable detailed logging.
            log_file: Path to log file. Use "-" for stdout.
            sink_factory: Creates the sink each line is rendered onto.
        """
        self._init_components(config, channel_prefixes, logging_enabled, log_file, sink_factory)
        self._searcher: Optional[DocumentSearcher] = None

    def _init_components(self, config, channel_prefixes: Optional[str],
                         logging_enabled: bool, log_file: Optional[str],
                         sink_factory: Callable[[], StyleSink]) -> None:
        try:
            self.logger = Logger('textpane', logging_enabled, log_file)

            if isinstance(config, str):
                config = ConfigProvider.from_file(config)
            self.config = config or ConfigProvider()

            self.colours = ColourResolver(self.config, logger=self.logger)
            self.styliser = Styliser(self.config, self.colours, channel_prefixes, logger=self.logger)
            self.document = Document(self.config, logger=self.logger)
            self.cache = RenderCache(self.document, self.styliser, sink_factory, config=self.config)

            self.logger.debug(f"Initialized with channel prefixes: {channel_prefixes!r}")
        except Exception as e:
            if hasattr(self, 'logger'):
                self.logger.error(f"Init error: {e}")
            raise

    def add_text(self, text: str, timestamp: Timestamp = None,
                 properties: Optional[DisplayPropertyMap] = None) -> int:
        """Append formatted text; returns the number of lines added."""
        return self.document.append(timestamp, properties, text)

    def render(self, index: int):
        """Return the styled form of line ``index``."""
        return self.cache.rendered_line(index)

    def lines(self) -> Iterator:
        for index in range(self.document.get_num_lines()):
            yield self.render(index)

    def search(self, phrase: str, up: bool = False,
               case_sensitive: bool = False) -> Optional[LinePosition]:
        """
        Find the next occurrence of ``phrase``.

        Repeating a search for the same phrase continues from the previous
        match; changing the phrase or case sensitivity starts from the end.
        """
        searcher = self._searcher
        if (searcher is None or searcher.phrase != phrase
                or searcher.case_sensitive != case_sensitive):
            if searcher is not None:
                searcher.close()
            searcher = self._searcher = DocumentSearcher(phrase, self.document, case_sensitive)
        return searcher.search_up() if up else searcher.search_down()

    @staticmethod
    def strip(text: str) -> str:
        """Remove all formatting from ``text``."""
        return strip_control_codes(text)

    def print_to(self, console: Optional[Console] = None) -> None:
        """Print the scrollback to a Rich console."""
        console = console or Console()
        for rendered in self.lines():
            if isinstance(rendered, Text):
                console.print(rendered)
            else:
                console.print(str(rendered), markup=False, highlight=False)

    def close(self) -> None:
        if self._searcher is not None:
            self._searcher.close()
        self.cache.close()
        self.document.close()
        self.styliser.close()
        self.colours.close()
