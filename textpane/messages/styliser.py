# messages/styliser.py

import logging
import threading
from dataclasses import dataclass
from typing import List, Optional, Pattern

from ..config import ConfigProvider
from ..display.sink import StyleSink
from .autolink import MarkedUpText, do_links, do_smilies, smilie_regexp
from .codes import AUTOLINK_SPANS, Code, ControlCode, Literal, Span, Token, tokenize
from .colours import COLOUR_DOMAIN, WHITE, ColourResolver

SMILIE_PREFIX = 'smilie-'


@dataclass
class StyliserState:
    """Lexer state for a single input string."""
    negated: bool = False
    in_link: bool = False
    in_channel: bool = False
    in_nickname: bool = False
    in_smilie: bool = False
    in_tooltip: bool = False


class Styliser:
    """
    Applies IRC control codes to a style sink.

    Text is lexed into tokens, URLs, channel names and smilies are marked
    up as spans, and the tokens are replayed against the sink.
    """

    def __init__(self, config: ConfigProvider, colours: ColourResolver,
                 channel_prefixes: Optional[str] = None, logger=None):
        """
        Initialize with configuration and colour dependencies.

        Args:
            config: Source of the ``ui`` link options and ``icon`` smilies
            colours: Resolver for palette and hex colours
            channel_prefixes: Channel prefix characters of the connection,
                or None to disable channel links
            logger: Optional logger
        """
        self.config = config
        self.colours = colours
        self.channel_prefixes = channel_prefixes
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._smilies: Optional[Pattern] = None
        self._smilies_loaded = False

        self._read_settings()
        self._subscriptions = [
            config.add_change_listener('ui', key, self.config_changed)
            for key in ('stylelinks', 'stylechannels', 'linkcolour', 'channelcolour')
        ]
        self._subscriptions.append(config.add_change_listener('icon', None, self.config_changed))
        # Link colours given as palette indices follow palette overrides
        self._subscriptions.append(config.add_change_listener(COLOUR_DOMAIN, None, self.config_changed))

    def _read_settings(self) -> None:
        self.style_links = self.config.get_option_bool('ui', 'stylelinks')
        self.style_channels = self.config.get_option_bool('ui', 'stylechannels')
        self.link_colour = self.colours.from_spec(self.config.get_option('ui', 'linkcolour'), None)
        self.channel_colour = self.colours.from_spec(self.config.get_option('ui', 'channelcolour'), None)

    def config_changed(self, domain: str, key: str) -> None:
        if domain == 'icon':
            with self._lock:
                self._smilies_loaded = False
            return
        self._read_settings()

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions = []

    def _smilie_pattern(self) -> Optional[Pattern]:
        with self._lock:
            if not self._smilies_loaded:
                tokens = [key[len(SMILIE_PREFIX):] for key in self.config.get_options('icon')
                          if key.startswith(SMILIE_PREFIX)]
                self._smilies = smilie_regexp(tokens)
                self.logger.debug(f"Loaded {len(tokens)} smilie(s)")
                self._smilies_loaded = True
            return self._smilies

    def mark_up(self, text: str) -> List[Token]:
        """
        Tokenise ``text`` and add hyperlink, channel and smilie spans.

        Hyperlink, channel and smilie markers already present in the input
        are dropped; only the passes may produce those spans.
        """
        text = text.replace('\ufffd', '?')
        tokens = [t for t in tokenize(text)
                  if not (isinstance(t, Span) and t.kind in AUTOLINK_SPANS)]
        markup = MarkedUpText(tokens)
        do_links(markup, self.channel_prefixes)
        do_smilies(markup, self._smilie_pattern())
        return markup.to_tokens()

    def style(self, sink: StyleSink, *strings: str) -> None:
        """Style each string in turn onto the sink."""
        for string in strings:
            tokens = self.mark_up(string or '')
            sink.reset_all_styles()
            state = StyliserState()
            for token in tokens:
                if isinstance(token, Literal):
                    sink.append_string(token.text)
                elif isinstance(token, Span):
                    self._apply_span(token, state, sink)
                else:
                    self._apply_code(token, state, sink)

    def _apply_code(self, code: Code, state: StyliserState, sink: StyleSink) -> None:
        kind = code.kind

        if kind is ControlCode.NEGATE:
            state.negated = not state.negated
            return
        if state.negated:
            return

        if kind is ControlCode.BOLD:
            sink.toggle_bold()
        elif kind is ControlCode.UNDERLINE:
            sink.toggle_underline()
        elif kind is ControlCode.ITALIC:
            sink.toggle_italic()
        elif kind is ControlCode.FIXED:
            sink.toggle_fixed_width()
        elif kind is ControlCode.STOP:
            sink.reset_all_styles()
        elif kind in (ControlCode.COLOUR, ControlCode.COLOUR_HEX):
            if code.foreground is None:
                sink.reset_colours()
                return
            sink.set_foreground(self.colours.from_spec(str(code.foreground), WHITE))
            if code.background is not None:
                sink.set_background(self.colours.from_spec(str(code.background), WHITE))

    def _apply_span(self, span: Span, state: StyliserState, sink: StyleSink) -> None:
        kind = span.kind

        if kind is ControlCode.HYPERLINK:
            if not state.negated and self.style_links:
                sink.toggle_hyperlink_style(self.link_colour)
            if span.opening:
                sink.start_hyperlink(span.payload)
            else:
                sink.end_hyperlink()
            state.in_link = span.opening
        elif kind is ControlCode.CHANNEL:
            if not state.negated and self.style_channels:
                sink.toggle_channel_link_style(self.channel_colour)
            if span.opening:
                sink.start_channel_link(span.payload)
            else:
                sink.end_channel_link()
            state.in_channel = span.opening
        elif kind is ControlCode.NICKNAME:
            if span.opening:
                sink.start_nickname_link(span.payload)
            else:
                sink.end_nickname_link()
            state.in_nickname = span.opening
        elif kind is ControlCode.SMILIE:
            if span.opening:
                sink.start_smilie(SMILIE_PREFIX + span.payload)
            else:
                sink.end_smilie()
            state.in_smilie = span.opening
        elif kind is ControlCode.TOOLTIP:
            if span.opening:
                sink.start_tooltip(span.payload)
            else:
                sink.end_tooltip()
            state.in_tooltip = span.opening
