# display/sink.py

from dataclasses import dataclass, replace
from typing import Any, List, Optional, Protocol, Tuple

from rich.color_triplet import ColorTriplet

DEFAULT_FONT_NAME = 'Monospaced'
DEFAULT_FONT_SIZE = 12


class StyleSink(Protocol):
    """Output builder driven by the styliser; one implementation per backend."""
    def append_string(self, text: str) -> None: ...
    def reset_all_styles(self) -> None: ...
    def reset_colours(self) -> None: ...
    def toggle_bold(self) -> None: ...
    def toggle_underline(self) -> None: ...
    def toggle_italic(self) -> None: ...
    def toggle_fixed_width(self) -> None: ...
    def set_foreground(self, colour: ColorTriplet) -> None: ...
    def set_background(self, colour: ColorTriplet) -> None: ...
    def set_default_foreground(self, colour: ColorTriplet) -> None: ...
    def set_default_background(self, colour: ColorTriplet) -> None: ...
    def start_hyperlink(self, url: str) -> None: ...
    def end_hyperlink(self) -> None: ...
    def start_channel_link(self, channel: str) -> None: ...
    def end_channel_link(self) -> None: ...
    def toggle_hyperlink_style(self, colour: Optional[ColorTriplet]) -> None: ...
    def toggle_channel_link_style(self, colour: Optional[ColorTriplet]) -> None: ...
    def start_nickname_link(self, nickname: str) -> None: ...
    def end_nickname_link(self) -> None: ...
    def start_smilie(self, name: str) -> None: ...
    def end_smilie(self) -> None: ...
    def start_tooltip(self, tooltip: str) -> None: ...
    def end_tooltip(self) -> None: ...
    def set_default_font(self, name: str, size: int) -> None: ...
    def get_maximum_font_size(self) -> int: ...
    def clear(self) -> None: ...
    def get_styled_message(self) -> Any: ...


@dataclass(frozen=True)
class TextStyle:
    """Attributes in effect for a run of text."""
    bold: bool = False
    underline: bool = False
    italic: bool = False
    fixed: bool = False
    foreground: Optional[ColorTriplet] = None
    background: Optional[ColorTriplet] = None
    hyperlink: Optional[str] = None
    channel: Optional[str] = None
    nickname: Optional[str] = None
    smilie: Optional[str] = None
    tooltip: Optional[str] = None


class StyledRunSink:
    """
    Base sink that records text as (text, TextStyle) runs.

    Formatting resets leave span context (links, nicknames, smilies and
    tooltips) alone; those only end through their own end calls.
    Backends subclass this and turn ``runs`` into their own output type.
    """

    def __init__(self):
        self._reset()

    def _reset(self) -> None:
        self.runs: List[Tuple[str, TextStyle]] = []
        self.style = TextStyle()
        self.default_foreground: Optional[ColorTriplet] = None
        self.default_background: Optional[ColorTriplet] = None
        self.font_name = DEFAULT_FONT_NAME
        self.font_size = DEFAULT_FONT_SIZE
        # Foreground saved while a link style is applied, keyed by link kind
        self._link_styles = {}

    def current_style(self) -> TextStyle:
        """Return the active style with the default colours filled in."""
        return replace(
            self.style,
            foreground=self.style.foreground or self.default_foreground,
            background=self.style.background or self.default_background,
        )

    def append_string(self, text: str) -> None:
        if text:
            self.runs.append((text, self.current_style()))

    def reset_all_styles(self) -> None:
        self.style = TextStyle(
            hyperlink=self.style.hyperlink,
            channel=self.style.channel,
            nickname=self.style.nickname,
            smilie=self.style.smilie,
            tooltip=self.style.tooltip,
        )
        self._link_styles.clear()

    def reset_colours(self) -> None:
        self.style = replace(self.style, foreground=None, background=None)

    def toggle_bold(self) -> None:
        self.style = replace(self.style, bold=not self.style.bold)

    def toggle_underline(self) -> None:
        self.style = replace(self.style, underline=not self.style.underline)

    def toggle_italic(self) -> None:
        self.style = replace(self.style, italic=not self.style.italic)

    def toggle_fixed_width(self) -> None:
        self.style = replace(self.style, fixed=not self.style.fixed)

    def set_foreground(self, colour: ColorTriplet) -> None:
        self.style = replace(self.style, foreground=colour)

    def set_background(self, colour: ColorTriplet) -> None:
        self.style = replace(self.style, background=colour)

    def set_default_foreground(self, colour: ColorTriplet) -> None:
        self.default_foreground = colour

    def set_default_background(self, colour: ColorTriplet) -> None:
        self.default_background = colour

    def start_hyperlink(self, url: str) -> None:
        self.style = replace(self.style, hyperlink=url)

    def end_hyperlink(self) -> None:
        self.style = replace(self.style, hyperlink=None)

    def start_channel_link(self, channel: str) -> None:
        self.style = replace(self.style, channel=channel)

    def end_channel_link(self) -> None:
        self.style = replace(self.style, channel=None)

    def toggle_hyperlink_style(self, colour: Optional[ColorTriplet]) -> None:
        self._toggle_link_style('hyperlink', colour)

    def toggle_channel_link_style(self, colour: Optional[ColorTriplet]) -> None:
        self._toggle_link_style('channel', colour)

    def _toggle_link_style(self, kind: str, colour: Optional[ColorTriplet]) -> None:
        """Underline and recolour on the first call, restore on the second."""
        if kind in self._link_styles:
            saved = self._link_styles.pop(kind)
            self.style = replace(self.style, foreground=saved, underline=not self.style.underline)
        else:
            self._link_styles[kind] = self.style.foreground
            self.style = replace(
                self.style,
                foreground=colour or self.style.foreground,
                underline=not self.style.underline,
            )

    def start_nickname_link(self, nickname: str) -> None:
        self.style = replace(self.style, nickname=nickname)

    def end_nickname_link(self) -> None:
        self.style = replace(self.style, nickname=None)

    def start_smilie(self, name: str) -> None:
        self.style = replace(self.style, smilie=name)

    def end_smilie(self) -> None:
        self.style = replace(self.style, smilie=None)

    def start_tooltip(self, tooltip: str) -> None:
        self.style = replace(self.style, tooltip=tooltip)

    def end_tooltip(self) -> None:
        self.style = replace(self.style, tooltip=None)

    def set_default_font(self, name: str, size: int) -> None:
        self.font_name = name
        self.font_size = size

    def get_maximum_font_size(self) -> int:
        return self.font_size

    def clear(self) -> None:
        """Drop all output and return to the initial state."""
        self._reset()

    def get_plain_text(self) -> str:
        return ''.join(text for text, _ in self.runs)

    def get_styled_message(self) -> Any:
        return list(self.runs)


class PlainTextSink(StyledRunSink):
    """Sink whose result is the unstyled text."""

    def get_styled_message(self) -> str:
        return self.get_plain_text()


class DelegatingStyleSink:
    """
    Pass-through wrapper around another sink.

    Subclasses override the calls they want to post-process and leave the
    rest to the wrapped sink.
    """

    def __init__(self, delegate: StyleSink):
        self.delegate = delegate

    def append_string(self, text: str) -> None:
        self.delegate.append_string(text)

    def reset_all_styles(self) -> None:
        self.delegate.reset_all_styles()

    def reset_colours(self) -> None:
        self.delegate.reset_colours()

    def toggle_bold(self) -> None:
        self.delegate.toggle_bold()

    def toggle_underline(self) -> None:
        self.delegate.toggle_underline()

    def toggle_italic(self) -> None:
        self.delegate.toggle_italic()

    def toggle_fixed_width(self) -> None:
        self.delegate.toggle_fixed_width()

    def set_foreground(self, colour: ColorTriplet) -> None:
        self.delegate.set_foreground(colour)

    def set_background(self, colour: ColorTriplet) -> None:
        self.delegate.set_background(colour)

    def set_default_foreground(self, colour: ColorTriplet) -> None:
        self.delegate.set_default_foreground(colour)

    def set_default_background(self, colour: ColorTriplet) -> None:
        self.delegate.set_default_background(colour)

    def start_hyperlink(self, url: str) -> None:
        self.delegate.start_hyperlink(url)

    def end_hyperlink(self) -> None:
        self.delegate.end_hyperlink()

    def start_channel_link(self, channel: str) -> None:
        self.delegate.start_channel_link(channel)

    def end_channel_link(self) -> None:
        self.delegate.end_channel_link()

    def toggle_hyperlink_style(self, colour: Optional[ColorTriplet]) -> None:
        self.delegate.toggle_hyperlink_style(colour)

    def toggle_channel_link_style(self, colour: Optional[ColorTriplet]) -> None:
        self.delegate.toggle_channel_link_style(colour)

    def start_nickname_link(self, nickname: str) -> None:
        self.delegate.start_nickname_link(nickname)

    def end_nickname_link(self) -> None:
        self.delegate.end_nickname_link()

    def start_smilie(self, name: str) -> None:
        self.delegate.start_smilie(name)

    def end_smilie(self) -> None:
        self.delegate.end_smilie()

    def start_tooltip(self, tooltip: str) -> None:
        self.delegate.start_tooltip(tooltip)

    def end_tooltip(self) -> None:
        self.delegate.end_tooltip()

    def set_default_font(self, name: str, size: int) -> None:
        self.delegate.set_default_font(name, size)

    def get_maximum_font_size(self) -> int:
        return self.delegate.get_maximum_font_size()

    def clear(self) -> None:
        self.delegate.clear()

    def get_styled_message(self) -> Any:
        return self.delegate.get_styled_message()
