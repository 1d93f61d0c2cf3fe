# display/formatted_sink.py

from typing import Callable, List, Optional

from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.mouse_events import MouseEvent, MouseEventType

from .sink import StyledRunSink, TextStyle

# Called with the link kind ('hyperlink', 'channel' or 'nickname') and its target
LinkHandler = Callable[[str, str], None]


def style_string(style: TextStyle) -> str:
    """Build a prompt_toolkit style string for a run."""
    parts: List[str] = []
    classes = [name for name in ('hyperlink', 'channel', 'nickname', 'smilie', 'tooltip')
               if getattr(style, name) is not None]
    if style.fixed:
        classes.append('fixed')
    if classes:
        parts.append('class:' + ','.join(classes))
    if style.bold:
        parts.append('bold')
    if style.italic:
        parts.append('italic')
    if style.underline:
        parts.append('underline')
    if style.foreground is not None:
        parts.append(f'fg:{style.foreground.hex}')
    if style.background is not None:
        parts.append(f'bg:{style.background.hex}')
    return ' '.join(parts)


class FormattedTextSink(StyledRunSink):
    """
    Builds prompt_toolkit ``FormattedText`` fragments.

    When a link handler is given, hyperlink, channel and nickname runs get a
    mouse handler that reports clicks to it.
    """

    def __init__(self, on_link: Optional[LinkHandler] = None):
        self.on_link = on_link
        super().__init__()

    def _mouse_handler(self, style: TextStyle):
        for kind in ('hyperlink', 'channel', 'nickname'):
            target = getattr(style, kind)
            if target is not None:
                break
        else:
            return None

        def handler(mouse_event: MouseEvent):
            if mouse_event.event_type != MouseEventType.MOUSE_UP:
                return NotImplemented
            self.on_link(kind, target)
            return None

        return handler

    def get_styled_message(self) -> FormattedText:
        fragments = []
        for run, style in self.runs:
            handler = self._mouse_handler(style) if self.on_link else None
            if handler is not None:
                fragments.append((style_string(style), run, handler))
            else:
                fragments.append((style_string(style), run))
        return FormattedText(fragments)
