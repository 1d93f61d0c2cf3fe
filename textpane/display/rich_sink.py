# display/rich_sink.py

from typing import Any, Dict, Optional

from rich.color import Color
from rich.color_triplet import ColorTriplet
from rich.style import Style
from rich.text import Text

from .sink import StyledRunSink, TextStyle


def _colour(colour: Optional[ColorTriplet]) -> Optional[Color]:
    return Color.from_triplet(colour) if colour is not None else None


def rich_style(style: TextStyle) -> Style:
    """Convert a run's attributes into a Rich style."""
    meta: Dict[str, Any] = {}
    for key in ('channel', 'nickname', 'smilie', 'tooltip'):
        value = getattr(style, key)
        if value is not None:
            meta[key] = value
    if style.fixed:
        meta['fixed'] = True

    return Style(
        bold=style.bold or None,
        italic=style.italic or None,
        underline=style.underline or None,
        color=_colour(style.foreground),
        bgcolor=_colour(style.background),
        link=style.hyperlink,
        meta=meta or None,
    )


class RichStyleSink(StyledRunSink):
    """
    Builds a ``rich.text.Text`` from styled runs.

    Hyperlinks become terminal links; channel, nickname, smilie, tooltip and
    fixed-width spans are carried in the style's meta so a console handler
    can act on them.
    """

    def get_styled_message(self) -> Text:
        text = Text(no_wrap=False, end='')
        for run, style in self.runs:
            text.append(run, style=rich_style(style))
        return text
