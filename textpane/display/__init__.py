# display/__init__.py

from .sink import StyleSink, StyledRunSink, PlainTextSink, DelegatingStyleSink, TextStyle
from .rich_sink import RichStyleSink
from .formatted_sink import FormattedTextSink

__all__ = ["StyleSink", "StyledRunSink", "PlainTextSink", "DelegatingStyleSink", "TextStyle",
           "RichStyleSink", "FormattedTextSink"]
