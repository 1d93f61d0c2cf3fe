# document/__init__.py

from .properties import DisplayProperty, DisplayPropertyMap, DisplayLocation
from .document import Document, DocumentListener, Line
from .cache import RenderCache
from .searcher import DocumentSearcher, LinePosition

__all__ = ["DisplayProperty", "DisplayPropertyMap", "DisplayLocation", "Document",
           "DocumentListener", "Line", "RenderCache", "DocumentSearcher", "LinePosition"]
