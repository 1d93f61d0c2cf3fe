# messages/__init__.py

from .codes import ControlCode, Literal, Code, Span, tokenize, strip_control_codes
from .colours import ColourResolver
from .styliser import Styliser

__all__ = ["ControlCode", "Literal", "Code", "Span", "tokenize", "strip_control_codes",
           "ColourResolver", "Styliser"]
