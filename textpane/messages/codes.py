# messages/codes.py

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Set, Tuple, Union


class ControlCode(Enum):
    """
    Single-character codes recognised in message text.

    The first group are the de-facto IRC formatting codes carried on the
    wire. The second group are span markers used inside the client; each
    marks both the start and the end of its span.
    """
    BOLD = '\x02'
    COLOUR = '\x03'
    COLOUR_HEX = '\x04'
    STOP = '\x0f'
    FIXED = '\x11'
    NEGATE = '\x12'
    ITALIC = '\x1d'
    UNDERLINE = '\x1f'

    HYPERLINK = '\x05'
    NICKNAME = '\x10'
    TOOLTIP = '\x13'
    CHANNEL = '\x14'
    SMILIE = '\x15'

    @property
    def is_span(self) -> bool:
        return self in SPAN_CODES


VISIBLE_CODES = frozenset({
    ControlCode.BOLD, ControlCode.COLOUR, ControlCode.COLOUR_HEX, ControlCode.STOP,
    ControlCode.FIXED, ControlCode.NEGATE, ControlCode.ITALIC, ControlCode.UNDERLINE,
})
SPAN_CODES = frozenset({
    ControlCode.HYPERLINK, ControlCode.NICKNAME, ControlCode.TOOLTIP,
    ControlCode.CHANNEL, ControlCode.SMILIE,
})
# Spans whose payload sits between the first two markers; the third closes.
DELIMITED_SPANS = frozenset({ControlCode.NICKNAME, ControlCode.TOOLTIP})
# Spans produced by the autolink and smilie passes.
AUTOLINK_SPANS = frozenset({ControlCode.HYPERLINK, ControlCode.CHANNEL, ControlCode.SMILIE})

CONTROL_CHARS = ''.join(code.value for code in ControlCode)

_CONTROL_RE = re.compile('[' + re.escape(CONTROL_CHARS) + ']')
_DIGITS_RE = re.compile(r'[0-9]{1,2}')
_HEX_RE = re.compile(r'[0-9a-fA-F]{6}')


@dataclass(frozen=True)
class Literal:
    """A run of text containing no control codes."""
    text: str


@dataclass(frozen=True)
class Code:
    """
    A formatting code and its arguments.

    Colour codes carry palette indices (COLOUR) or upper-case hex strings
    (COLOUR_HEX); a colour code with no foreground resets the colours.
    """
    kind: ControlCode
    foreground: Optional[Union[int, str]] = None
    background: Optional[Union[int, str]] = None


@dataclass(frozen=True)
class Span:
    """One boundary of a span; opening boundaries carry the span's payload."""
    kind: ControlCode
    opening: bool
    payload: str = ''


Token = Union[Literal, Code, Span]


def read_until_control(text: str) -> str:
    """
    Return the longest prefix of ``text`` that contains no control codes.

    If the result is shorter than the input, the next character is a
    control code.
    """
    match = _CONTROL_RE.search(text)
    return text[:match.start()] if match else text


def tokenize(text: str) -> List[Token]:
    """Lex ``text`` into literal runs, formatting codes and span boundaries."""
    tokens: List[Token] = []
    open_spans: Set[ControlCode] = set()
    position = 0

    while position < len(text):
        match = _CONTROL_RE.search(text, position)
        end = match.start() if match else len(text)
        if end > position:
            tokens.append(Literal(text[position:end]))
            position = end

        if position < len(text):
            token, position = _read_control(text, position, open_spans)
            if token is not None:
                tokens.append(token)

    return tokens


def _read_control(text: str, position: int, open_spans: Set[ControlCode]) -> Tuple[Optional[Token], int]:
    """Read the control code at ``position`` and its arguments."""
    kind = ControlCode(text[position])

    if kind is ControlCode.COLOUR:
        return _read_colour(text, position)
    if kind is ControlCode.COLOUR_HEX:
        return _read_hex_colour(text, position)
    if not kind.is_span:
        return Code(kind), position + 1

    if kind in open_spans:
        open_spans.discard(kind)
        return Span(kind, False), position + 1

    if kind in DELIMITED_SPANS:
        end = text.find(kind.value, position + 1)
        if end == -1:
            # No partner marker: consume it and carry on
            return None, position + 1
        open_spans.add(kind)
        return Span(kind, True, text[position + 1:end]), end + 1

    open_spans.add(kind)
    return Span(kind, True, read_until_control(text[position + 1:])), position + 1


def _read_colour(text: str, position: int) -> Tuple[Code, int]:
    count = position + 1
    digits = _DIGITS_RE.match(text, count)
    if not digits:
        return Code(ControlCode.COLOUR), count

    foreground = int(digits.group()) % 16
    count = digits.end()
    background = None

    if text.startswith(',', count):
        digits = _DIGITS_RE.match(text, count + 1)
        if digits:
            background = int(digits.group()) % 16
            count = digits.end()

    return Code(ControlCode.COLOUR, foreground, background), count


def _read_hex_colour(text: str, position: int) -> Tuple[Code, int]:
    count = position + 1
    digits = _HEX_RE.match(text, count)
    if not digits:
        return Code(ControlCode.COLOUR_HEX), count

    foreground = digits.group().upper()
    count = digits.end()
    background = None

    if text.startswith(',', count):
        digits = _HEX_RE.match(text, count + 1)
        if digits:
            background = digits.group().upper()
            count = digits.end()

    return Code(ControlCode.COLOUR_HEX, foreground, background), count


def strip_control_codes(text: str) -> str:
    """
    Remove every recognised control code from ``text``.

    Colour arguments go with their codes, and nickname and tooltip spans
    resolve to the text they wrap.
    """
    return ''.join(token.text for token in tokenize(text) if isinstance(token, Literal))


def nickname_span(nickname: str, display: Optional[str] = None) -> str:
    """Mark up ``display`` (default: the nickname) as a link to ``nickname``."""
    marker = ControlCode.NICKNAME.value
    return f"{marker}{nickname}{marker}{nickname if display is None else display}{marker}"


def tooltip_span(tooltip: str, text: str) -> str:
    """Mark up ``text`` so that it shows ``tooltip`` when hovered."""
    marker = ControlCode.TOOLTIP.value
    return f"{marker}{tooltip}{marker}{text}{marker}"
