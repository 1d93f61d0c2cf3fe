# messages/autolink.py

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, List, Optional, Pattern

from .codes import ControlCode, Literal, Span, Token

# Trailing punctuation that is illegal inside URLs
URL_PUNCT_ILLEGAL = '"'
# Trailing punctuation that is legal inside URLs
URL_PUNCT_LEGAL = r"';:!,\.\?"
URL_PUNCT = URL_PUNCT_ILLEGAL + URL_PUNCT_LEGAL
# URL characters that are never treated as trailing punctuation
URL_NOPUNCT = r"a-z0-9$\-_@&\+\*\(\)=/#%~\|"
URL_CHARS = (f"[{URL_PUNCT_LEGAL}{URL_NOPUNCT}]*[{URL_NOPUNCT}]+"
             f"[{URL_PUNCT_LEGAL}{URL_NOPUNCT}]*")
URL_REGEXP = re.compile(
    rf"[a-z+]+://{URL_CHARS}|(?<![a-z0-9:/])www\.{URL_CHARS}", re.IGNORECASE | re.ASCII)

MAX_CORRECTION_PASSES = 5

# Private use area; sentinels are picked from here per line
_SENTINEL_START = 0xE000
_SENTINEL_END = 0xF8FF


@dataclass
class _Corrections:
    closing_paren: Pattern
    trailing_quote: Pattern
    surrounding_quotes: Pattern
    trailing_punct: Pattern


@lru_cache(maxsize=16)
def _corrections(hc: str) -> _Corrections:
    """Build the boundary-correction expressions for a pair of link sentinels."""
    return _Corrections(
        # A span opened inside "(" that swallowed the ")" and what follows it
        closing_paren=re.compile(
            rf"(\([^\){hc}]*(?:[{hc}][^{hc}]*[{hc}])?[^\){hc}]*[{hc}][^{hc}]+)"
            rf"(\)['\";:!,\.\)]*)([{hc}])"),
        # A quote opened before the span and closed inside it
        trailing_quote=re.compile(
            rf"(^(?:[^{hc}]+|[{hc}][^{hc}][{hc}]))(['\"])([^{hc}]*?[{hc}][^{hc}]+)"
            rf"(\2[{URL_PUNCT}]*)([{hc}])"),
        # A quote directly before the span, closed inside it
        surrounding_quotes=re.compile(
            rf"(['\"])([{hc}][^{hc}]+?)(\1[^{hc}]*)([{hc}])"),
        # A single trailing punctuation character
        trailing_punct=re.compile(
            rf"([{hc}][^{hc}]+?)([{URL_PUNCT}]?)([{hc}])"),
    )


@lru_cache(maxsize=16)
def _channel_regexp(prefixes: str, excluded: str) -> Pattern:
    reserved = rf"[^\s{excluded}\",]"
    return re.compile(
        rf"(?<![^\s\+@\-<>\(\"',])([{re.escape(prefixes)}]{reserved}+)", re.IGNORECASE | re.ASCII)


def _pick_sentinels(text: str, count: int) -> List[str]:
    """Return ``count`` private-use characters that don't occur in ``text``."""
    used = set(text)
    sentinels = []
    for point in range(_SENTINEL_START, _SENTINEL_END + 1):
        if chr(point) not in used:
            sentinels.append(chr(point))
            if len(sentinels) == count:
                return sentinels
    raise ValueError("No free sentinel characters for this text")


class MarkedUpText:
    """
    Working form of a tokenised line for the regular-expression passes.

    Literal text is kept as it is and every other token becomes a single
    placeholder character, so the expressions see code boundaries exactly
    where the raw text had them. Span markers added by the passes are
    characters that do not occur in the line.
    """

    def __init__(self, tokens: Iterable[Token]):
        tokens = list(tokens)
        self._codes = [t for t in tokens if not isinstance(t, Literal)]
        literal = ''.join(t.text for t in tokens if isinstance(t, Literal))
        self.placeholder, self.hyperlink, self.channel, self.smilie = _pick_sentinels(literal, 4)
        self.text = ''.join(t.text if isinstance(t, Literal) else self.placeholder for t in tokens)
        self._kinds = {
            self.hyperlink: ControlCode.HYPERLINK,
            self.channel: ControlCode.CHANNEL,
            self.smilie: ControlCode.SMILIE,
        }

    @property
    def sentinels(self) -> str:
        return self.placeholder + self.hyperlink + self.channel + self.smilie

    def to_tokens(self) -> List[Token]:
        """Convert the working text back into tokens."""
        tokens: List[Token] = []
        codes = iter(self._codes)
        open_spans = set()
        pieces = re.split(f"([{self.sentinels}])", self.text)

        for i, piece in enumerate(pieces):
            if i % 2 == 0:
                if piece:
                    tokens.append(Literal(piece))
            elif piece == self.placeholder:
                tokens.append(next(codes))
            else:
                kind = self._kinds[piece]
                if kind in open_spans:
                    open_spans.discard(kind)
                    tokens.append(Span(kind, False))
                else:
                    open_spans.add(kind)
                    tokens.append(Span(kind, True, pieces[i + 1]))

        return tokens


def do_links(markup: MarkedUpText, channel_prefixes: Optional[str] = None) -> MarkedUpText:
    """
    Mark up URLs and channel names.

    Channel names are only marked when the connection supplied its channel
    prefixes. Span boundaries are then nudged past trailing punctuation,
    quotes and closing brackets until nothing changes, for at most
    MAX_CORRECTION_PASSES rounds.
    """
    original = markup.text
    link = markup.hyperlink
    text = URL_REGEXP.sub(lambda m: link + m.group(0) + link, original)

    if channel_prefixes:
        channel = markup.channel
        pattern = _channel_regexp(channel_prefixes, markup.sentinels)
        text = pattern.sub(lambda m: channel + m.group(0) + channel, text)

    fixes = _corrections(markup.hyperlink + markup.channel)
    previous = original
    for _ in range(MAX_CORRECTION_PASSES):
        if text == previous:
            break
        previous = text
        text = fixes.closing_paren.sub(r"\1\3\2", text)
        text = fixes.trailing_quote.sub(r"\1\2\3\5\4", text)
        text = fixes.surrounding_quotes.sub(r"\1\2\4\3", text)
        text = fixes.trailing_punct.sub(r"\1\3\2", text)

    markup.text = text
    return markup


def smilie_regexp(smilies: Iterable[str]) -> Optional[Pattern]:
    """Compile the whole-word expression for a set of smilie tokens."""
    alternatives = [re.escape(s) for s in smilies if s]
    if not alternatives:
        return None
    return re.compile(r"(\s|^)(" + '|'.join(alternatives) + r")(?=\s|$)", re.ASCII)


def do_smilies(markup: MarkedUpText, pattern: Optional[Pattern]) -> MarkedUpText:
    """Mark up every whitespace-delimited smilie token."""
    if pattern is not None:
        smilie = markup.smilie
        markup.text = pattern.sub(lambda m: m.group(1) + smilie + m.group(2) + smilie, markup.text)
    return markup
