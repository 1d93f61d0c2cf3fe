# document/searcher.py

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .document import Document, DocumentListener

Match = Tuple[int, int]


@dataclass(frozen=True)
class LinePosition:
    """A range of text that may span lines; end is exclusive."""
    start_line: int
    start_pos: int
    end_line: int
    end_pos: int

    def normalised(self) -> 'LinePosition':
        """Return this range in forward order."""
        if (self.start_line, self.start_pos) <= (self.end_line, self.end_pos):
            return self
        return LinePosition(self.end_line, self.end_pos, self.start_line, self.start_pos)


class DocumentSearcher(DocumentListener):
    """
    Finds successive occurrences of a phrase in a document.

    The phrase is matched literally against each line's plain text. The
    cursor starts at the end of the document and moves to every match
    returned; searches wrap around the ends of the document.
    """

    def __init__(self, phrase: str, document: Document, case_sensitive: bool = False):
        self.phrase = phrase
        self.document = document
        self.case_sensitive = case_sensitive
        self._pattern = re.compile(re.escape(phrase), 0 if case_sensitive else re.IGNORECASE) if phrase else None
        self._wrapped = False
        self.position = self._end_position()
        self._subscription = document.add_listener(self)

    def _end_position(self) -> LinePosition:
        last = self.document.get_num_lines() - 1
        if last < 0:
            return LinePosition(0, 0, 0, 0)
        length = self.document.get_line_length(last)
        return LinePosition(last, length, last, length)

    def set_position(self, position: LinePosition) -> None:
        self.position = position.normalised()

    def is_wrapped(self) -> bool:
        """Whether the most recent search passed an end of the document."""
        return self._wrapped

    def _search_line(self, index: int) -> List[Match]:
        try:
            text = self.document.get_line_text(index)
        except IndexError:
            return []
        return [(m.start(), m.end()) for m in self._pattern.finditer(text)]

    def _found(self, line: int, match: Match, wrapped: bool) -> LinePosition:
        self._wrapped = wrapped
        self.position = LinePosition(line, match[0], line, match[1])
        return self.position

    def search_down(self) -> Optional[LinePosition]:
        """Return the next match after the cursor, wrapping to the top."""
        size = self.document.get_num_lines()
        if self._pattern is None or size == 0:
            return None

        cursor_line = min(self.position.end_line, size - 1)
        cursor_pos = self.position.end_pos if cursor_line == self.position.end_line else 0

        for match in self._search_line(cursor_line):
            if match[0] >= cursor_pos:
                return self._found(cursor_line, match, False)

        for line in range(cursor_line + 1, size):
            matches = self._search_line(line)
            if matches:
                return self._found(line, matches[0], False)

        for line in range(0, cursor_line + 1):
            matches = self._search_line(line)
            if matches:
                return self._found(line, matches[0], True)

        return None

    def search_up(self) -> Optional[LinePosition]:
        """Return the nearest match before the cursor, wrapping to the bottom."""
        size = self.document.get_num_lines()
        if self._pattern is None or size == 0:
            return None

        cursor_line = min(self.position.start_line, size - 1)
        if cursor_line == self.position.start_line:
            cursor_pos = self.position.start_pos
        else:
            cursor_pos = self.document.get_line_length(cursor_line) + 1

        for match in reversed(self._search_line(cursor_line)):
            if match[0] < cursor_pos:
                return self._found(cursor_line, match, False)

        for line in range(cursor_line - 1, -1, -1):
            matches = self._search_line(line)
            if matches:
                return self._found(line, matches[-1], False)

        for line in range(size - 1, cursor_line - 1, -1):
            matches = self._search_line(line)
            if matches:
                return self._found(line, matches[-1], True)

        return None

    def trimmed(self, new_size: int, trimmed_count: int) -> None:
        position = self.position
        if position.start_line - trimmed_count < 0:
            self.position = self._end_position()
        else:
            self.position = LinePosition(
                position.start_line - trimmed_count, position.start_pos,
                position.end_line - trimmed_count, position.end_pos)

    def cleared(self) -> None:
        self.position = LinePosition(0, 0, 0, 0)

    def close(self) -> None:
        self._subscription.cancel()
