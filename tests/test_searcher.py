# test_searcher.py

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from textpane.config import ConfigProvider
from textpane.document.document import Document
from textpane.document.searcher import DocumentSearcher, LinePosition


class TestLinePosition:

    def test_normalised(self):
        assert LinePosition(2, 5, 1, 3).normalised() == LinePosition(1, 3, 2, 5)
        assert LinePosition(1, 0, 1, 4).normalised() == LinePosition(1, 0, 1, 4)


class TestDocumentSearcher:
    """Bidirectional literal search with wraparound."""

    def setup_method(self):
        self.config = ConfigProvider()
        self.document = Document(self.config)

    def add(self, *lines):
        for line in lines:
            self.document.append(None, None, line)

    def test_search_down_visits_every_line_once(self):
        self.add("x one", "two x", "th x ree", "x")
        searcher = DocumentSearcher("x", self.document)
        found = [searcher.search_down().start_line for _ in range(4)]
        assert found == [0, 1, 2, 3]
        assert searcher.search_down().start_line == 0
        assert searcher.is_wrapped()

    def test_first_search_down_wraps_from_the_end(self):
        self.add("x", "x")
        searcher = DocumentSearcher("x", self.document)
        assert searcher.search_down() == LinePosition(0, 0, 0, 1)
        assert searcher.is_wrapped()
        assert searcher.search_down() == LinePosition(1, 0, 1, 1)
        assert not searcher.is_wrapped()

    def test_search_up_walks_backwards(self):
        self.add("x one", "two x", "th x ree", "x")
        searcher = DocumentSearcher("x", self.document)
        found = [searcher.search_up().start_line for _ in range(4)]
        assert found == [3, 2, 1, 0]
        assert not searcher.is_wrapped()
        assert searcher.search_up().start_line == 3
        assert searcher.is_wrapped()

    def test_several_matches_on_a_line(self):
        self.add("ab ab", "ab")
        searcher = DocumentSearcher("ab", self.document)
        searcher.set_position(LinePosition(0, 0, 0, 0))
        assert searcher.search_down() == LinePosition(0, 0, 0, 2)
        assert searcher.search_down() == LinePosition(0, 3, 0, 5)
        assert searcher.search_down() == LinePosition(1, 0, 1, 2)
        assert searcher.search_up() == LinePosition(0, 3, 0, 5)
        assert searcher.search_up() == LinePosition(0, 0, 0, 2)

    def test_case_sensitivity(self):
        self.add("a Test line")
        assert DocumentSearcher("test", self.document).search_down() == LinePosition(0, 2, 0, 6)
        assert DocumentSearcher("test", self.document, case_sensitive=True).search_down() is None

    def test_phrase_is_literal(self):
        self.add("abc")
        assert DocumentSearcher("a.c", self.document).search_down() is None
        self.add("a.c")
        assert DocumentSearcher("a.c", self.document).search_down().start_line == 1

    def test_no_match(self):
        self.add("one", "two")
        searcher = DocumentSearcher("three", self.document)
        assert searcher.search_down() is None
        assert searcher.search_up() is None

    def test_empty_phrase(self):
        self.add("one")
        assert DocumentSearcher("", self.document).search_down() is None

    def test_empty_document(self):
        searcher = DocumentSearcher("x", self.document)
        assert searcher.search_down() is None
        assert searcher.search_up() is None

    def test_matches_plain_text_with_timestamp(self):
        self.document.append("[12:00] ", None, "\x02bold\x02 word")
        searcher = DocumentSearcher("bold word", self.document)
        assert searcher.search_down() == LinePosition(0, 8, 0, 17)
        assert DocumentSearcher("12:00", self.document).search_down() == LinePosition(0, 1, 0, 6)

    def test_follows_trimming(self):
        self.config.set_option("ui", "frameBufferSize", 3)
        self.add("a", "b x", "c")
        searcher = DocumentSearcher("x", self.document)
        searcher.set_position(LinePosition(1, 2, 1, 3))
        self.add("d")
        assert searcher.position == LinePosition(0, 2, 0, 3)

    def test_follows_clearing(self):
        self.add("x", "x")
        searcher = DocumentSearcher("x", self.document)
        searcher.search_up()
        self.document.clear()
        self.add("x")
        assert searcher.search_down() == LinePosition(0, 0, 0, 1)

    def test_close(self):
        self.add("a")
        searcher = DocumentSearcher("a", self.document)
        searcher.close()
        self.document.clear()
        assert searcher.position == LinePosition(0, 1, 0, 1)
