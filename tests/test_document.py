# test_document.py

import threading
from datetime import datetime
from unittest.mock import Mock

import pytest
from rich.color_triplet import ColorTriplet

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from textpane.config import ConfigProvider
from textpane.display.sink import StyledRunSink, TextStyle
from textpane.document.document import Document, Line
from textpane.document.properties import DisplayLocation, DisplayProperty, DisplayPropertyMap
from textpane.messages.colours import ColourResolver
from textpane.messages.styliser import Styliser


class TestDisplayPropertyMap:
    """Typed, immutable per-line overrides."""

    def test_values_are_type_checked(self):
        props = DisplayPropertyMap({DisplayProperty.FOREGROUND_COLOUR: ColorTriplet(1, 2, 3)})
        assert props[DisplayProperty.FOREGROUND_COLOUR] == ColorTriplet(1, 2, 3)
        with pytest.raises(TypeError):
            DisplayPropertyMap({DisplayProperty.DO_NOT_DISPLAY: "yes"})
        with pytest.raises(TypeError):
            DisplayPropertyMap({"foreground": ColorTriplet(1, 2, 3)})

    def test_keyword_construction(self):
        props = DisplayPropertyMap(display_location=DisplayLocation.SOURCE)
        assert props.has(DisplayProperty.DISPLAY_LOCATION)
        assert len(props) == 1

    def test_with_property_copies(self):
        props = DisplayPropertyMap()
        updated = props.with_property(DisplayProperty.DO_NOT_DISPLAY, True)
        assert len(props) == 0
        assert updated[DisplayProperty.DO_NOT_DISPLAY] is True

    def test_equality(self):
        assert DisplayPropertyMap(do_not_display=False) == DisplayPropertyMap(do_not_display=False)
        assert hash(DisplayPropertyMap()) == hash(DisplayPropertyMap())


class TestDocument:
    """Appending, trimming, clearing and notification."""

    def setup_method(self):
        self.config = ConfigProvider()
        self.document = Document(self.config)
        self.listener = Mock()
        self.subscription = self.document.add_listener(self.listener)

    def test_append_splits_lines(self):
        assert self.document.append("[ts] ", None, "one\ntwo") == 2
        assert len(self.document) == 2
        assert self.document.get_line(1) == Line("[ts] ", "two")
        self.listener.lines_added.assert_called_once_with(0, 2, 2)

    def test_append_empty_text(self):
        assert self.document.append(None, None, "") == 1
        assert self.document.get_line_text(0) == ""

    def test_datetime_timestamp(self):
        self.document.append(datetime(2024, 1, 2, 3, 4, 5), None, "x")
        assert self.document.get_line(0).timestamp == "[03:04:05] "

    def test_timestamp_format_option(self):
        self.config.set_option("ui", "timestamp", "%H:%M ")
        self.document.append(datetime(2024, 1, 2, 3, 4, 5), None, "x")
        assert self.document.get_line_text(0) == "03:04 x"

    def test_line_text_is_plain(self):
        self.document.append("\x02[ts]\x02 ", None, "\x0304hi\x03 there")
        assert self.document.get_line_text(0) == "[ts] hi there"
        assert self.document.get_line_length(0) == len("[ts] hi there")

    def test_out_of_range(self):
        with pytest.raises(IndexError):
            self.document.get_line(0)
        self.document.append(None, None, "x")
        with pytest.raises(IndexError):
            self.document.get_line(1)
        with pytest.raises(IndexError):
            self.document.get_line(-1)

    def test_do_not_display(self):
        props = DisplayPropertyMap({DisplayProperty.DO_NOT_DISPLAY: True})
        assert self.document.append(None, props, "hidden") == 0
        assert len(self.document) == 0
        self.listener.lines_added.assert_not_called()

    def test_unbounded_by_default(self):
        for i in range(100):
            self.document.append(None, None, str(i))
        assert len(self.document) == 100
        self.listener.trimmed.assert_not_called()

    def test_bounded_buffer(self):
        self.config.set_option("ui", "frameBufferSize", 3)
        for i in range(5):
            self.document.append(None, None, f"line {i}")
        assert len(self.document) == 3
        assert [line.text for line in self.document.snapshot()] == ["line 2", "line 3", "line 4"]
        assert self.listener.trimmed.call_count == 2
        self.listener.trimmed.assert_called_with(3, 1)

    def test_shrinking_the_buffer_trims(self):
        for i in range(5):
            self.document.append(None, None, str(i))
        self.config.set_option("ui", "frameBufferSize", 2)
        assert [line.text for line in self.document.snapshot()] == ["3", "4"]
        self.listener.trimmed.assert_called_once_with(2, 3)

    def test_trim_without_cap_is_noop(self):
        self.document.append(None, None, "a\nb\nc")
        assert self.document.trim(1) == 0
        assert len(self.document) == 3

    def test_clear(self):
        self.document.append(None, None, "a\nb")
        self.document.clear()
        assert len(self.document) == 0
        self.listener.cleared.assert_called_once_with()

    def test_clear_empty_document(self):
        self.document.clear()
        self.listener.cleared.assert_called_once_with()

    def test_font_settings_refresh(self):
        self.document.append(None, None, "a\nb")
        self.config.set_option("ui", "textPaneFontSize", 16)
        self.config.set_option("ui", "textPaneFontName", "Courier")
        assert all(line.font_size == 16 for line in self.document.snapshot())
        assert self.document.get_line(1).font_name == "Courier"
        assert self.document.get_line_height(0) == 16
        assert self.listener.repaint_needed.call_count == 2

    def test_unrelated_options_do_not_repaint(self):
        self.config.set_option("ui", "stylelinks", False)
        self.listener.repaint_needed.assert_not_called()

    def test_snapshot_is_a_copy(self):
        self.document.append(None, None, "a")
        snapshot = self.document.snapshot()
        self.document.append(None, None, "b")
        assert len(snapshot) == 1

    def test_cancelled_listener_is_not_notified(self):
        self.subscription.cancel()
        self.document.append(None, None, "a")
        self.listener.lines_added.assert_not_called()

    def test_concurrent_appends(self):
        def produce(n):
            for i in range(50):
                self.document.append(None, None, f"{n}-{i}")

        threads = [threading.Thread(target=produce, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(self.document) == 200
        assert self.listener.lines_added.call_count == 200

    def test_lines_compare_by_value(self):
        assert Line("a", "b") == Line("a", "b")
        assert Line("a", "b") != Line("a", "c")

    def test_italic_code_does_not_split_lines(self):
        assert self.document.append(None, None, "\x1dx\x1d y") == 1
        assert len(self.document) == 1
        line = self.document.get_line(0)
        assert line.text == "\x1dx\x1d y"

        sink = StyledRunSink()
        Styliser(self.config, ColourResolver(self.config)).style(sink, *line.parts)
        assert sink.runs == [("x", TextStyle(italic=True)), (" y", TextStyle())]

    def test_only_line_feeds_split(self):
        text = "a\x0bb\x0cc\x1cd\x1ee\x85f g"
        assert self.document.append(None, None, text) == 1
        assert self.document.get_line(0).text == text

    def test_carriage_returns_and_trailing_newline(self):
        assert self.document.append(None, None, "one\r\ntwo\n") == 2
        assert [line.text for line in self.document.snapshot()] == ["one", "two"]

    def test_buffer_never_exceeds_cap(self):
        self.config.set_option("ui", "frameBufferSize", 3)
        sizes = []
        self.listener.lines_added.side_effect = lambda *args: sizes.append(len(self.document))
        self.listener.trimmed.side_effect = lambda *args: sizes.append(len(self.document))
        self.document.append(None, None, "a\nb\nc")
        self.document.append(None, None, "d\ne")
        assert max(sizes) <= 3
        self.listener.lines_added.assert_called_with(1, 2, 3)
        self.listener.trimmed.assert_called_once_with(3, 2)

    def test_oversized_append_reports_surviving_lines(self):
        self.config.set_option("ui", "frameBufferSize", 2)
        assert self.document.append(None, None, "a\nb\nc\nd") == 4
        assert [line.text for line in self.document.snapshot()] == ["c", "d"]
        self.listener.lines_added.assert_called_once_with(0, 2, 2)
        self.listener.trimmed.assert_called_once_with(2, 2)
