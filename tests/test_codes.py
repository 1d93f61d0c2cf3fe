# test_codes.py

import pytest

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from textpane.messages.codes import (
    Code, ControlCode, Literal, Span, nickname_span, read_until_control,
    strip_control_codes, tokenize, tooltip_span,
)


class TestTokenize:
    """Lexing of formatting codes and span markers."""

    def test_plain_text_is_one_literal(self):
        assert tokenize("just text") == [Literal("just text")]

    def test_empty_text(self):
        assert tokenize("") == []

    def test_bold_and_colour_scenario(self):
        tokens = tokenize("\x022plain\x02 and \x034red\x03")
        assert tokens == [
            Code(ControlCode.BOLD),
            Literal("2plain"),
            Code(ControlCode.BOLD),
            Literal(" and "),
            Code(ControlCode.COLOUR, 4),
            Literal("red"),
            Code(ControlCode.COLOUR),
        ]

    def test_colour_with_background(self):
        assert tokenize("\x0312,4x") == [Code(ControlCode.COLOUR, 12, 4), Literal("x")]

    def test_colour_index_wraps_modulo_16(self):
        assert tokenize("\x0399x")[0] == Code(ControlCode.COLOUR, 3)

    def test_colour_consumes_at_most_two_digits(self):
        assert tokenize("\x031234") == [Code(ControlCode.COLOUR, 12), Literal("34")]

    def test_comma_without_background_digits_is_text(self):
        assert tokenize("\x034,x") == [Code(ControlCode.COLOUR, 4), Literal(",x")]

    def test_colour_without_digits_resets(self):
        assert tokenize("\x03,5x") == [Code(ControlCode.COLOUR), Literal(",5x")]

    def test_hex_colour(self):
        tokens = tokenize("\x04ff0000,00Ff00text")
        assert tokens == [Code(ControlCode.COLOUR_HEX, "FF0000", "00FF00"), Literal("text")]

    def test_short_hex_colour_resets(self):
        assert tokenize("\x04fff") == [Code(ControlCode.COLOUR_HEX), Literal("fff")]

    def test_hyperlink_span_payload(self):
        tokens = tokenize("\x05http://x.org\x05 after")
        assert tokens == [
            Span(ControlCode.HYPERLINK, True, "http://x.org"),
            Literal("http://x.org"),
            Span(ControlCode.HYPERLINK, False),
            Literal(" after"),
        ]

    def test_span_payload_stops_at_control_code(self):
        tokens = tokenize("\x14#chan\x02nel\x14")
        assert tokens[0] == Span(ControlCode.CHANNEL, True, "#chan")

    def test_nickname_span(self):
        tokens = tokenize(nickname_span("bob", "Bob") + ": hi")
        assert tokens == [
            Span(ControlCode.NICKNAME, True, "bob"),
            Literal("Bob"),
            Span(ControlCode.NICKNAME, False),
            Literal(": hi"),
        ]

    def test_unpartnered_tooltip_is_consumed(self):
        assert tokenize("a\x13b") == [Literal("a"), Literal("b")]

    def test_parity_is_tracked_per_kind(self):
        tokens = tokenize("\x05a\x14b\x05c\x14")
        spans = [t for t in tokens if isinstance(t, Span)]
        assert [(s.kind, s.opening) for s in spans] == [
            (ControlCode.HYPERLINK, True),
            (ControlCode.CHANNEL, True),
            (ControlCode.HYPERLINK, False),
            (ControlCode.CHANNEL, False),
        ]


class TestHelpers:
    """Strip transform and span builders."""

    def test_read_until_control(self):
        assert read_until_control("abc\x02def") == "abc"
        assert read_until_control("abc") == "abc"
        assert read_until_control("\x02") == ""

    def test_strip_removes_codes_and_arguments(self):
        text = "\x02bold\x02 \x0304,12red\x03 \x04FF00FFpink"
        assert strip_control_codes(text) == "bold red pink"

    def test_strip_resolves_spans_to_inner_text(self):
        text = nickname_span("bob", "Bob") + " says " + tooltip_span("a tip", "hover")
        assert strip_control_codes(text) == "Bob says hover"

    @pytest.mark.parametrize("text", ["", "plain", "emoji ☺ and tabs\t", "100% (ok)"])
    def test_strip_leaves_plain_text_alone(self, text):
        assert strip_control_codes(text) == text

    def test_nickname_span_defaults_display_to_nickname(self):
        assert nickname_span("bob") == "\x10bob\x10bob\x10"

    def test_is_span(self):
        assert ControlCode.SMILIE.is_span
        assert not ControlCode.BOLD.is_span
