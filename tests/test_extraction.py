"""
Tests for response extraction.
"""

import pytest

from website_gen.pipeline.extraction import MarkerSet, ResponseParser


SAMPLE = "pre ---HTML--- A ---CSS--- B ---JS--- C"


def test_extract_between_markers():
    parser = ResponseParser()
    assert parser.extract_between(SAMPLE, "---HTML---", "---CSS---") == "A"
    assert parser.extract_between(SAMPLE, "---CSS---", "---JS---") == "B"


def test_extract_after_last_marker():
    assert ResponseParser.extract_after(SAMPLE, "---JS---") == "C"


def test_extract_all_segments():
    segments = ResponseParser().extract(SAMPLE)
    assert (segments.markup, segments.style, segments.behavior) == ("A", "B", "C")


@pytest.mark.parametrize("text", [
    "pre ---HTML--- A ---JS--- C",
    "pre A ---CSS--- B ---JS--- C",
    "",
])
def test_missing_marker_yields_empty_markup(text):
    """A missing marker is "not found", never an exception."""
    assert ResponseParser.extract_between(text, "---HTML---", "---CSS---") == ""


def test_end_marker_before_start_is_not_found():
    text = "---CSS--- B ---HTML--- A"
    assert ResponseParser.extract_between(text, "---HTML---", "---CSS---") == ""


def test_missing_final_marker_yields_empty_behavior():
    segments = ResponseParser().extract("---HTML--- A ---CSS--- B")
    assert segments.markup == "A"
    assert segments.style == ""
    assert segments.behavior == ""


def test_multiline_segments_are_trimmed(well_formed_response):
    segments = ResponseParser().extract(well_formed_response)

    assert segments.markup.startswith("<!DOCTYPE html>")
    assert segments.markup.endswith("</html>")
    assert segments.style.startswith("#counter {")
    assert segments.behavior.endswith("});")


def test_custom_markers():
    parser = ResponseParser(MarkerSet(markup="[[H]]", style="[[C]]", behavior="[[J]]"))
    segments = parser.extract("[[H]]<p></p>[[C]]p{}[[J]]go();")
    assert (segments.markup, segments.style, segments.behavior) == ("<p></p>", "p{}", "go();")


def test_behavior_stops_at_repeated_marker():
    text = "---HTML--- A ---CSS--- B ---JS--- C ---JS--- D"
    assert ResponseParser().extract(text).behavior == "C"
