"""
Splitting of raw model output into markup, style and behavior segments.
"""

from typing import NamedTuple

from website_gen.models import ExtractedSegments
from website_gen.pipeline.prompt import CSS_MARKER, HTML_MARKER, JS_MARKER


class MarkerSet(NamedTuple):
    """Literal delimiters that open each section, in template order."""
    markup: str = HTML_MARKER
    style: str = CSS_MARKER
    behavior: str = JS_MARKER


class ResponseParser:
    """Parses LLM responses into code segments. Holds no state besides markers."""

    def __init__(self, markers: MarkerSet = MarkerSet()):
        self.markers = markers

    @staticmethod
    def extract_between(text: str, start: str, end: str) -> str:
        """
        Extract the text strictly between two markers.

        Args:
            text: Raw LLM response.
            start: Opening marker; its first occurrence is used.
            end: Closing marker; its first occurrence after ``start`` is used.

        Returns:
            Trimmed text, or an empty string when either marker is missing.
        """
        start_index = text.find(start)
        if start_index == -1:
            return ""

        content_start = start_index + len(start)
        end_index = text.find(end, content_start)
        if end_index == -1:
            return ""

        return text[content_start:end_index].strip()

    @staticmethod
    def extract_after(text: str, marker: str) -> str:
        """
        Extract the text after the first occurrence of a marker.

        The last section has no closing delimiter: it runs to the end of the
        text, or to a repeated occurrence of the same marker. A missing marker
        yields an empty string.
        """
        _, found, tail = text.partition(marker)
        if not found:
            return ""
        section, _, _ = tail.partition(marker)
        return section.strip()

    def extract(self, text: str) -> ExtractedSegments:
        """
        Split a response into the three segments.

        Args:
            text: Raw LLM response (normally already cleaned).

        Returns:
            ExtractedSegments, with empty strings for sections not found.
        """
        return ExtractedSegments(
            markup=self.extract_between(text, self.markers.markup, self.markers.style),
            style=self.extract_between(text, self.markers.style, self.markers.behavior),
            behavior=self.extract_after(text, self.markers.behavior),
        )
