"""
Cleanup of model output before and after segment extraction.

Models ignore formatting instructions often enough that every reply goes
through these transforms. All of them leave clean input untouched, and
applying one twice gives the same result as applying it once.
"""

import re

from website_gen.models import ExtractedSegments


FENCE_PATTERN = re.compile(r"```")
LABEL_LINE_PATTERN = re.compile(
    r"^[ \t]*(?:html|css|javascript)[ \t]*\r?$", re.IGNORECASE | re.MULTILINE
)
# "#id { ... }" is CSS, not a heading
HEADING_LINE_PATTERN = re.compile(r"^#{1,6}(?:[ \t].*)?\r?$", re.MULTILINE)

# "css.card" or "css-box" is a selector, not a label
CSS_LABEL_PREFIX_PATTERN = re.compile(
    r"^\s*(?:css|javascript)(?![\w{,.#:>\[~+-])\s*", re.IGNORECASE
)
# "html" is also a valid selector, so only a bare "html" line counts as a label
HTML_LABEL_PREFIX_PATTERN = re.compile(r"^\s*html[ \t]*(?:\r?\n|$)\s*", re.IGNORECASE)

SCRIPT_OPEN_PATTERN = re.compile(r"<script\b[^>]*>", re.IGNORECASE)
SCRIPT_CLOSE_PATTERN = re.compile(r"</script\s*>", re.IGNORECASE)
COMMENT_PATTERN = re.compile(r"<!--.*?-->", re.DOTALL)
# Quoted attribute values may contain "<" or ">"
TAG_PATTERN = re.compile(
    r"""</?[A-Za-z][\w:-]*(?:\s(?:"[^"]*"|'[^']*'|[^<>"'])*)?/?>"""
)


def clean_ai_text(text: str) -> str:
    """
    Remove markdown fences, bare language labels and heading lines.

    Args:
        text: Raw LLM response.

    Returns:
        Text with only code and section markers left.
    """
    text = FENCE_PATTERN.sub("", text)
    text = LABEL_LINE_PATTERN.sub("", text)
    text = HEADING_LINE_PATTERN.sub("", text)
    return text.strip()


def sanitize_css(css: str) -> str:
    """
    Strip stray language labels from the start of a style segment.

    Args:
        css: Extracted style segment.

    Returns:
        Style rules without a leading label.
    """
    previous = None
    while css != previous:
        previous = css
        css = CSS_LABEL_PREFIX_PATTERN.sub("", css, count=1)
        css = HTML_LABEL_PREFIX_PATTERN.sub("", css, count=1)
    return css.strip()


def sanitize_js(js: str) -> str:
    """
    Remove markup tags from a behavior segment.

    Any ``<script>`` or ``</script>`` left in the code would end the
    embedding script element early once the segment is placed in a document.

    Args:
        js: Extracted behavior segment.

    Returns:
        JavaScript without markup tags.
    """
    previous = None
    while js != previous:
        previous = js
        js = SCRIPT_OPEN_PATTERN.sub("", js)
        js = SCRIPT_CLOSE_PATTERN.sub("", js)
        js = COMMENT_PATTERN.sub("", js)
        js = TAG_PATTERN.sub("", js)
    return js.strip()


def sanitize_segments(segments: ExtractedSegments) -> ExtractedSegments:
    """Apply the per-segment transforms to extracted segments."""
    return ExtractedSegments(
        markup=segments.markup.strip(),
        style=sanitize_css(segments.style),
        behavior=sanitize_js(segments.behavior),
    )
