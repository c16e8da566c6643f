"""
Tests for model output cleanup.
"""

import re

import pytest

from website_gen.models import ExtractedSegments
from website_gen.pipeline.sanitize import (
    clean_ai_text,
    sanitize_css,
    sanitize_js,
    sanitize_segments,
)


TAG = re.compile(r"<[^<>\s][^<>]*>")

CLEAN_HTML = '<!DOCTYPE html>\n<html>\n<body>\n<button id="counter">0</button>\n</body>\n</html>'
CLEAN_CSS = "html, body {\n  margin: 0;\n}\n\n#counter > span {\n  color: red;\n}"
CLEAN_JS = 'const el = document.getElementById("counter");\nif (a < b && c > d) {\n  el.textContent = "ok";\n}'


@pytest.mark.parametrize("text", [CLEAN_HTML, CLEAN_CSS, CLEAN_JS])
def test_clean_ai_text_leaves_clean_code_alone(text):
    assert clean_ai_text(text) == text


def test_sanitize_css_leaves_clean_css_alone():
    assert sanitize_css(CLEAN_CSS) == CLEAN_CSS


def test_sanitize_js_leaves_clean_js_alone():
    assert sanitize_js(CLEAN_JS) == CLEAN_JS


@pytest.mark.parametrize("transform, text", [
    (clean_ai_text, "```html\n<p>x</p>\n```\n## Notes\ncss\n"),
    (sanitize_css, "css\n  css html\nbody {}"),
    (sanitize_js, "<<b>script>alert(1)<</b>/script>"),
])
def test_transforms_are_idempotent(transform, text):
    once = transform(text)
    assert transform(once) == once


def test_clean_ai_text_strips_fences_and_labels():
    raw = "```html\n<div>hi</div>\n```\n```javascript\nrun();\n```"
    assert clean_ai_text(raw) == "<div>hi</div>\n\n\nrun();"


def test_clean_ai_text_removes_label_lines_case_insensitive():
    raw = "---CSS---\nCSS\np { color: red; }\n  JavaScript  \n"
    assert clean_ai_text(raw) == "---CSS---\n\np { color: red; }"


def test_clean_ai_text_removes_markdown_headings():
    raw = "# Title\n### Styles\n#counter { color: red; }\n####### not a heading"
    cleaned = clean_ai_text(raw)

    assert "Title" not in cleaned
    assert "Styles" not in cleaned
    assert "#counter { color: red; }" in cleaned
    assert "####### not a heading" in cleaned


def test_sanitize_css_strips_only_label_line():
    """A leading "css" label goes; the rules stay."""
    assert sanitize_css("css\nbody { color: red; }") == "body { color: red; }"


@pytest.mark.parametrize("text, expected", [
    ("CSS body { margin: 0; }", "body { margin: 0; }"),
    ("javascript\nhtml\n.card { padding: 1rem; }", ".card { padding: 1rem; }"),
    ("html\n.card { padding: 1rem; }", ".card { padding: 1rem; }"),
])
def test_sanitize_css_strips_label_prefixes(text, expected):
    assert sanitize_css(text) == expected


def test_sanitize_css_keeps_html_selector():
    assert sanitize_css("html { font-size: 16px; }") == "html { font-size: 16px; }"


def test_sanitize_js_removes_script_and_markup_tags():
    js = '<script type="module">\nalert(1)\n</script>\n<div class="box">hello</div>\n<!-- note -->\nrun();'
    cleaned = sanitize_js(js)

    assert not TAG.search(cleaned)
    assert "<script" not in cleaned.lower()
    assert "alert(1)" in cleaned
    assert "hello" in cleaned
    assert cleaned.endswith("run();")


def test_sanitize_js_inline_script_example():
    cleaned = sanitize_js("<script>alert(1)</script><p>Hi</p><br/>")
    assert cleaned == "alert(1)Hi"


def test_sanitize_segments_applies_per_segment_rules():
    segments = ExtractedSegments(
        markup="  <p>hi</p>  ",
        style="css\np { color: red; }",
        behavior="<script>go();</script>",
    )
    cleaned = sanitize_segments(segments)

    assert cleaned.markup == "<p>hi</p>"
    assert cleaned.style == "p { color: red; }"
    assert cleaned.behavior == "go();"


@pytest.mark.parametrize("css", [
    "css.card { padding: 1rem; }",
    "css-box { display: block; }",
    "css, p { margin: 0; }",
    "javascript:hover { color: red; }",
])
def test_sanitize_css_keeps_label_like_selectors(css):
    assert sanitize_css(css) == css


@pytest.mark.parametrize("js,expected", [
    ('go();\n<div data-x="<">hi</div>', "go();\nhi"),
    ("go();\n<span title='a > b'>x</span>", "go();\nx"),
])
def test_sanitize_js_strips_tags_with_quoted_angle_brackets(js, expected):
    assert sanitize_js(js) == expected


def test_clean_ai_text_handles_crlf_lines():
    raw = "## Result\r\n---CSS---\r\ncss\r\np { color: red; }\r\n"
    cleaned = clean_ai_text(raw)

    assert "css\r" not in cleaned
    assert "## Result" not in cleaned
    assert cleaned.startswith("---CSS---")
    assert cleaned.endswith("p { color: red; }")
