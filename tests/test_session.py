"""
Tests for the session state machine and preview lifecycle.
"""

import httpx
import openai
import pytest
from bs4 import BeautifulSoup

from website_gen.config import Settings
from website_gen.models import GenerationState as S
from website_gen.pipeline.client import CompletionClient
from website_gen.pipeline.generation import WebsiteGenerator
from website_gen.rendering.preview import PreviewSlot
from website_gen.session import BUSY_MESSAGE, GenerationSession


@pytest.fixture
def session(settings, fake_llm, tmp_path):
    generator = WebsiteGenerator(settings, client=CompletionClient(settings, llm=fake_llm))
    session = GenerationSession(generator, preview_slot=PreviewSlot(tmp_path / "previews"))
    yield session
    session.close()


def connection_error():
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    return openai.APIConnectionError(request=request)


def test_successful_run(session):
    outcome = session.run("a counter button")

    assert outcome.ok
    assert outcome.message == "Website generated successfully!"
    assert outcome.state == S.PREVIEWING
    assert session.history == [S.IDLE, S.REQUESTING, S.EXTRACTED_VALID, S.PREVIEWING]
    assert session.bundle is outcome.bundle
    assert "Runtime Error" in session.preview.html
    assert session.preview_handle.path.read_text(encoding="utf-8") == session.preview.html


def test_empty_description_stays_idle(session, fake_llm):
    outcome = session.run("   ")

    assert not outcome.ok
    assert outcome.error_kind == "missing_input"
    assert outcome.message == "Please describe the website you want to generate."
    assert session.history == [S.IDLE]
    assert fake_llm.calls == []


def test_missing_key_stays_idle(fake_llm, tmp_path):
    settings = Settings(output_dir=tmp_path)
    generator = WebsiteGenerator(settings, client=CompletionClient(settings, llm=fake_llm))
    session = GenerationSession(generator, preview_slot=PreviewSlot(tmp_path))

    outcome = session.run("a counter button")

    assert outcome.error_kind == "missing_credential"
    assert outcome.message == "API key is missing."
    assert session.history == [S.IDLE]
    assert fake_llm.calls == []


def test_request_failure_returns_to_idle(session, fake_llm):
    fake_llm.error = connection_error()

    outcome = session.run("a counter button")

    assert not outcome.ok
    assert outcome.error_kind == "transport_failure"
    assert session.history == [S.IDLE, S.REQUESTING, S.REQUEST_FAILED, S.IDLE]
    assert session.bundle is None
    assert session.preview_handle is None


def test_invalid_format_returns_to_idle(session, fake_llm):
    fake_llm.content = "---HTML---\n<p>x</p>\n---CSS---\n\n---JS---\nrun();"

    outcome = session.run("a counter button")

    assert outcome.error_kind == "invalid_bundle"
    assert outcome.message == "AI returned invalid format. Please regenerate."
    assert session.history == [S.IDLE, S.REQUESTING, S.EXTRACTED_INVALID, S.IDLE]


def test_failure_keeps_previous_result(session, fake_llm):
    first = session.run("a counter button")
    handle = session.preview_handle

    fake_llm.error = connection_error()
    outcome = session.run("a todo list")

    assert not outcome.ok
    assert outcome.bundle is first.bundle
    assert outcome.preview is first.preview
    assert session.bundle is first.bundle
    assert session.preview_handle == handle
    assert handle.path.exists()
    assert session.history[-5:] == [S.PREVIEWING, S.IDLE, S.REQUESTING, S.REQUEST_FAILED, S.IDLE]


def test_new_result_replaces_preview_file(session):
    session.run("a counter button")
    first_handle = session.preview_handle

    session.run("a counter button again")

    assert not first_handle.path.exists()
    assert session.preview_handle.path.exists()
    assert session.history[-5:] == [S.PREVIEWING, S.IDLE, S.REQUESTING, S.EXTRACTED_VALID, S.PREVIEWING]


def test_busy_session_rejects_second_run(session, fake_llm):
    session.state = S.REQUESTING

    outcome = session.run("a counter button")

    assert not outcome.ok
    assert outcome.error_kind == "busy"
    assert outcome.message == BUSY_MESSAGE
    assert fake_llm.calls == []


def test_unexpected_error_leaves_session_usable(session, fake_llm):
    fake_llm.error = RuntimeError("boom")

    with pytest.raises(RuntimeError):
        session.run("a counter button")
    assert session.state == S.IDLE
    assert not session.busy

    fake_llm.error = None
    assert session.run("a counter button").ok


def test_close_releases_preview(session):
    session.run("a counter button")
    handle = session.preview_handle

    session.close()

    assert not handle.path.exists()
    assert session.state == S.IDLE


def test_counter_button_preview_document(session):
    """A counter-button reply ends up as one safe, self-contained preview."""
    outcome = session.run("a counter button")
    html = session.preview.html
    soup = BeautifulSoup(html, "html.parser")

    assert outcome.ok
    assert all(segment for segment in (outcome.bundle.markup, outcome.bundle.style, outcome.bundle.behavior))

    assert "cdn.example.com/confetti.js" not in html
    assert soup.find("script", src=True) is None

    style = soup.head.find_all(recursive=False)[-1]
    assert style.name == "style"
    assert "#counter" in style.string

    guard = soup.body.find_all(recursive=False)[-1]
    assert guard.name == "script"
    code = guard.string
    assert code.index("try {") < code.index('document.getElementById("counter")') < code.index("} catch (e) {")
    assert "Runtime Error: " in code
