"""
Shared fixtures: a fake chat model and canned model replies.
"""

import pytest
from langchain_core.messages import AIMessage

from website_gen.config import Settings
from website_gen.utils.llm_logger import get_logger


WELL_FORMED_RESPONSE = """Here is your website.

---HTML---
<!DOCTYPE html>
<html>
<head>
<title>Counter</title>
<script src="https://cdn.example.com/confetti.js"></script>
</head>
<body>
<button id="counter">0</button>
</body>
</html>

---CSS---
#counter {
  font-size: 2rem;
}

---JS---
const button = document.getElementById("counter");
button.addEventListener("click", () => {
  button.textContent = Number(button.textContent) + 1;
});
"""


class FakeChatModel:
    """Stands in for ChatOpenAI; records every invoke() call."""

    def __init__(self, content=WELL_FORMED_RESPONSE, error=None, response=None):
        self.content = content
        self.error = error
        self.response = response
        self.calls = []
        self.temperature = 0.4

    def invoke(self, messages, **kwargs):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        if self.response is not None:
            return self.response
        return AIMessage(
            content=self.content,
            usage_metadata={"input_tokens": 120, "output_tokens": 80, "total_tokens": 200},
        )


@pytest.fixture
def well_formed_response():
    return WELL_FORMED_RESPONSE


@pytest.fixture
def fake_llm():
    return FakeChatModel()


@pytest.fixture
def make_llm():
    """Factory for fake chat models with a custom reply or error."""
    return FakeChatModel


@pytest.fixture
def settings(tmp_path):
    return Settings(api_key="test-key", output_dir=tmp_path / "outputs")


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep the shared LLM logger silent unless a test turns it on."""
    logger = get_logger()
    logger.configure(level="NONE", log_to_file=False)
    yield logger
    logger.configure(level="NONE", log_to_file=False)
