"""
Single request/response exchange with a hosted chat-completion endpoint.
"""

from typing import Any, Optional

import anthropic
import httpx
import openai
from langchain_anthropic import ChatAnthropic
from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI

from website_gen.config import Settings
from website_gen.errors import MalformedResponse, MissingCredential, TransportFailure
from website_gen.models import RawCompletion
from website_gen.utils.llm_logger import LoggedLLM, get_logger


TRANSPORT_ERRORS = (openai.APIError, anthropic.APIError, httpx.HTTPError)
DECODE_ERRORS = (KeyError, IndexError, TypeError, ValueError)


def create_chat_model(settings: Settings) -> Any:
    """
    Build the LangChain chat model for the configured provider.

    Groq exposes an OpenAI-compatible API, so it goes through ChatOpenAI
    with a different base URL. Retries are disabled: one request per
    generation.
    """
    if not settings.api_key:
        raise MissingCredential()

    if settings.provider in ("groq", "openai"):
        return ChatOpenAI(
            model=settings.model_name,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            api_key=settings.api_key,
            base_url=settings.base_url,
            max_retries=0,
        )
    elif settings.provider == "anthropic":
        return ChatAnthropic(
            model=settings.model_name,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            api_key=settings.api_key,
            max_retries=0,
        )
    else:
        raise ValueError(f"Unsupported provider: {settings.provider}")


def _message_text(content: Any) -> Optional[str]:
    """Text of a chat message; content blocks are joined, anything else is rejected."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return None


class CompletionClient:
    """Sends one prompt and returns the model's raw text."""

    def __init__(self, settings: Settings, llm: Optional[Any] = None):
        """
        Initialize the client.

        Args:
            settings: Provider, model and sampling configuration.
            llm: Chat model to use instead of building one from settings.
        """
        self.settings = settings
        self._llm = llm
        self.logger = get_logger()

    @property
    def llm(self) -> Any:
        # Built lazily so a missing key is only reported when a call is made
        if self._llm is None:
            self._llm = create_chat_model(self.settings)
        return self._llm

    def complete(self, prompt: str, run_id: Optional[str] = None) -> RawCompletion:
        """
        Send the prompt as a single user message.

        Args:
            prompt: Filled instruction template.
            run_id: Identifier grouping log entries of this generation.

        Returns:
            RawCompletion with the reply text and token counts.

        Raises:
            MissingCredential: No API key configured.
            TransportFailure: Network error or non-success status.
            MalformedResponse: The reply has no usable text.
        """
        logged_llm = LoggedLLM(
            llm_instance=self.llm,
            component="generator",
            provider=self.settings.provider,
            model=self.settings.model_name,
            run_id=run_id,
        )
        messages = [HumanMessage(content=prompt)]

        try:
            response = logged_llm.invoke(messages)
        except TRANSPORT_ERRORS as e:
            failure = TransportFailure(f"Completion request failed: {e}")
            self.logger.log_failure("generator", e, kind=failure.kind, run_id=run_id)
            raise failure from e
        except DECODE_ERRORS as e:
            failure = MalformedResponse(f"Could not decode completion response: {e}")
            self.logger.log_failure("generator", e, kind=failure.kind, run_id=run_id)
            raise failure from e

        content = _message_text(getattr(response, "content", None))
        if not content or not content.strip():
            failure = MalformedResponse("Completion response carried no message text")
            self.logger.log_failure(
                "generator", failure, run_id=run_id, detail=repr(response)
            )
            raise failure

        usage = getattr(response, "usage_metadata", None) or {}
        return RawCompletion(
            content=content,
            model_name=self.settings.model_name,
            prompt_tokens=usage.get("input_tokens"),
            completion_tokens=usage.get("output_tokens"),
        )
