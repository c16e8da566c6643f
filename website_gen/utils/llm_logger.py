"""
LLM debug logger for completion calls and generation failures.

Levels (LLM_DEBUG_LEVEL):
- NONE: failures only
- INFO: one line per call or failure, with latency and token count
- DEBUG: adds message previews and failure detail
- TRACE: adds the full prompt and reply

Console lines are for people; the JSON Lines file under
``<log_dir>/<run_id>/logs/llm_calls.jsonl`` is for tooling.
"""

import json
import os
import sys
import time
import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv


PREVIEW_CHARS = 200
TRACE_REPLY_CHARS = 1000


class LogLevel(Enum):
    """Logging levels for LLM debug output."""

    NONE = 0
    INFO = 1
    DEBUG = 2
    TRACE = 3


def _now() -> str:
    return datetime.now().isoformat()


def _shorten(text: str, limit: int = PREVIEW_CHARS) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}... [truncated]"


def _text_of(content: Any) -> str:
    """Printable text for message content (plain string or content blocks)."""
    if isinstance(content, str):
        return content
    if isinstance(content, (list, dict)):
        return json.dumps(content, indent=2, ensure_ascii=False)
    return str(content)


def _describe_message(message: Any) -> Dict[str, str]:
    return {
        "type": type(message).__name__,
        "content": _text_of(getattr(message, "content", message)),
    }


def _usage_of(response: Any) -> Dict[str, Optional[int]]:
    """Token counts of a chat model reply, empty when the provider sent none."""
    usage = getattr(response, "usage_metadata", None)
    if usage:
        prompt, completion, total = "input_tokens", "output_tokens", "total_tokens"
    else:
        metadata = getattr(response, "response_metadata", None) or {}
        usage = metadata.get("token_usage") or metadata.get("usage") or {}
        prompt, completion, total = "prompt_tokens", "completion_tokens", "total_tokens"
    if not usage:
        return {}
    return {
        "prompt_tokens": usage.get(prompt),
        "completion_tokens": usage.get(completion),
        "total_tokens": usage.get(total),
    }


class LLMLogger:
    """Process-wide logger for LLM calls; use get_logger()."""

    _instance: Optional["LLMLogger"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        load_dotenv()
        self.configure(
            level=os.getenv("LLM_DEBUG_LEVEL", "NONE"),
            log_to_file=os.getenv("LLM_LOG_TO_FILE", "true").lower() == "true",
            log_dir=os.getenv("LLM_LOG_DIR", "outputs"),
        )
        self._initialized = True

    def configure(
        self,
        level: str = "NONE",
        log_to_file: bool = True,
        log_dir: Any = "outputs",
    ):
        """
        Change level and file output, e.g. from CLI flags.

        Unknown level names fall back to NONE.
        """
        self.level = LogLevel.__members__.get(str(level).upper(), LogLevel.NONE)
        self.log_to_file = log_to_file
        self.log_dir = Path(log_dir)

    def enabled(self, level: LogLevel = LogLevel.INFO) -> bool:
        """True when messages of ``level`` are emitted."""
        return self.level.value >= level.value

    def _entry(self, event: str, component: str, run_id: Optional[str], **fields) -> Dict[str, Any]:
        entry = {
            "timestamp": _now(),
            "level": self.level.name,
            "event": event,
            "component": component,
            "run_id": run_id,
        }
        entry.update(fields)
        return entry

    def _append(self, run_id: Optional[str], entry: Dict[str, Any]):
        """Append one JSON line to the run's log file."""
        if not (self.log_to_file and run_id):
            return

        log_file = self.log_dir / run_id / "logs" / "llm_calls.jsonl"
        log_file.parent.mkdir(parents=True, exist_ok=True)
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, ensure_ascii=False, default=str) + "\n")

    def _print_messages(self, messages: List[Any], full: bool):
        print(f"  Messages: {len(messages)}")
        for number, message in enumerate(messages, start=1):
            described = _describe_message(message)
            if full:
                print(f"    [{number}] {described['type']}:")
                for line in described["content"].splitlines():
                    print(f"      {line}")
            else:
                print(f"    {number}. [{described['type']}] {_shorten(described['content'], 150)}")

    def log_invocation(
        self,
        component: str,
        provider: str,
        model: str,
        run_id: Optional[str] = None,
    ) -> str:
        """
        Announce an LLM call.

        Returns:
            Invocation ID tying request and response together, or "" when
            logging is off.
        """
        if not self.enabled():
            return ""

        line = f"[{_now()}] 🔵 LLM Call: [{component}] {provider}/{model}"
        if run_id:
            line += f" | run_id: {run_id}"
        print(line)
        return uuid.uuid4().hex

    def log_request(
        self,
        invocation_id: str,
        component: str,
        provider: str,
        model: str,
        messages: List[Any],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        run_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """Record the outgoing messages (DEBUG and above)."""
        if not self.enabled(LogLevel.DEBUG):
            return

        full = self.level == LogLevel.TRACE
        self._print_messages(messages, full)
        self._append(run_id, self._entry(
            "request", component, run_id,
            invocation_id=invocation_id,
            provider=provider,
            model=model,
            request={
                "messages": [_describe_message(m) for m in messages] if full else [],
                "message_count": len(messages),
                "temperature": temperature,
                "max_tokens": max_tokens,
            },
            metadata=metadata or {},
        ))

    def log_response(
        self,
        invocation_id: str,
        component: str,
        provider: str,
        model: str,
        response: Any,
        start_time: float,
        end_time: float,
        run_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """Record a reply with its latency and token usage."""
        if not self.enabled():
            return

        latency_ms = (end_time - start_time) * 1000
        content = _text_of(getattr(response, "content", response))
        usage = _usage_of(response)

        summary = f"[{component}] {provider}/{model} | {latency_ms:.1f}ms"
        if usage.get("total_tokens") is not None:
            summary += f" | {usage['total_tokens']} tokens"
        print(f"[{_now()}] ✅ LLM Response: {summary}")

        if self.level == LogLevel.DEBUG:
            print(f"  Response: {_shorten(content)}")
        elif self.level == LogLevel.TRACE:
            print("  RESPONSE:")
            shown = content[:TRACE_REPLY_CHARS]
            for line in shown.splitlines():
                print(f"    {line}")
            if len(content) > TRACE_REPLY_CHARS:
                print(f"    ... [{len(content) - TRACE_REPLY_CHARS} more chars]")

        self._append(run_id, self._entry(
            "response", component, run_id,
            invocation_id=invocation_id,
            provider=provider,
            model=model,
            response={
                "content": content if self.level == LogLevel.TRACE else None,
                "content_preview": _shorten(content) if self.enabled(LogLevel.DEBUG) else None,
                "content_length": len(content),
            },
            timing={
                "latency_ms": latency_ms,
                "start_time": datetime.fromtimestamp(start_time).isoformat(),
                "end_time": datetime.fromtimestamp(end_time).isoformat(),
            },
            usage=usage or None,
            metadata=metadata or {},
        ))

    def log_failure(
        self,
        component: str,
        error: BaseException,
        kind: Optional[str] = None,
        run_id: Optional[str] = None,
        detail: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """
        Record a failed call or an unusable reply.

        The user only sees a generic message; the underlying error goes here.
        Failures are reported at every level, NONE included. The level only
        decides whether ``detail`` (e.g. the raw reply) is kept as well.
        """
        print(
            f"[{_now()}] ❌ LLM Error: [{component}] {type(error).__name__}: {error}",
            file=sys.stderr,
        )
        show_detail = bool(detail) and self.enabled(LogLevel.DEBUG)
        if show_detail:
            print(f"  Detail: {_shorten(detail, 500)}", file=sys.stderr)

        self._append(run_id, self._entry(
            "failure", component, run_id,
            error={
                "kind": kind or getattr(error, "kind", type(error).__name__),
                "type": type(error).__name__,
                "message": str(error),
                "detail": detail if show_detail else None,
            },
            metadata=metadata or {},
        ))


def get_logger() -> LLMLogger:
    """Get the singleton logger instance."""
    return LLMLogger()


class LoggedLLM:
    """
    Chat model wrapper that logs every invoke() call.

    Other attributes are forwarded to the wrapped model.
    """

    def __init__(
        self,
        llm_instance: Any,
        component: str,
        provider: str,
        model: str,
        run_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """
        Args:
            llm_instance: ChatOpenAI, ChatAnthropic or anything with invoke()
            component: Pipeline step making the call (e.g. "generator")
            provider: "groq", "openai" or "anthropic"
            model: Model name
            run_id: Groups the log entries of one generation
            metadata: Extra fields copied into every log entry
        """
        self.llm = llm_instance
        self.component = component
        self.provider = provider
        self.model = model
        self.run_id = run_id
        self.metadata = metadata or {}
        self.logger = get_logger()

    def __getattr__(self, name: str):
        return getattr(self.llm, name)

    def invoke(self, messages: List[Any], **kwargs) -> Any:
        invocation_id = self.logger.log_invocation(
            self.component, self.provider, self.model, run_id=self.run_id
        )
        if not invocation_id:
            return self.llm.invoke(messages, **kwargs)

        labels = dict(
            invocation_id=invocation_id,
            component=self.component,
            provider=self.provider,
            model=self.model,
            run_id=self.run_id,
            metadata=self.metadata,
        )
        self.logger.log_request(
            messages=messages,
            temperature=getattr(self.llm, "temperature", None),
            max_tokens=getattr(self.llm, "max_tokens", None),
            **labels,
        )

        # Errors are reported by the caller through log_failure
        start_time = time.time()
        response = self.llm.invoke(messages, **kwargs)
        end_time = time.time()

        self.logger.log_response(
            response=response, start_time=start_time, end_time=end_time, **labels
        )
        return response
