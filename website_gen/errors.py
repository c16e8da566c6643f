"""
Error taxonomy for the generation pipeline.

Every failure a user can hit while generating a site is a GenerationError.
Components raise them; the session and the CLI catch them at the edge and
show ``user_message``.
"""

from typing import Iterable, List, Optional


class GenerationError(Exception):
    """Base class for failures of a single generation."""

    kind = "generation_error"
    user_message = "AI generation failed. Check the logs for details."

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.user_message
        super().__init__(self.detail)


class MissingInput(GenerationError):
    """The user description is empty."""

    kind = "missing_input"
    user_message = "Please describe the website you want to generate."


class MissingCredential(GenerationError):
    """No API key is configured for the selected provider."""

    kind = "missing_credential"
    user_message = "API key is missing."


class TransportFailure(GenerationError):
    """Network-level error or non-success status from the completion endpoint."""

    kind = "transport_failure"


class MalformedResponse(GenerationError):
    """The endpoint answered, but not with the expected message structure."""

    kind = "malformed_response"


class InvalidBundle(GenerationError):
    """One or more segments came back empty after extraction and sanitization."""

    kind = "invalid_bundle"
    user_message = "AI returned invalid format. Please regenerate."

    def __init__(self, missing: Iterable):
        # SegmentType members compare equal to their plain names
        self.missing: List = list(missing)
        names = ", ".join(str(getattr(name, "value", name)) for name in self.missing)
        super().__init__(f"Empty segments in model output: {names}")
