"""
Data models and schemas for the website generation pipeline.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional, Dict, Any, List

from pydantic import BaseModel, Field

from website_gen.errors import InvalidBundle, MissingInput


class SegmentType(str, Enum):
    """The three code sections of a generated site."""
    MARKUP = "html"
    STYLE = "css"
    BEHAVIOR = "js"

    @property
    def default_filename(self) -> str:
        """Conventional filename used when exporting this segment."""
        return {
            SegmentType.MARKUP: "index.html",
            SegmentType.STYLE: "style.css",
            SegmentType.BEHAVIOR: "script.js",
        }[self]


class GenerationState(str, Enum):
    """States of one generation flow."""
    IDLE = "idle"
    REQUESTING = "requesting"
    EXTRACTED_VALID = "extracted_valid"
    EXTRACTED_INVALID = "extracted_invalid"
    REQUEST_FAILED = "request_failed"
    PREVIEWING = "previewing"


class GenerationRequest(BaseModel):
    """A single free-text website description."""
    description: str = Field(..., min_length=1)

    @classmethod
    def from_text(cls, text: Optional[str]) -> "GenerationRequest":
        """Trim user input and reject it when nothing is left."""
        description = (text or "").strip()
        if not description:
            raise MissingInput()
        return cls(description=description)


class RawCompletion(BaseModel):
    """Unstructured text returned by the model for one request."""
    content: str
    model_name: str
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    received_at: datetime = Field(default_factory=datetime.now)


class ExtractedSegments(BaseModel):
    """Segments as found in the raw text. Empty means "not found"."""
    markup: str = ""
    style: str = ""
    behavior: str = ""

    def get(self, segment: SegmentType) -> str:
        """Get text for a specific segment type."""
        if segment == SegmentType.MARKUP:
            return self.markup
        elif segment == SegmentType.STYLE:
            return self.style
        elif segment == SegmentType.BEHAVIOR:
            return self.behavior
        else:
            raise ValueError(f"Unknown segment type: {segment}")

    def missing(self) -> List[SegmentType]:
        """Segment types whose text is empty."""
        return [segment for segment in SegmentType if not self.get(segment)]


class CodeBundle(BaseModel):
    """Validated markup, style and behavior from one generation."""
    markup: str = Field(..., min_length=1)
    style: str = Field(..., min_length=1)
    behavior: str = Field(..., min_length=1)
    description: str = ""
    model_name: str = ""
    generated_at: datetime = Field(default_factory=datetime.now)
    generation_metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_segments(cls, segments: ExtractedSegments, **kwargs) -> "CodeBundle":
        """
        Build a bundle, rejecting it when any segment is empty.

        Raises:
            InvalidBundle: One or more segments are empty.
        """
        missing = segments.missing()
        if missing:
            raise InvalidBundle(missing)

        return cls(
            markup=segments.markup,
            style=segments.style,
            behavior=segments.behavior,
            **kwargs
        )

    def segment(self, segment: SegmentType) -> str:
        """Get text for a specific segment type."""
        if segment == SegmentType.MARKUP:
            return self.markup
        elif segment == SegmentType.STYLE:
            return self.style
        elif segment == SegmentType.BEHAVIOR:
            return self.behavior
        else:
            raise ValueError(f"Unknown segment type: {segment}")


class PreviewDocument(BaseModel):
    """A composed, self-contained document for the preview surface."""
    html: str
    created_at: datetime = Field(default_factory=datetime.now)


class PreviewHandle(BaseModel):
    """Ephemeral on-disk copy of a preview document."""
    path: Path
    uri: str

    class Config:
        arbitrary_types_allowed = True


class GenerationOutcome(BaseModel):
    """Result of one session run, as shown to the user."""
    ok: bool
    state: GenerationState
    message: str = ""
    error_kind: Optional[str] = None
    bundle: Optional[CodeBundle] = None
    preview: Optional[PreviewDocument] = None
