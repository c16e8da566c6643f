"""
Generation pipeline: description in, validated code bundle out.
"""

from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, Tuple

from website_gen.config import Settings
from website_gen.errors import InvalidBundle, MissingCredential
from website_gen.io.exporter import SegmentExporter
from website_gen.models import (
    CodeBundle,
    GenerationRequest,
    RawCompletion,
    SegmentType,
)
from website_gen.pipeline.client import CompletionClient
from website_gen.pipeline.extraction import ResponseParser
from website_gen.pipeline.prompt import build_prompt
from website_gen.pipeline.sanitize import clean_ai_text, sanitize_segments
from website_gen.utils.llm_logger import get_logger


def new_run_id() -> str:
    """Identifier for one generation, used for log and output folders."""
    return f"run_{datetime.now().strftime('%Y%m%d_%H%M%S_%f')}"


class WebsiteGenerator:
    """Generates HTML, CSS and JavaScript from a website description."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[CompletionClient] = None,
        parser: Optional[ResponseParser] = None,
    ):
        """
        Initialize the generator.

        Args:
            settings: Endpoint configuration (default: read from environment).
            client: Completion client (default: built from settings).
            parser: Response parser (default: standard section markers).
        """
        self.settings = settings or Settings.from_env()
        self.client = client or CompletionClient(self.settings)
        self.parser = parser or ResponseParser()
        self.logger = get_logger()

    def check_credential(self):
        """Raise MissingCredential when no API key is configured."""
        if not self.settings.api_key:
            raise MissingCredential()

    def request_completion(
        self,
        request: GenerationRequest,
        run_id: Optional[str] = None
    ) -> RawCompletion:
        """
        Send the filled prompt to the model.

        The credential is checked first so that no request goes out without one.
        """
        self.check_credential()

        prompt = build_prompt(request.description)
        return self.client.complete(prompt, run_id=run_id)

    def parse_completion(
        self,
        raw: RawCompletion,
        request: GenerationRequest,
        run_id: Optional[str] = None
    ) -> CodeBundle:
        """
        Turn a raw completion into a validated bundle.

        Raises:
            InvalidBundle: The model deviated from the section format.
        """
        cleaned = clean_ai_text(raw.content)
        segments = sanitize_segments(self.parser.extract(cleaned))

        try:
            return CodeBundle.from_segments(
                segments,
                description=request.description,
                model_name=raw.model_name,
                generation_metadata={
                    "provider": self.settings.provider,
                    "temperature": self.settings.temperature,
                    "max_tokens": self.settings.max_tokens,
                    "prompt_tokens": raw.prompt_tokens,
                    "completion_tokens": raw.completion_tokens,
                    "run_id": run_id,
                },
            )
        except InvalidBundle as e:
            self.logger.log_failure(
                "extractor", e, run_id=run_id, detail=raw.content
            )
            raise

    def generate(self, description: str, run_id: Optional[str] = None) -> CodeBundle:
        """
        Generate a site from a description.

        Args:
            description: Free-text website description.
            run_id: Optional identifier for logs (generated if omitted).

        Returns:
            CodeBundle with non-empty markup, style and behavior.

        Raises:
            MissingInput, MissingCredential, TransportFailure,
            MalformedResponse, InvalidBundle.
        """
        request = GenerationRequest.from_text(description)
        run_id = run_id or new_run_id()

        raw = self.request_completion(request, run_id=run_id)
        return self.parse_completion(raw, request, run_id=run_id)

    def generate_and_save(
        self,
        description: str,
        output_dir: Optional[Path] = None,
    ) -> Tuple[CodeBundle, Dict[SegmentType, Path]]:
        """
        Generate a site and write its three files to disk.

        Args:
            description: Free-text website description.
            output_dir: Output directory root (default: settings.output_dir).

        Returns:
            Tuple of (CodeBundle, paths by segment type).
        """
        run_id = new_run_id()
        bundle = self.generate(description, run_id=run_id)

        exporter = SegmentExporter(Path(output_dir or self.settings.output_dir) / run_id)
        paths = exporter.export_bundle(bundle)
        exporter.save_metadata(bundle)

        return bundle, paths
