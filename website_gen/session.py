"""
One user's generation session: current bundle, preview, and flow state.

The front-ends (CLI and Streamlit) hold a GenerationSession instead of
module-level references to what is on screen. A failed generation never
touches the bundle and preview that are already displayed.
"""

from typing import List, Optional

from website_gen.errors import GenerationError
from website_gen.models import (
    CodeBundle,
    GenerationOutcome,
    GenerationRequest,
    GenerationState,
    PreviewDocument,
    PreviewHandle,
)
from website_gen.pipeline.generation import WebsiteGenerator, new_run_id
from website_gen.rendering.preview import PreviewComposer, PreviewSlot


BUSY_MESSAGE = "A generation is already in progress."


class GenerationSession:
    """Runs generations one at a time and keeps the latest good result."""

    def __init__(
        self,
        generator: WebsiteGenerator,
        composer: Optional[PreviewComposer] = None,
        preview_slot: Optional[PreviewSlot] = None,
    ):
        self.generator = generator
        self.composer = composer or PreviewComposer()
        self.preview_slot = preview_slot or PreviewSlot()

        self.state = GenerationState.IDLE
        self.history: List[GenerationState] = [GenerationState.IDLE]
        self.bundle: Optional[CodeBundle] = None
        self.preview: Optional[PreviewDocument] = None

    @property
    def busy(self) -> bool:
        """True while a request is outstanding; front-ends disable their trigger."""
        return self.state == GenerationState.REQUESTING

    @property
    def preview_handle(self) -> Optional[PreviewHandle]:
        return self.preview_slot.current

    def _enter(self, state: GenerationState):
        self.state = state
        self.history.append(state)

    def _fail(self, error: GenerationError, state: Optional[GenerationState] = None) -> GenerationOutcome:
        if state is not None:
            self._enter(state)
        if self.state != GenerationState.IDLE:
            self._enter(GenerationState.IDLE)
        return GenerationOutcome(
            ok=False,
            state=GenerationState.IDLE,
            message=error.user_message,
            error_kind=error.kind,
            bundle=self.bundle,
            preview=self.preview,
        )

    def run(self, description: Optional[str]) -> GenerationOutcome:
        """
        Generate a site and, on success, replace the displayed bundle and preview.

        Args:
            description: Website description as typed by the user.

        Returns:
            GenerationOutcome with a user-facing message. On failure the
            outcome carries the previous bundle and preview unchanged.
        """
        if self.busy:
            return GenerationOutcome(
                ok=False,
                state=self.state,
                message=BUSY_MESSAGE,
                error_kind="busy",
                bundle=self.bundle,
                preview=self.preview,
            )

        if self.state != GenerationState.IDLE:
            self._enter(GenerationState.IDLE)

        # Input and credential problems are reported before any request
        try:
            request = GenerationRequest.from_text(description)
            self.generator.check_credential()
        except GenerationError as e:
            return self._fail(e)

        run_id = new_run_id()
        self._enter(GenerationState.REQUESTING)
        try:
            raw = self.generator.request_completion(request, run_id=run_id)
        except GenerationError as e:
            return self._fail(e, GenerationState.REQUEST_FAILED)
        except BaseException:
            self._enter(GenerationState.IDLE)
            raise

        try:
            bundle = self.generator.parse_completion(raw, request, run_id=run_id)
        except GenerationError as e:
            return self._fail(e, GenerationState.EXTRACTED_INVALID)

        self._enter(GenerationState.EXTRACTED_VALID)
        preview = self.composer.compose(bundle)
        self.preview_slot.replace(preview)
        self.bundle = bundle
        self.preview = preview
        self._enter(GenerationState.PREVIEWING)

        return GenerationOutcome(
            ok=True,
            state=self.state,
            message="Website generated successfully!",
            bundle=bundle,
            preview=preview,
        )

    def close(self):
        """Release the preview file and return to idle."""
        self.preview_slot.release()
        if self.state != GenerationState.IDLE:
            self._enter(GenerationState.IDLE)
