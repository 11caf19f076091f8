"""
View State Controller
Top-level state machine of the client.

    INTAKE --submit (non-empty symptom)--> GUIDE     (guidance fetched first)
    INTAKE --submit (empty symptom)------> INTAKE    (user prompted)
    GUIDE  --new symptom-----------------> INTAKE    (session reset, location kept)
    GUIDE  --close-----------------------> INTAKE    (optional embedding hook)

Guidance success and failure both lead to GUIDE; they differ only in which
content set is shown.
"""

import logging
from typing import Callable, Optional

from .errors import EmptySymptomError
from .expansion import DetailExpansionController
from .guidance import GuidanceFetcher, select_guidance_content
from .hospitals import HospitalFetcher, HospitalListView, hospital_list_view
from .models import QUICK_SYMPTOMS, GuidanceContent
from .state import SessionState, ViewState

logger = logging.getLogger(__name__)

EMPTY_SYMPTOM_PROMPT = "Please enter a symptom."


class ViewStateController:
    """Drives SessionState through the transitions above."""

    def __init__(
        self,
        state: SessionState,
        guidance_fetcher: GuidanceFetcher,
        hospital_fetcher: HospitalFetcher,
        on_close: Optional[Callable[[], None]] = None,
    ):
        self.state = state
        self.guidance_fetcher = guidance_fetcher
        self.hospital_fetcher = hospital_fetcher
        self.on_close = on_close

    # -------------------------------------------------------------------------
    # Intake
    # -------------------------------------------------------------------------

    @property
    def effective_symptom(self) -> str:
        # Free text wins whenever it has been filled in
        return self.state.symptom_text or self.state.selected_quick_symptom

    def set_free_text(self, text: str) -> None:
        self.state.symptom_text = text or ""
        if self.state.symptom_text != self.state.selected_quick_symptom:
            self.state.selected_quick_symptom = ""
        self.state.prompt_message = None

    def select_quick_symptom(self, phrase: str) -> None:
        if phrase not in QUICK_SYMPTOMS:
            logger.warning(f"Unknown quick symptom '{phrase}' selected")
        self.state.selected_quick_symptom = phrase
        self.state.symptom_text = phrase
        self.state.prompt_message = None

    def submit(self) -> bool:
        """
        Open the guide for the effective symptom.

        Returns:
            True if the view moved to GUIDE
        """
        state = self.state
        if state.view != ViewState.INTAKE or state.is_loading_guidance:
            return False

        symptom = self.effective_symptom
        try:
            self.guidance_fetcher.request_guidance(state, symptom)
        except EmptySymptomError as e:
            logger.info("Submit rejected: empty symptom")
            state.prompt_message = e.message or EMPTY_SYMPTOM_PROMPT
            return False

        state.prompt_message = None
        state.submitted_symptom = symptom.strip()
        state.guidance_content = select_guidance_content(state.guidance)
        state.view = ViewState.GUIDE
        logger.info(
            f"Guide opened for '{state.submitted_symptom}' "
            f"(fallback={state.guidance_content.is_default}, error={state.guidance_error is not None})"
        )
        return True

    # -------------------------------------------------------------------------
    # Guide
    # -------------------------------------------------------------------------

    def guidance_content(self) -> GuidanceContent:
        if self.state.guidance_content is None:
            self.state.guidance_content = select_guidance_content(self.state.guidance)
        return self.state.guidance_content

    def load_hospitals(self) -> bool:
        """Trigger the recommendation fetch if the guide is open and inputs changed."""
        if self.state.view != ViewState.GUIDE:
            return False
        return self.hospital_fetcher.ensure_recommendations(self.state)

    def hospital_view(self) -> HospitalListView:
        return hospital_list_view(self.state)

    def toggle_hospital(self, rank: int) -> Optional[int]:
        return self.state.expansion.toggle(rank)

    def new_symptom(self) -> None:
        """Return to intake with a clean slate; the location is kept."""
        state = self.state
        state.view = ViewState.INTAKE
        state.symptom_text = ""
        state.selected_quick_symptom = ""
        state.submitted_symptom = ""
        state.prompt_message = None

        state.guidance = None
        state.guidance_content = None
        state.guidance_error = None

        state.hospital_result = None
        state.hospital_error = None
        state.hospital_request_key = None
        state.expansion = DetailExpansionController()
        logger.info("Session reset for a new symptom")

    def close(self) -> None:
        self.state.view = ViewState.INTAKE
        if self.on_close is not None:
            self.on_close()
