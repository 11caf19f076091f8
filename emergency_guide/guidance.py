"""
Guidance Fetcher
Requests emergency guidance for a symptom and records the outcome on the
session. A failed request is never fatal: the error becomes a warning banner
and the guide screen falls back to the generic procedure.
"""

import logging
from typing import Optional

from .errors import ApiError, EmptySymptomError
from .models import DefaultGuidance, EmergencyGuidance, FetchedGuidance, GuidanceContent
from .state import SessionState

logger = logging.getLogger(__name__)

DEFAULT_GUIDANCE_ERROR = "Failed to load the emergency guide."


def select_guidance_content(guidance: Optional[EmergencyGuidance]) -> GuidanceContent:
    """
    Pick exactly one content set for the guide screen.

    Examples:
        >>> select_guidance_content(None).is_default
        True
        >>> select_guidance_content(EmergencyGuidance(immediate_actions=["Call"])).is_default
        False
    """
    if guidance is None or guidance.is_empty:
        return DefaultGuidance()
    return FetchedGuidance(guidance)


class GuidanceFetcher:
    """Owns the loading/error lifecycle of the guidance request."""

    def __init__(self, client):
        self.client = client

    def request_guidance(self, state: SessionState, symptom_text: str) -> Optional[EmergencyGuidance]:
        """
        Fetch guidance for `symptom_text` and store the outcome on `state`.

        Args:
            state: Session record to update
            symptom_text: Effective symptom

        Returns:
            The guidance, or None if absent, failed or superseded

        Raises:
            EmptySymptomError: symptom is empty after trimming (no request made)
        """
        symptom = (symptom_text or "").strip()
        if not symptom:
            raise EmptySymptomError()

        state.guidance_generation += 1
        generation = state.guidance_generation
        state.is_loading_guidance = True
        state.guidance_error = None

        guidance = None
        error = None
        try:
            guidance = self.client.get_emergency_guidance(symptom)
        except ApiError as e:
            logger.error(f"Emergency guidance request failed for '{symptom}': {e.message}")
            error = e.message or DEFAULT_GUIDANCE_ERROR
        except Exception as e:
            logger.exception(f"Unexpected error while loading emergency guidance: {e}")
            error = str(e) or DEFAULT_GUIDANCE_ERROR

        if generation != state.guidance_generation:
            logger.info(f"Discarding stale guidance response (generation {generation})")
            return None

        state.is_loading_guidance = False
        state.guidance = guidance
        state.guidance_error = error
        if error is None:
            logger.info(f"Emergency guidance loaded for '{symptom}' (empty={guidance is None})")
        return guidance
