"""
Hospital Fetcher
Requests ranked hospital recommendations once both a symptom and a location
are known, and derives what the hospital section of the guide should show.

Ranking is done by the recommendation service; results are kept in the
order returned and replaced wholesale on every fetch.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import ApiError
from .models import HospitalRecommendationResult, Location, RecommendedHospital
from .state import SessionState

logger = logging.getLogger(__name__)

DEFAULT_HOSPITAL_ERROR = "Failed to load hospital recommendations."
UNAVAILABLE_MESSAGE = "No recommendation available."
EMPTY_MESSAGE = "No hospitals to recommend."


class HospitalFetcher:
    """Owns the loading/error lifecycle of the recommendation request."""

    def __init__(self, client):
        self.client = client

    def ensure_recommendations(self, state: SessionState) -> bool:
        """
        Fetch recommendations if the inputs are present and changed.

        Returns:
            True if a request was made
        """
        symptom = state.submitted_symptom.strip()
        location = state.location
        if not symptom or location is None:
            return False

        key = (symptom, location.latitude, location.longitude)
        if key == state.hospital_request_key:
            return False

        state.hospital_request_key = key
        self.request_hospitals(state, symptom, location)
        return True

    def request_hospitals(
        self,
        state: SessionState,
        symptom: str,
        location: Optional[Location],
    ) -> Optional[HospitalRecommendationResult]:
        """
        Fetch recommendations for (symptom, location) and store the outcome.

        Skipped entirely (no error recorded) when either input is absent.

        Returns:
            The result, or None if skipped, failed or superseded
        """
        symptom = (symptom or "").strip()
        if not symptom or location is None:
            logger.info("Skipping hospital recommendation: symptom or location missing")
            return None

        state.hospital_generation += 1
        generation = state.hospital_generation
        state.is_loading_hospitals = True
        state.hospital_error = None

        result = None
        error = None
        try:
            result = self.client.get_hospital_recommendations(
                symptom, location.latitude, location.longitude
            )
        except ApiError as e:
            logger.error(f"Hospital recommendation request failed: {e.message}")
            error = e.message or DEFAULT_HOSPITAL_ERROR
        except Exception as e:
            logger.exception(f"Unexpected error while loading hospital recommendations: {e}")
            error = str(e) or DEFAULT_HOSPITAL_ERROR

        if generation != state.hospital_generation:
            logger.info(f"Discarding stale recommendation response (generation {generation})")
            return None

        state.is_loading_hospitals = False
        state.hospital_result = result
        state.hospital_error = error
        state.expansion.reset()
        if result is not None:
            logger.info(f"Loaded {len(result.hospitals)} recommended hospitals for '{symptom}'")
        return result


# =============================================================================
# SECTION VIEW
# =============================================================================

@dataclass
class HospitalListView:
    """
    What the hospital section renders.

    Attributes:
        status: error | results | empty | unavailable
        hospitals: Hospitals to list (empty unless status == "results")
        error: Warning banner text (status == "error")
        message: Placeholder text for empty/unavailable
    """
    status: str
    hospitals: List[RecommendedHospital] = field(default_factory=list)
    error: Optional[str] = None
    message: Optional[str] = None


def hospital_list_view(state: SessionState) -> HospitalListView:
    if state.hospital_error:
        return HospitalListView(status="error", error=state.hospital_error)
    if not state.submitted_symptom.strip() or state.location is None:
        return HospitalListView(status="unavailable", message=UNAVAILABLE_MESSAGE)

    hospitals = state.hospital_result.hospitals if state.hospital_result else []
    if not hospitals:
        return HospitalListView(status="empty", message=EMPTY_MESSAGE)
    return HospitalListView(status="results", hospitals=list(hospitals))
