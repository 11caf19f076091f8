"""
Session State
The single record holding everything one browser session knows. It is owned
by ViewStateController and mutated only by the controllers and fetchers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .expansion import DetailExpansionController
from .models import (
    EmergencyGuidance,
    GuidanceContent,
    HospitalRecommendationResult,
    Location,
)


class ViewState(str, Enum):
    INTAKE = "intake"
    GUIDE = "guide"


@dataclass
class SessionState:
    """
    Attributes:
        view: Screen currently shown
        symptom_text: Free-text entry
        selected_quick_symptom: Quick-pick phrase last chosen ("" if none)
        submitted_symptom: Effective symptom frozen at guide-open
        prompt_message: User-facing prompt after an invalid submit
        location: Device position, set at most once
        location_settled: True once the single geolocation read has answered
        location_error: Why the read failed (diagnostic only)
        guidance: Fetched guidance, None if absent or failed
        guidance_content: Fetched/default variant selected at guide-open
        guidance_error: Message for the guidance warning banner
        is_loading_guidance: Guidance request in flight
        guidance_generation: Increases with every guidance request
        hospital_result: Last successful recommendation result
        hospital_error: Message for the hospital warning banner
        is_loading_hospitals: Recommendation request in flight
        hospital_generation: Increases with every recommendation request
        hospital_request_key: (symptom, lat, lon) of the last recommendation request
        expansion: Accordion state of the hospital list
    """
    view: ViewState = ViewState.INTAKE

    symptom_text: str = ""
    selected_quick_symptom: str = ""
    submitted_symptom: str = ""
    prompt_message: Optional[str] = None

    location: Optional[Location] = None
    location_settled: bool = False
    location_error: Optional[str] = None

    guidance: Optional[EmergencyGuidance] = None
    guidance_content: Optional[GuidanceContent] = None
    guidance_error: Optional[str] = None
    is_loading_guidance: bool = False
    guidance_generation: int = 0

    hospital_result: Optional[HospitalRecommendationResult] = None
    hospital_error: Optional[str] = None
    is_loading_hospitals: bool = False
    hospital_generation: int = 0
    hospital_request_key: Optional[Tuple[str, float, float]] = None

    expansion: DetailExpansionController = field(default_factory=DetailExpansionController)
