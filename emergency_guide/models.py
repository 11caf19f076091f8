"""
Data Model
Records exchanged with the guidance and recommendation services, plus the
parsers that turn decoded JSON payloads into them.

Optional fields default to absent/empty. Required hospital fields that are
missing or non-numeric raise PayloadError.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .errors import PayloadError

logger = logging.getLogger(__name__)


# Quick-pick phrases offered on the intake screen
QUICK_SYMPTOMS = [
    "Chest pain",
    "Difficulty breathing",
    "Severe bleeding",
    "Lost consciousness",
    "Suspected fracture",
    "Burn injury",
]

# Generic procedure shown whenever no fetched guidance is available
FALLBACK_STEPS = [
    "Move the patient to a safe place.",
    "Check whether the patient is conscious.",
    "Lay the patient down or seat them in a comfortable position.",
    "Keep the patient warm.",
    "Keep observing the patient's condition.",
]

NO_ACTIONS_MESSAGE = "If the situation is serious, call emergency services immediately."


@dataclass
class Location:
    """
    Device position acquired once per session.

    Attributes:
        latitude: Degrees
        longitude: Degrees
        address: Never resolved client-side, kept for the request contract
        accuracy_m: Accuracy radius reported by the browser (diagnostic)
    """
    latitude: float
    longitude: float
    address: Optional[str] = None
    accuracy_m: Optional[float] = None


@dataclass
class EmergencyGuidance:
    situation_summary: Optional[str] = None
    immediate_actions: List[str] = field(default_factory=list)
    do_not_do: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.situation_summary or self.immediate_actions or self.do_not_do)


@dataclass
class RecommendedHospital:
    """
    One entry of a recommendation result, ranked by the service.

    Capacity invariants (er_beds <= total_er_beds and
    icu_beds + trauma_icu_beds <= total_icu_beds) are expected but not
    enforced here.
    """
    hospital_id: str
    rank: int
    hospital_name: str
    distance_km: float
    travel_time_min: float
    accept_prob: float
    er_beds: int
    total_er_beds: int
    icu_beds: int
    total_icu_beds: int
    trauma_icu_beds: int
    ct_available: bool
    ventilator_available: bool
    hospital_phone: Optional[str] = None

    @property
    def accept_percent(self) -> float:
        return self.accept_prob * 100.0

    @property
    def accept_bar_ratio(self) -> float:
        """accept_prob clamped into [0, 1] for progress bars."""
        return clamp_ratio(self.accept_prob)

    @property
    def er_ratio(self) -> float:
        return bed_ratio(self.er_beds, self.total_er_beds)

    @property
    def icu_ratio(self) -> float:
        return bed_ratio(self.icu_beds, self.total_icu_beds)

    @property
    def trauma_icu_ratio(self) -> float:
        return bed_ratio(self.trauma_icu_beds, self.total_icu_beds)


@dataclass
class HospitalRecommendationResult:
    hospitals: List[RecommendedHospital] = field(default_factory=list)

    def ranks(self) -> List[int]:
        return [h.rank for h in self.hospitals]


# =============================================================================
# GUIDANCE CONTENT VARIANT
# =============================================================================

@dataclass(frozen=True)
class FetchedGuidance:
    """Guide screen shows the service's guidance."""
    guidance: EmergencyGuidance

    @property
    def is_default(self) -> bool:
        return False


@dataclass(frozen=True)
class DefaultGuidance:
    """Guide screen shows FALLBACK_STEPS."""
    steps: tuple = tuple(FALLBACK_STEPS)

    @property
    def is_default(self) -> bool:
        return True


GuidanceContent = Union[FetchedGuidance, DefaultGuidance]


# =============================================================================
# NUMERIC HELPERS
# =============================================================================

def clamp_ratio(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def bed_ratio(available: int, total: int) -> float:
    """
    Fill ratio for a bed gauge.

    Examples:
        >>> bed_ratio(3, 10)
        0.3
        >>> bed_ratio(5, 0)
        1.0
        >>> bed_ratio(12, 10)
        1.0
    """
    return clamp_ratio(available / max(total, 1))


# =============================================================================
# PAYLOAD PARSING
# =============================================================================

def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        if value is not None:
            logger.warning(f"Expected a list of strings, got {type(value).__name__}; ignoring")
        return []
    return [str(item) for item in value if item is not None and str(item).strip()]


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_guidance(payload: Any) -> Optional[EmergencyGuidance]:
    """
    Convert a guidance payload into EmergencyGuidance.

    Args:
        payload: Decoded JSON body (dict expected, None allowed)

    Returns:
        EmergencyGuidance, or None when the payload carries no guidance

    Raises:
        PayloadError: payload is neither an object nor null
    """
    if payload is None:
        return None
    if not isinstance(payload, dict):
        raise PayloadError(f"Unexpected guidance payload type: {type(payload).__name__}")

    guidance = EmergencyGuidance(
        situation_summary=_optional_str(payload.get("situation_summary")),
        immediate_actions=_string_list(payload.get("immediate_actions")),
        do_not_do=_string_list(payload.get("do_not_do")),
    )
    return None if guidance.is_empty else guidance


def _required(entry: Dict[str, Any], key: str) -> Any:
    if key not in entry or entry[key] is None:
        raise PayloadError(f"Hospital entry is missing '{key}'")
    return entry[key]


def _as_float(entry: Dict[str, Any], key: str) -> float:
    value = _required(entry, key)
    if isinstance(value, bool):
        raise PayloadError(f"Hospital field '{key}' is not numeric: {value!r}")
    try:
        num = float(value)
    except (TypeError, ValueError):
        raise PayloadError(f"Hospital field '{key}' is not numeric: {value!r}")
    if not math.isfinite(num):
        raise PayloadError(f"Hospital field '{key}' is not finite: {value!r}")
    return num


def _as_int(entry: Dict[str, Any], key: str) -> int:
    return int(_as_float(entry, key))


def _as_bool(entry: Dict[str, Any], key: str) -> bool:
    value = entry.get(key, False)
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "y")
    return bool(value)


def parse_hospital(entry: Any) -> RecommendedHospital:
    if not isinstance(entry, dict):
        raise PayloadError(f"Unexpected hospital entry type: {type(entry).__name__}")

    return RecommendedHospital(
        hospital_id=str(_required(entry, "hospital_id")),
        rank=_as_int(entry, "rank"),
        hospital_name=str(_required(entry, "hospital_name")),
        hospital_phone=_optional_str(entry.get("hospital_phone")),
        distance_km=_as_float(entry, "distance_km"),
        travel_time_min=_as_float(entry, "travel_time_min"),
        accept_prob=_as_float(entry, "accept_prob"),
        er_beds=_as_int(entry, "er_beds"),
        total_er_beds=_as_int(entry, "total_er_beds"),
        icu_beds=_as_int(entry, "icu_beds"),
        total_icu_beds=_as_int(entry, "total_icu_beds"),
        trauma_icu_beds=_as_int(entry, "trauma_icu_beds"),
        ct_available=_as_bool(entry, "ct_available"),
        ventilator_available=_as_bool(entry, "ventilator_available"),
    )


def parse_recommendations(payload: Any) -> HospitalRecommendationResult:
    """
    Convert a recommendation payload into HospitalRecommendationResult.

    The service's ordering is preserved; nothing is sorted or re-ranked.

    Raises:
        PayloadError: payload or any hospital entry has the wrong shape
    """
    if not isinstance(payload, dict):
        raise PayloadError(f"Unexpected recommendation payload type: {type(payload).__name__}")

    hospitals = payload.get("hospitals")
    if hospitals is None:
        hospitals = []
    if not isinstance(hospitals, list):
        raise PayloadError("'hospitals' is not a list")

    result = HospitalRecommendationResult(hospitals=[parse_hospital(h) for h in hospitals])

    ranks = result.ranks()
    if len(set(ranks)) != len(ranks):
        raise PayloadError(f"Duplicate ranks in recommendation result: {ranks}")
    return result
