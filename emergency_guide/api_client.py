"""
Backend API Client
Two request/response contracts over HTTP+JSON:

1. Guidance lookup:        POST {symptom}           -> EmergencyGuidance
2. Hospital recommendation: POST {symptom, lat, lon} -> {hospitals: [...]}

Every failure (transport, non-2xx, undecodable or malformed body) is raised
as an ApiError subclass carrying a human-readable message.
"""

import logging
from typing import Any, Dict, Optional

import requests

from .config import Settings
from .errors import ApiStatusError, ApiTransportError, PayloadError
from .models import (
    EmergencyGuidance,
    HospitalRecommendationResult,
    parse_guidance,
    parse_recommendations,
)

logger = logging.getLogger(__name__)


class ApiClient:
    """Thin wrapper over a requests.Session bound to one backend."""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    # -------------------------------------------------------------------------
    # Contracts
    # -------------------------------------------------------------------------

    def get_emergency_guidance(self, symptom: str) -> Optional[EmergencyGuidance]:
        payload = self._post_json(self.settings.guidance_url, {"symptom": symptom})
        return parse_guidance(payload)

    def get_hospital_recommendations(
        self,
        symptom: str,
        lat: float,
        lon: float,
    ) -> HospitalRecommendationResult:
        payload = self._post_json(
            self.settings.hospitals_url,
            {"symptom": symptom, "lat": lat, "lon": lon},
        )
        return parse_recommendations(payload)

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _post_json(self, url: str, body: Dict[str, Any]) -> Any:
        logger.info(f"Sending request to backend: POST {url}")
        try:
            resp = self.session.post(url, json=body, timeout=self.settings.timeout)
        except requests.Timeout as e:
            logger.error(f"Request to {url} timed out: {e}")
            raise ApiTransportError("The server did not respond in time.") from e
        except requests.RequestException as e:
            logger.error(f"Request to {url} failed: {e}")
            raise ApiTransportError(f"Could not reach the server: {e}") from e

        logger.info(f"Received response from backend: {resp.status_code} {url}")

        if not 200 <= resp.status_code < 300:
            detail = _error_detail(resp)
            message = f"Server returned {resp.status_code}"
            if detail:
                message = f"{message}: {detail}"
            raise ApiStatusError(message, status_code=resp.status_code, detail=detail)

        if not resp.content:
            return None

        try:
            return resp.json()
        except ValueError as e:
            logger.error(f"Undecodable response body from {url}: {e}")
            raise PayloadError("The server response could not be read.") from e


def _error_detail(resp: requests.Response) -> Optional[str]:
    """Pull a FastAPI-style 'detail' or generic 'message' out of an error body."""
    try:
        body = resp.json()
    except ValueError:
        text = (resp.text or "").strip()
        return text[:200] or None

    if isinstance(body, dict):
        for key in ("detail", "message", "error"):
            value = body.get(key)
            if value:
                return str(value)
    return None
