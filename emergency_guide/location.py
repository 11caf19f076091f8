"""
Location Provider
Best-effort, single-shot browser geolocation.

The read is issued once per session with a bounded wait and a permitted
cached fix. Any failure (permission denied, timeout, unsupported browser,
malformed reply) is logged and swallowed; the session simply has no location
and the hospital recommendation step is never triggered.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .errors import LocationUnavailableError
from .models import Location
from .state import SessionState

logger = logging.getLogger(__name__)

GEOLOCATION_COMPONENT_KEY = "emergency_guide_geolocation"

# PositionError codes from the Geolocation API (0 = browser has no API)
GEOLOCATION_ERRORS = {
    0: "Geolocation is not supported by this browser",
    1: "Location permission denied",
    2: "Position unavailable",
    3: "Location request timed out",
}

GEOLOCATION_JS = """
new Promise((resolve) => {{
  if (!navigator.geolocation) {{
    resolve({{error: {{code: 0, message: "unsupported"}}}});
    return;
  }}
  navigator.geolocation.getCurrentPosition(
    (p) => resolve({{coords: {{latitude: p.coords.latitude, longitude: p.coords.longitude, accuracy: p.coords.accuracy}}, timestamp: p.timestamp}}),
    (e) => resolve({{error: {{code: e.code, message: e.message}}}}),
    {{enableHighAccuracy: {high_accuracy}, timeout: {timeout_ms}, maximumAge: {max_age_ms}}}
  );
}})
"""


@dataclass(frozen=True)
class GeolocationOptions:
    high_accuracy: bool = True
    timeout_ms: int = 10000
    max_age_ms: int = 60000

    @classmethod
    def from_settings(cls, settings) -> "GeolocationOptions":
        return cls(timeout_ms=settings.geo_timeout_ms, max_age_ms=settings.geo_max_age_ms)


def build_geolocation_js(options: GeolocationOptions) -> str:
    return GEOLOCATION_JS.format(
        high_accuracy="true" if options.high_accuracy else "false",
        timeout_ms=int(options.timeout_ms),
        max_age_ms=int(options.max_age_ms),
    )


def read_browser_geolocation(options: GeolocationOptions) -> Optional[Dict[str, Any]]:
    """
    Evaluate the geolocation promise in the browser.

    Returns:
        The raw reply ({"coords": ...} or {"error": ...}), or None while the
        browser has not answered yet
    """
    from streamlit_js_eval import streamlit_js_eval

    return streamlit_js_eval(
        js_expressions=build_geolocation_js(options),
        key=GEOLOCATION_COMPONENT_KEY,
    )


def parse_geolocation_reply(reply: Any) -> Location:
    """
    Convert a browser reply into a Location.

    Raises:
        LocationUnavailableError: reply is an error or malformed
    """
    if not isinstance(reply, dict):
        raise LocationUnavailableError(f"Unexpected geolocation reply: {reply!r}")

    error = reply.get("error")
    if error:
        code = error.get("code") if isinstance(error, dict) else None
        detail = error.get("message") if isinstance(error, dict) else str(error)
        message = GEOLOCATION_ERRORS.get(code, "Geolocation failed")
        if detail:
            message = f"{message} ({detail})"
        raise LocationUnavailableError(message, code=code)

    coords = reply.get("coords") or reply
    try:
        lat = float(coords["latitude"])
        lon = float(coords["longitude"])
    except (KeyError, TypeError, ValueError) as e:
        raise LocationUnavailableError(f"Malformed geolocation reply: {reply!r}") from e

    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        raise LocationUnavailableError(f"Coordinates out of range: ({lat}, {lon})")

    accuracy = coords.get("accuracy")
    try:
        accuracy = float(accuracy) if accuracy is not None else None
    except (TypeError, ValueError):
        accuracy = None

    return Location(latitude=lat, longitude=lon, accuracy_m=accuracy)


class LocationProvider:
    """
    Resolves the session location exactly once.

    Args:
        reader: Callable taking GeolocationOptions and returning the raw
            browser reply, or None while pending
        options: Accuracy / timeout / cache age for the read
    """

    def __init__(
        self,
        reader: Optional[Callable[[GeolocationOptions], Optional[Dict[str, Any]]]] = None,
        options: Optional[GeolocationOptions] = None,
    ):
        self.reader = reader or read_browser_geolocation
        self.options = options or GeolocationOptions()

    def resolve(self, state: SessionState) -> Optional[Location]:
        if state.location_settled:
            return state.location

        try:
            reply = self.reader(self.options)
        except Exception as e:
            logger.warning(f"Geolocation read failed: {e}")
            self._settle_failure(state, str(e) or "Geolocation failed")
            return None

        if reply is None:
            # Browser has not answered yet
            return None

        try:
            location = parse_geolocation_reply(reply)
        except LocationUnavailableError as e:
            logger.warning(f"Automatic location lookup failed: {e.message}")
            self._settle_failure(state, e.message)
            return None

        state.location = location
        state.location_settled = True
        logger.info(f"Location resolved: lat={location.latitude}, lon={location.longitude}")
        return location

    @staticmethod
    def _settle_failure(state: SessionState, message: str) -> None:
        state.location = None
        state.location_error = message
        state.location_settled = True
