"""
Error Taxonomy
Exceptions raised inside the client. None of them is allowed to leave a
component boundary: fetchers catch them and convert them into session state.
"""

from typing import Optional


class EmergencyGuideError(Exception):
    """Base class for all client errors."""


class EmptySymptomError(EmergencyGuideError, ValueError):
    """Submitted symptom was empty or whitespace-only."""

    def __init__(self, message: str = "Please enter a symptom."):
        super().__init__(message)
        self.message = message


class ApiError(EmergencyGuideError):
    """
    Backend request failed.

    Attributes:
        message: Human-readable text suitable for a warning banner
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ApiTransportError(ApiError):
    """Connection refused, DNS failure, timeout, etc."""


class ApiStatusError(ApiError):
    """Backend answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int, detail: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class PayloadError(ApiError):
    """Response body could not be decoded into the expected shape."""


class LocationUnavailableError(EmergencyGuideError):
    """Geolocation denied, timed out, unsupported or malformed."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code
