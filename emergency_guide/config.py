"""
Configuration Module
Loads client settings from the environment (and a local .env file).

Only the backend location, network timeout, geolocation options and log level
are configurable. Invalid values fall back to defaults with a warning.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "http://localhost:8000"
DEFAULT_GUIDANCE_PATH = "/api/emergency-guidance"
DEFAULT_HOSPITALS_PATH = "/api/hospitals/recommend"
DEFAULT_TIMEOUT = (5.0, 30.0)  # (connect, read) seconds
DEFAULT_GEO_TIMEOUT_MS = 10000
DEFAULT_GEO_MAX_AGE_MS = 60000
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class Settings:
    """
    Client settings.

    Attributes:
        api_base_url: Backend origin, without trailing slash
        guidance_path: Path of the emergency guidance endpoint
        hospitals_path: Path of the hospital recommendation endpoint
        timeout: (connect, read) timeout passed to requests
        geo_timeout_ms: Upper bound on the browser geolocation read
        geo_max_age_ms: Oldest cached browser fix that may be reused
        log_level: Root log level name
    """
    api_base_url: str = DEFAULT_API_BASE_URL
    guidance_path: str = DEFAULT_GUIDANCE_PATH
    hospitals_path: str = DEFAULT_HOSPITALS_PATH
    timeout: Tuple[float, float] = DEFAULT_TIMEOUT
    geo_timeout_ms: int = DEFAULT_GEO_TIMEOUT_MS
    geo_max_age_ms: int = DEFAULT_GEO_MAX_AGE_MS
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def guidance_url(self) -> str:
        return self.api_base_url + self.guidance_path

    @property
    def hospitals_url(self) -> str:
        return self.api_base_url + self.hospitals_path


# =============================================================================
# PARSING UTILITIES
# =============================================================================

def parse_timeout(value: Any) -> Tuple[float, float]:
    """
    Parse a timeout setting into a (connect, read) tuple.

    Examples:
        >>> parse_timeout("5,30")
        (5.0, 30.0)
        >>> parse_timeout("12")
        (12.0, 12.0)
        >>> parse_timeout("soon")
        (5.0, 30.0)
    """
    if value is None or str(value).strip() == "":
        return DEFAULT_TIMEOUT

    try:
        parts = [float(p) for p in str(value).split(",") if p.strip()]
    except ValueError:
        logger.warning(f"Invalid timeout '{value}', using default {DEFAULT_TIMEOUT}")
        return DEFAULT_TIMEOUT

    if len(parts) == 1:
        parts = parts * 2
    if len(parts) != 2 or min(parts) <= 0:
        logger.warning(f"Invalid timeout '{value}', using default {DEFAULT_TIMEOUT}")
        return DEFAULT_TIMEOUT
    return (parts[0], parts[1])


def parse_positive_int(value: Any, default: int, name: str) -> int:
    if value is None or str(value).strip() == "":
        return default
    try:
        num = int(str(value).strip())
    except ValueError:
        logger.warning(f"Invalid {name} '{value}', using default {default}")
        return default
    if num <= 0:
        logger.warning(f"Non-positive {name} '{value}', using default {default}")
        return default
    return num


def normalize_path(path: Optional[str], default: str) -> str:
    if not path or not path.strip():
        return default
    path = path.strip()
    return path if path.startswith("/") else "/" + path


# =============================================================================
# LOADING
# =============================================================================

def load_settings(environ: Optional[dict] = None) -> Settings:
    """
    Build Settings from environment variables.

    A .env file in the working directory is loaded first when reading from
    the real process environment.

    Args:
        environ: Mapping to read instead of os.environ (tests)

    Returns:
        Settings instance
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    base_url = (
        environ.get("EMERGENCY_GUIDE_API_BASE_URL")
        or environ.get("VITE_API_BASE_URL")
        or DEFAULT_API_BASE_URL
    )

    log_level = str(environ.get("EMERGENCY_GUIDE_LOG_LEVEL", DEFAULT_LOG_LEVEL)).strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        logger.warning(f"Unknown log level '{log_level}', using {DEFAULT_LOG_LEVEL}")
        log_level = DEFAULT_LOG_LEVEL

    return Settings(
        api_base_url=base_url.strip().rstrip("/"),
        guidance_path=normalize_path(
            environ.get("EMERGENCY_GUIDE_GUIDANCE_PATH"), DEFAULT_GUIDANCE_PATH
        ),
        hospitals_path=normalize_path(
            environ.get("EMERGENCY_GUIDE_HOSPITALS_PATH"), DEFAULT_HOSPITALS_PATH
        ),
        timeout=parse_timeout(environ.get("EMERGENCY_GUIDE_TIMEOUT")),
        geo_timeout_ms=parse_positive_int(
            environ.get("EMERGENCY_GUIDE_GEO_TIMEOUT_MS"), DEFAULT_GEO_TIMEOUT_MS, "geolocation timeout"
        ),
        geo_max_age_ms=parse_positive_int(
            environ.get("EMERGENCY_GUIDE_GEO_MAX_AGE_MS"), DEFAULT_GEO_MAX_AGE_MS, "geolocation max age"
        ),
        log_level=log_level,
    )


def configure_logging(settings: Settings) -> None:
    """Configure root logging once per process."""
    logging.basicConfig(level=getattr(logging, settings.log_level), format=LOG_FORMAT)
