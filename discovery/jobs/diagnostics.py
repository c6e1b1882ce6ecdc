"""Connectivity checks behind the business discovery debug endpoint."""

import logging
import platform
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from discovery.core.config import Settings, get_settings
from discovery.vendors import airtable, google_places

try:
    import resource
except ImportError:  # Windows
    resource = None

logger = logging.getLogger(__name__)

PROBE_QUERY = "restaurant in Amarillo"
_STARTED_AT = time.monotonic()


def environment_check(settings: Settings) -> Dict[str, Any]:
    return {
        "environment": settings.app_env,
        "serverless": "Yes" if settings.serverless else "No",
        "hasGoogleAPI": bool(settings.google_places_api_key),
        "hasAirtableToken": bool(settings.airtable_token),
        "hasAirtableBase": bool(settings.airtable_base_id),
        "hasHunterAPI": bool(settings.hunter_api_key),
    }


def probe_google_places(settings: Settings) -> Dict[str, Any]:
    if not settings.google_places_api_key:
        return {"status": "Not tested", "error": None}
    try:
        payload = google_places.text_search(PROBE_QUERY, settings.google_places_api_key)
    except google_places.GooglePlacesError as exc:
        return {"status": exc.status or "Failed", "error": str(exc), "resultsFound": 0}
    except Exception as exc:  # noqa: BLE001
        logger.warning("Google Places probe failed: %s", exc)
        return {"status": "Failed", "error": str(exc), "resultsFound": 0}
    return {
        "status": payload.get("status"),
        "error": payload.get("error_message"),
        "resultsFound": len(payload.get("results") or []),
    }


def probe_airtable(settings: Settings) -> Dict[str, Any]:
    if not settings.airtable_token or not settings.airtable_base_id:
        return {"status": "Not tested", "error": None}
    try:
        airtable.check_connection(settings.airtable_token, settings.airtable_base_id, settings.airtable_table)
    except airtable.AirtableError as exc:
        return {"status": "Failed", "error": exc.error or str(exc)}
    except Exception as exc:  # noqa: BLE001
        logger.warning("Airtable probe failed: %s", exc)
        return {"status": "Failed", "error": str(exc)}
    return {"status": "Connected", "error": None}


def build_recommendations(env: Dict[str, Any], google: Dict[str, Any], airtable_probe: Dict[str, Any]) -> List[str]:
    recommendations = []
    if not env.get("hasGoogleAPI"):
        recommendations.append("Set GOOGLE_PLACES_API_KEY (or GOOGLE_PLACES_API) in the environment")
    if not env.get("hasAirtableToken") or not env.get("hasAirtableBase"):
        recommendations.append("Set AIRTABLE_PERSONAL_ACCESS_TOKEN and AIRTABLE_BASE_ID in the environment")
    if google.get("status") == "REQUEST_DENIED":
        recommendations.append("Google API key has restrictions. Check IP restrictions in Google Cloud Console")
    if google.get("status") == "OVER_QUERY_LIMIT":
        recommendations.append("Google Places API quota exceeded. Check usage in Google Cloud Console")
    if airtable_probe.get("status") == "Failed":
        recommendations.append("Airtable connection failed. Verify access token and base ID are correct")
    if not recommendations:
        recommendations.append("All systems operational!")
    return recommendations


def _peak_memory() -> str:
    if resource is None:
        return "unknown"
    # ru_maxrss is KiB on Linux
    peak_kib = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    return f"{round(peak_kib / 1024)} MB"


def _runtime_info() -> Dict[str, Any]:
    return {
        "platform": platform.platform(),
        "pythonVersion": platform.python_version(),
        "peakMemory": _peak_memory(),
        "uptime": f"{round(time.monotonic() - _STARTED_AT)} seconds",
    }


def run_diagnostics(settings: Optional[Settings] = None) -> Dict[str, Any]:
    settings = settings or get_settings()
    env = environment_check(settings)
    google = probe_google_places(settings)
    airtable_probe = probe_airtable(settings)
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "envCheck": env,
        "googleAPITest": google,
        "airtableTest": airtable_probe,
        "runtimeInfo": _runtime_info(),
        "recommendation": build_recommendations(env, google, airtable_probe),
    }
