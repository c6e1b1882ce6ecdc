"""HTTP entrypoint for business discovery (serverless friendly)."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional, Tuple

import requests
from flask import Flask, jsonify, request

from discovery.core.config import get_settings
from discovery.jobs.diagnostics import run_diagnostics
from discovery.jobs.discover import discover_businesses
from discovery.vendors.google_places import DEFAULT_RADIUS_MILES, GooglePlacesError

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)

GENERIC_CONFIG_MESSAGE = "The business discovery service is not properly configured. Please contact support."

# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; reads settings only, never calls upstream APIs."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "configured": not settings.missing_credentials(),
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.get("/api/business-discovery")
def describe_discovery() -> Any:
    return jsonify(
        {
            "message": "Business Discovery API",
            "endpoints": {
                "POST": {
                    "description": "Discover and enrich local businesses",
                    "parameters": {
                        "industry": 'Business type to search for (e.g., "plumber", "restaurant")',
                        "location": 'Location to search in (e.g., "Amarillo, TX")',
                        "radius": f"Search radius in miles (optional, default: {DEFAULT_RADIUS_MILES})",
                        "maxResults": "Maximum number of results (optional, default: 20)",
                    },
                    "example": {"industry": "plumber", "location": "Amarillo, TX", "radius": 25, "maxResults": 10},
                }
            },
        }
    )


@app.post("/api/business-discovery")
def discover() -> Any:
    """
    Discover businesses and push them to Airtable.
    Required JSON fields: industry, location
    Optional: radius (miles), maxResults (int)
    """
    settings = get_settings()
    missing = settings.missing_credentials()
    if missing:
        logger.error("Missing required environment variables: %s", missing)
        details = GENERIC_CONFIG_MESSAGE if settings.is_production else f"Missing environment variables: {', '.join(missing)}"
        return jsonify({"error": "Service configuration error", "details": details}), 500

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    industry = str(payload.get("industry") or "").strip()
    location = str(payload.get("location") or "").strip()
    if not industry or not location:
        return jsonify({"error": "Industry and location are required"}), 400

    radius, error = _parse_radius(payload.get("radius"))
    if error:
        return jsonify({"error": error}), 400
    max_results, error = _parse_max_results(payload.get("maxResults"))
    if error:
        return jsonify({"error": error}), 400

    logger.info("Searching for %s businesses in %s", industry, location)
    try:
        result = discover_businesses(industry, location, radius=radius, max_results=max_results, settings=settings)
    except (GooglePlacesError, requests.RequestException) as exc:
        logger.error("Failed to search businesses: %s", exc)
        return jsonify({"error": "Failed to search businesses", "details": str(exc)}), 500
    except Exception as exc:  # noqa: BLE001
        logger.exception("Business discovery error: %s", exc)
        return jsonify({"error": "Failed to discover businesses", "details": str(exc)}), 500

    return jsonify(result.to_dict()), 200


@app.get("/api/business-discovery/debug")
def debug() -> Any:
    return jsonify(run_diagnostics()), 200


# ---------- Internals ----------


def _parse_radius(raw: Any) -> Tuple[Optional[float], Optional[str]]:
    if raw is None:
        return None, None
    try:
        radius = float(raw)
    except (TypeError, ValueError):
        return None, "radius must be numeric"
    if radius <= 0:
        return None, "radius must be positive"
    return radius, None


def _parse_max_results(raw: Any) -> Tuple[Optional[int], Optional[str]]:
    if raw is None:
        return None, None
    try:
        max_results = int(raw)
    except (TypeError, ValueError):
        return None, "maxResults must be numeric"
    if max_results <= 0:
        return None, "maxResults must be positive"
    return max_results, None


def main() -> None:
    """Bind on the injected PORT, falling back to WORKER_PORT when running locally."""
    env_port = os.getenv("PORT")
    port = int(env_port or get_settings().worker_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
