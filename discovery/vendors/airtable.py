"""Airtable persistence for discovered businesses.

Records go to the "Business Intelligence" table, which is write-only from this
worker's point of view: every save is a fresh create, nothing is read back or
updated.
"""

import json
import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from discovery.core.config import Settings
from discovery.core.models import DiscoveredBusiness, EmailSource
from discovery.core.scoring import revenue_potential

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://api.airtable.com/v0"

# Airtable's Industry single-select only accepts these options.
FALLBACK_INDUSTRY = "HVAC"
_INDUSTRY_KEYWORDS = (
    ("HVAC", ("hvac", "heating", "cooling", "air condition")),
    ("Plumbing", ("plumb",)),
    ("Roofing", ("roof",)),
)


class AirtableError(RuntimeError):
    """Raised when Airtable rejects a request."""

    def __init__(self, message: str, status_code: Optional[int] = None, error: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error = error


@dataclass(frozen=True)
class CrmOutcome:
    record_id: Optional[str] = None
    error: Optional[str] = None

    @property
    def saved(self) -> bool:
        return self.record_id is not None


def map_to_valid_industry(industry: str) -> str:
    """Map a free-text industry onto one of the table's Industry options."""
    industry_lower = (industry or "").lower()
    for option, keywords in _INDUSTRY_KEYWORDS:
        if any(keyword in industry_lower for keyword in keywords):
            return option
    return FALLBACK_INDUSTRY


def _or_na(value: Optional[str]) -> str:
    return value or "N/A"


def build_notes(business: DiscoveredBusiness, industry: str, location: str) -> str:
    parsed = business.parsed_address
    lines = [
        f"Business Discovery - {industry} in {location}",
        f"Industry Searched: {industry}",
        f"Full Address: {business.address}",
        f"Parsed Address: {_or_na(parsed.address)}, {_or_na(parsed.city)}, {_or_na(parsed.state)} {_or_na(parsed.zip_code)}",
        f"Website: {business.website}" if business.website else "No website",
        f"Rating: {business.rating or 'N/A'} ({business.review_count or 0} reviews)",
        f"Automation Score: {business.automation_score or 0}%",
        f"Email: {business.email} ({business.email_source.value})" if business.email else "No email found",
        f"Pain Points: {', '.join(business.pain_points)}" if business.pain_points else "",
        f"Google Place ID: {business.place_id}",
    ]
    return "\n".join(line for line in lines if line)


def build_ai_analysis(business: DiscoveredBusiness) -> str:
    pain_points = ", ".join(business.pain_points) or "None identified"
    return (
        f"Automation Score: {business.automation_score or 0}%\n"
        f"Pain Points: {pain_points}\n"
        f"Email Source: {business.email_source.value}"
    )


def _email_confidence(business: DiscoveredBusiness) -> int:
    if not business.email:
        return 0
    return 85 if business.email_source is EmailSource.HUNTER else 50


def build_record_fields(
    business: DiscoveredBusiness,
    industry: str,
    location: str,
    discovered_on: Optional[date] = None,
) -> Dict[str, Any]:
    """Map a discovered business onto the Business Intelligence field schema."""
    parsed = business.parsed_address
    street = parsed.address or (business.address or "").split(",")[0] or business.address or ""
    fields: Dict[str, Any] = {
        "Business Name": business.name,
        "Industry": map_to_valid_industry(industry),
        "Address": street,
        "City": parsed.city,
        "State": parsed.state,
        "Zip Code": parsed.zip_code,
        "Phone": business.phone or "",
        "Website": business.website or "",
        "Review Count": business.review_count or 0,
        "Business Status": "Operational",
        "Discovery Date": (discovered_on or date.today()).isoformat(),
        "Google Place ID": business.place_id,
        "Primary Email": business.email or "",
        "Email Confidence Score": _email_confidence(business),
        "Outreach Status": "Not Contacted",
        "Notes": build_notes(business, industry, location),
        "AI Analysis": build_ai_analysis(business),
        "Lead Score": business.lead_score,
        "Revenue Potential": revenue_potential(business.lead_score),
    }
    if business.rating:
        fields["Google Rating"] = math.floor(business.rating + 0.5)
    return fields


def _table_url(base_id: str, table: str) -> str:
    return f"{_BASE_URL}/{base_id}/{quote(table)}"


def _headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}", "Content-Type": "application/json"}


def _error_payload(response: requests.Response) -> Any:
    try:
        return response.json().get("error")
    except ValueError:
        return response.text[:500]


def create_record(fields: Dict[str, Any], token: str, base_id: str, table: str) -> str:
    """Create one record and return its id."""
    response = _SESSION.post(
        _table_url(base_id, table),
        headers=_headers(token),
        json={"fields": fields},
        timeout=10,
    )
    if not 200 <= response.status_code < 300:
        error = _error_payload(response)
        logger.error("Airtable create failed (%s): %s", response.status_code, error)
        raise AirtableError(f"Airtable returned {response.status_code}", status_code=response.status_code, error=error)
    return response.json()["id"]


def check_connection(token: str, base_id: str, table: str) -> None:
    """Read a single record to verify credentials; raises AirtableError on rejection."""
    response = _SESSION.get(
        _table_url(base_id, table),
        headers=_headers(token),
        params={"maxRecords": 1},
        timeout=10,
    )
    if not 200 <= response.status_code < 300:
        error = _error_payload(response)
        raise AirtableError(f"Airtable returned {response.status_code}", status_code=response.status_code, error=error)


def save_business(business: DiscoveredBusiness, industry: str, location: str, settings: Settings) -> CrmOutcome:
    """Best-effort create of one lead record. Failures are reported, never raised."""
    if not settings.airtable_token or not settings.airtable_base_id:
        return CrmOutcome(error=f"Airtable not configured for {business.name}")

    fields = build_record_fields(business, industry, location)
    try:
        record_id = create_record(fields, settings.airtable_token, settings.airtable_base_id, settings.airtable_table)
    except AirtableError as exc:
        detail = json.dumps(exc.error) if exc.error is not None else str(exc)
        return CrmOutcome(error=f"Airtable error for {business.name}: {detail}")
    except Exception as exc:  # noqa: BLE001
        logger.warning("Error saving %s to Airtable: %s", business.name, exc)
        return CrmOutcome(error=f"Failed to save {business.name}: {exc}")

    logger.info("Saved %s to Airtable: %s", business.name, record_id)
    return CrmOutcome(record_id=record_id)
