"""Hunter.io email discovery.

Calls the Hunter.io REST API directly. A missing API key disables lookups and
every failure degrades to "no email found"; nothing here raises.
"""

import logging
import re
from typing import Any, Dict, List, Optional

import requests

from discovery.core.models import EmailLookup, EmailSource

logger = logging.getLogger(__name__)
_SESSION = requests.Session()

HUNTER_BASE = "https://api.hunter.io/v2"
PREFERRED_PREFIXES = ("info@", "contact@", "hello@")

_PROTOCOL_RE = re.compile(r"^https?://")


def clean_domain(website: str) -> str:
    return _PROTOCOL_RE.sub("", website.strip()).removesuffix("/")


def pick_preferred_email(emails: List[Dict[str, Any]]) -> Optional[str]:
    """Prefer a generic inbox, then fall back to the first address returned."""
    values = [entry.get("value") for entry in emails if entry.get("value")]
    for prefix in PREFERRED_PREFIXES:
        for value in values:
            if value.startswith(prefix):
                return value
    return values[0] if values else None


def _get_data(endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
    response = _SESSION.get(f"{HUNTER_BASE}/{endpoint}", params=params, timeout=10)
    response.raise_for_status()
    return response.json().get("data") or {}


def domain_search(domain: str, api_key: str) -> Optional[str]:
    data = _get_data("domain-search", {"domain": domain, "api_key": api_key})
    return pick_preferred_email(data.get("emails") or [])


def company_email_search(company_name: str, api_key: str) -> Optional[str]:
    data = _get_data("email-finder", {"company": company_name, "api_key": api_key})
    return data.get("email") or None


def find_business_email(domain: Optional[str], company_name: Optional[str], api_key: str) -> EmailLookup:
    """Best-guess contact email for a business, by domain first and company name second."""
    if not api_key:
        return EmailLookup.not_found()

    if domain:
        try:
            email = domain_search(clean_domain(domain), api_key)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Hunter domain search failed for %s: %s", domain, exc)
            email = None
        if email:
            return EmailLookup(email=email, source=EmailSource.HUNTER)

    if company_name:
        try:
            email = company_email_search(company_name, api_key)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Hunter company search failed for %s: %s", company_name, exc)
            email = None
        if email:
            return EmailLookup(email=email, source=EmailSource.HUNTER)
    return EmailLookup.not_found()
