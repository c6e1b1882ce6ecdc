"""Utilities for transforming Google Places responses into discovered businesses."""

import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, Optional

from discovery.core.models import DiscoveredBusiness, EmailLookup, ParsedAddress
from discovery.core.scoring import (
    DEFAULT_POLICY,
    ScoringPolicy,
    calculate_automation_score,
    calculate_lead_score,
    identify_pain_points,
)

logger = logging.getLogger(__name__)

# component type -> (ParsedAddress field, prefer short_name)
_COMPONENT_FIELDS = {
    "street_number": ("street_number", False),
    "route": ("street_name", False),
    "locality": ("city", False),
    "administrative_area_level_1": ("state", True),
    "postal_code": ("zip_code", False),
    "country": ("country", False),
}


def _component_value(component: Dict[str, Any], prefer_short: bool) -> str:
    if prefer_short:
        return component.get("short_name") or component.get("long_name") or ""
    return component.get("long_name") or ""


def _parse_components(address_components: Iterable[Dict[str, Any]]) -> ParsedAddress:
    values: Dict[str, str] = {}
    for component in address_components:
        types = set(component.get("types") or [])
        for type_name, (field_name, prefer_short) in _COMPONENT_FIELDS.items():
            if type_name in types:
                values[field_name] = _component_value(component, prefer_short)

    street = " ".join(part for part in (values.get("street_number"), values.get("street_name")) if part)
    return ParsedAddress(address=street, **values)


def parse_address_components(address_components: Optional[Iterable[Dict[str, Any]]]) -> ParsedAddress:
    """Normalise Places ``address_components`` into a :class:`ParsedAddress`.

    Unknown component types are ignored and missing ones become empty strings.
    Malformed input never raises; it yields an empty address instead.
    """
    if not address_components or not isinstance(address_components, (list, tuple)):
        logger.debug("No address components provided for parsing")
        return ParsedAddress()

    try:
        return _parse_components(address_components)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Unable to parse address components: %s", exc)
        return ParsedAddress()


def to_discovered_business(
    place_id: str,
    details: Dict[str, Any],
    email_lookup: EmailLookup,
    parsed_address: ParsedAddress,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> DiscoveredBusiness:
    """Assemble a scored record from place details and the enrichment results."""
    business = DiscoveredBusiness(
        place_id=place_id,
        name=details.get("name") or "",
        address=details.get("formatted_address") or "",
        phone=details.get("formatted_phone_number"),
        website=details.get("website") or None,
        rating=details.get("rating"),
        review_count=details.get("user_ratings_total"),
        types=tuple(details.get("types") or ()),
        email=email_lookup.email,
        email_source=email_lookup.source,
        automation_score=calculate_automation_score(details, policy),
        pain_points=tuple(identify_pain_points(details, policy)),
        parsed_address=parsed_address,
    )
    return replace(business, lead_score=calculate_lead_score(business, policy))
