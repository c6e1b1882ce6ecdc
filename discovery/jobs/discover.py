"""Discover, enrich, score and persist local businesses for one search."""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from discovery.core.config import Settings, get_settings
from discovery.core.models import DiscoveredBusiness, DiscoveryResult, EmailLookup
from discovery.core.scoring import DEFAULT_POLICY, ScoringPolicy
from discovery.etl.transform import parse_address_components, to_discovered_business
from discovery.vendors import airtable, google_places, hunter

logger = logging.getLogger(__name__)

TIMEOUT_NOTE = "Some businesses could not be processed due to timeout"


@dataclass
class EnrichmentOutcome:
    """Result of one place's pipeline: a business, the reasons it degraded, or both."""

    place_id: str
    business: Optional[DiscoveredBusiness] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.business is not None


def _build_business(place_id: str, settings: Settings, policy: ScoringPolicy) -> DiscoveredBusiness:
    details = google_places.place_details(place_id=place_id, api_key=settings.google_places_api_key)

    email_lookup = EmailLookup.not_found()
    if details.get("website"):
        email_lookup = hunter.find_business_email(details["website"], details.get("name"), settings.hunter_api_key)

    parsed_address = parse_address_components(details.get("address_components"))
    return to_discovered_business(place_id, details, email_lookup, parsed_address, policy)


def enrich_place(
    place: Dict[str, Any],
    industry: str,
    location: str,
    settings: Settings,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> EnrichmentOutcome:
    """Run the details -> email -> address -> scores -> Airtable pipeline for one place.

    Never raises. A failure before the record is built drops the place; a
    failed Airtable save keeps the record without a ``crm_record_id``.
    """
    place_id = place.get("place_id") or ""
    label = place.get("name") or place_id

    try:
        business = _build_business(place_id, settings, policy)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Error processing business %s: %s", label, exc)
        return EnrichmentOutcome(place_id=place_id, errors=[f"Failed to process {label}"])

    # every lead is saved, regardless of score
    crm = airtable.save_business(business, industry, location, settings)
    if crm.saved:
        business = business.with_crm_record_id(crm.record_id)
    errors = [crm.error] if crm.error else []
    return EnrichmentOutcome(place_id=place_id, business=business, errors=errors)


def discover_businesses(
    industry: str,
    location: str,
    radius: Optional[float] = None,
    max_results: Optional[int] = None,
    *,
    settings: Optional[Settings] = None,
    policy: ScoringPolicy = DEFAULT_POLICY,
    timeout: Optional[float] = None,
) -> DiscoveryResult:
    """Search Places and enrich every hit concurrently under one deadline.

    Search failures propagate. When the deadline passes, places that already
    finished are returned and :data:`TIMEOUT_NOTE` is added to ``errors``;
    unfinished pipelines are left running in the background and ignored.
    """
    settings = settings or get_settings()
    deadline = settings.enrichment_timeout if timeout is None else timeout

    places = google_places.search_businesses(
        industry,
        location,
        api_key=settings.google_places_api_key,
        radius_miles=radius,
        max_results=max_results,
        serverless=settings.serverless,
    )
    result = DiscoveryResult(total_found=len(places))
    if not places:
        return result

    executor = ThreadPoolExecutor(max_workers=len(places), thread_name_prefix="enrich")
    futures = [executor.submit(enrich_place, place, industry, location, settings, policy) for place in places]
    done, pending = wait(futures, timeout=deadline)
    executor.shutdown(wait=False, cancel_futures=True)

    for future in futures:
        if future not in done:
            continue
        outcome = future.result()
        result.errors.extend(outcome.errors)
        if outcome.ok:
            result.businesses.append(outcome.business)

    if pending:
        logger.warning("Enrichment deadline of %.1fs reached with %d places unfinished", deadline, len(pending))
        result.errors.append(TIMEOUT_NOTE)

    logger.info(
        "Discovery complete: found=%d enriched=%d saved=%d",
        result.total_found,
        len(result.businesses),
        result.saved_to_crm,
    )
    return result
