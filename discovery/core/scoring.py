"""Heuristic lead scoring for discovered businesses.

Every weight and keyword table lives on :class:`ScoringPolicy` so the policy
can be swapped in tests or per deployment without touching the pipeline. Each
signal adds a fixed amount; the sum is clamped to ``[0, 100]``. The formulas
are deliberately additive so the reasons behind a score can be read back from
the CRM notes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, FrozenSet, List, Mapping, Optional, Sequence, Tuple, Union

from discovery.core.models import DiscoveredBusiness

SCORE_MIN = 0
SCORE_MAX = 100


@dataclass(frozen=True)
class ScoringPolicy:
    automation_base: int = 50
    high_potential_bonus: int = 20
    no_website_bonus: int = 15
    low_rating_bonus: int = 10
    busy_business_bonus: int = 10

    lead_base: int = 30
    email_bonus: int = 20
    automation_fit_bonus: int = 20
    website_bonus: int = 10
    good_rating_bonus: int = 10
    many_pain_points_bonus: int = 10

    rating_threshold: float = 4.0
    busy_review_count: int = 50
    high_volume_review_count: int = 100
    automation_fit_threshold: int = 70
    many_pain_points: int = 2

    high_potential_types: FrozenSet[str] = frozenset(
        {
            "contractor",
            "plumber",
            "electrician",
            "roofer",
            "painter",
            "hvac_contractor",
            "locksmith",
            "moving_company",
            "home_goods_store",
            "real_estate_agency",
            "insurance_agency",
            "lawyer",
            "accounting",
            "dentist",
            "doctor",
            "beauty_salon",
            "hair_care",
            "spa",
        }
    )
    service_type_keywords: Tuple[str, ...] = ("contractor", "plumber")
    service_pain_points: Tuple[str, ...] = ("appointment_scheduling", "lead_follow_up", "quote_generation")


DEFAULT_POLICY = ScoringPolicy()

BusinessLike = Union[DiscoveredBusiness, Mapping[str, Any]]


def _clamp(score: int) -> int:
    return max(SCORE_MIN, min(score, SCORE_MAX))


def _attributes(business: BusinessLike) -> Tuple[Sequence[str], Optional[str], Optional[float], Optional[int]]:
    """Return ``(types, website, rating, review_count)`` from a record or raw Places details."""
    if isinstance(business, DiscoveredBusiness):
        return business.types, business.website, business.rating, business.review_count
    return (
        business.get("types") or (),
        business.get("website"),
        business.get("rating"),
        business.get("user_ratings_total", business.get("review_count")),
    )


def calculate_automation_score(business: BusinessLike, policy: ScoringPolicy = DEFAULT_POLICY) -> int:
    """Estimate how much a business would benefit from automation."""
    types, website, rating, review_count = _attributes(business)

    score = policy.automation_base
    if any(type_name in policy.high_potential_types for type_name in types):
        score += policy.high_potential_bonus
    if not website:
        score += policy.no_website_bonus
    if rating is not None and rating < policy.rating_threshold:
        score += policy.low_rating_bonus
    if review_count is not None and review_count > policy.busy_review_count:
        score += policy.busy_business_bonus
    return _clamp(score)


def identify_pain_points(business: BusinessLike, policy: ScoringPolicy = DEFAULT_POLICY) -> List[str]:
    types, website, rating, review_count = _attributes(business)

    pain_points = []
    if not website:
        pain_points.append("no_website")
    if rating is not None and rating < policy.rating_threshold:
        pain_points.append("reputation_management")
    if review_count is not None and review_count > policy.high_volume_review_count:
        pain_points.append("high_volume_inquiries")
    if any(keyword in type_name for type_name in types for keyword in policy.service_type_keywords):
        pain_points.extend(policy.service_pain_points)
    return pain_points


def calculate_lead_score(business: DiscoveredBusiness, policy: ScoringPolicy = DEFAULT_POLICY) -> int:
    """Score sales-worthiness; needs ``automation_score`` and ``pain_points`` already set."""
    score = policy.lead_base
    if business.email:
        score += policy.email_bonus
    if business.automation_score is not None and business.automation_score > policy.automation_fit_threshold:
        score += policy.automation_fit_bonus
    if business.website:
        score += policy.website_bonus
    if business.rating is not None and business.rating >= policy.rating_threshold:
        score += policy.good_rating_bonus
    if len(business.pain_points) > policy.many_pain_points:
        score += policy.many_pain_points_bonus
    return _clamp(score)


def revenue_potential(lead_score: Optional[int]) -> str:
    score = lead_score or 0
    if score >= 80:
        return "High"
    if score >= 65:
        return "Medium"
    return "Low"
