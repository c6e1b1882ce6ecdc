"""Core data models shared by the business discovery pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class EmailSource(str, Enum):
    HUNTER = "hunter"
    MANUAL = "manual"
    NONE = "none"


@dataclass(frozen=True, slots=True)
class ParsedAddress:
    """Structured address built from Places address components."""

    street_number: str = ""
    street_name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "streetNumber": self.street_number,
            "streetName": self.street_name,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip_code,
            "country": self.country,
        }


@dataclass(frozen=True, slots=True)
class EmailLookup:
    """Outcome of an email search. ``source`` is NONE exactly when no email was found."""

    email: Optional[str] = None
    source: EmailSource = EmailSource.NONE

    def __post_init__(self) -> None:
        if not self.email:
            object.__setattr__(self, "email", None)
            object.__setattr__(self, "source", EmailSource.NONE)
        elif self.source is EmailSource.NONE:
            raise ValueError("an email address needs a source other than 'none'")

    @classmethod
    def not_found(cls) -> "EmailLookup":
        return cls()


@dataclass(frozen=True, slots=True)
class DiscoveredBusiness:
    """A discovered place enriched with contact data and lead scores."""

    place_id: str
    name: str
    address: str
    phone: Optional[str] = None
    website: Optional[str] = None
    rating: Optional[float] = None
    review_count: Optional[int] = None
    types: Tuple[str, ...] = ()
    email: Optional[str] = None
    email_source: EmailSource = EmailSource.NONE
    automation_score: Optional[int] = None
    pain_points: Tuple[str, ...] = ()
    lead_score: Optional[int] = None
    parsed_address: ParsedAddress = field(default_factory=ParsedAddress)
    crm_record_id: Optional[str] = None

    def __post_init__(self) -> None:
        if bool(self.email) == (self.email_source is EmailSource.NONE):
            raise ValueError("email_source must be 'none' exactly when email is missing")
        for name in ("automation_score", "lead_score"):
            score = getattr(self, name)
            if score is not None and not 0 <= score <= 100:
                raise ValueError(f"{name} must be within [0, 100], got {score}")

    def with_crm_record_id(self, record_id: Optional[str]) -> "DiscoveredBusiness":
        return replace(self, crm_record_id=record_id)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "placeId": self.place_id,
            "name": self.name,
            "address": self.address,
            "phone": self.phone,
            "website": self.website,
            "rating": self.rating,
            "reviewCount": self.review_count,
            "types": list(self.types),
            "email": self.email,
            "emailSource": self.email_source.value,
            "automationScore": self.automation_score,
            "painPoints": list(self.pain_points),
            "leadScore": self.lead_score,
            "parsedAddress": self.parsed_address.to_dict(),
            "crmRecordId": self.crm_record_id,
        }
        return {key: value for key, value in payload.items() if value is not None}


@dataclass
class DiscoveryResult:
    """Aggregate returned by one discovery request."""

    businesses: List[DiscoveredBusiness] = field(default_factory=list)
    total_found: int = 0
    errors: List[str] = field(default_factory=list)
    success: bool = True

    @property
    def saved_to_crm(self) -> int:
        return sum(1 for business in self.businesses if business.crm_record_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "businesses": [business.to_dict() for business in self.businesses],
            "totalFound": self.total_found,
            "savedToAirtable": self.saved_to_crm,
            "errors": list(self.errors),
        }
