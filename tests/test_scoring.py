import pytest

from discovery.core import scoring
from discovery.core.models import DiscoveredBusiness, EmailSource


def make_business(**overrides):
    fields = dict(place_id="pid", name="Acme", address="Main St")
    fields.update(overrides)
    return DiscoveredBusiness(**fields)


def test_automation_score_base_with_website():
    assert scoring.calculate_automation_score({"website": "https://acme.example"}) == 50


@pytest.mark.parametrize(
    "details",
    [
        {},
        {"types": ["store"], "rating": 4.9, "user_ratings_total": 3},
        {"website": "", "types": ["dentist"]},
    ],
)
def test_no_website_always_earns_bonus(details):
    with_site = dict(details, website="https://acme.example")
    assert scoring.calculate_automation_score(details) - scoring.calculate_automation_score(with_site) == 15


def test_automation_score_each_signal():
    details = {
        "types": ["point_of_interest", "electrician"],
        "website": "https://acme.example",
        "rating": 3.9,
        "user_ratings_total": 51,
    }
    assert scoring.calculate_automation_score(details) == 50 + 20 + 10 + 10


def test_automation_score_thresholds_are_strict():
    details = {"website": "https://acme.example", "rating": 4.0, "user_ratings_total": 50}
    assert scoring.calculate_automation_score(details) == 50


def test_automation_score_is_capped():
    details = {"types": ["plumber"], "rating": 1.0, "user_ratings_total": 10_000_000}
    assert scoring.calculate_automation_score(details) == 100


def test_scores_clamp_with_custom_policy():
    generous = scoring.ScoringPolicy(automation_base=500, lead_base=500)
    stingy = scoring.ScoringPolicy(automation_base=-500, lead_base=-500)

    assert scoring.calculate_automation_score({}, generous) == 100
    assert scoring.calculate_automation_score({}, stingy) == 0
    assert scoring.calculate_lead_score(make_business(), generous) == 100
    assert scoring.calculate_lead_score(make_business(), stingy) == 0


def test_automation_score_accepts_discovered_business():
    business = make_business(types=("lawyer",), rating=3.0, review_count=60, website="https://law.example")
    assert scoring.calculate_automation_score(business) == 50 + 20 + 10 + 10


def test_pain_points_order_and_triggers():
    details = {"types": ["general_contractor"], "rating": 3.5, "user_ratings_total": 101}
    assert scoring.identify_pain_points(details) == [
        "no_website",
        "reputation_management",
        "high_volume_inquiries",
        "appointment_scheduling",
        "lead_follow_up",
        "quote_generation",
    ]


def test_pain_points_empty_for_healthy_business():
    details = {"types": ["restaurant"], "website": "https://acme.example", "rating": 4.5, "user_ratings_total": 100}
    assert scoring.identify_pain_points(details) == []


def test_lead_score_base():
    assert scoring.calculate_lead_score(make_business(automation_score=50)) == 30


def test_lead_score_all_signals():
    business = make_business(
        email="info@acme.example",
        email_source=EmailSource.HUNTER,
        website="https://acme.example",
        rating=4.0,
        automation_score=71,
        pain_points=("a", "b", "c"),
    )
    assert scoring.calculate_lead_score(business) == 100


def test_lead_score_thresholds_are_strict():
    business = make_business(automation_score=70, pain_points=("a", "b"), rating=3.99)
    assert scoring.calculate_lead_score(business) == 30


def test_scorers_are_pure():
    details = {"types": ["plumber"], "rating": 3.2, "user_ratings_total": 150}
    snapshot = dict(details)

    assert scoring.calculate_automation_score(details) == scoring.calculate_automation_score(details)
    assert scoring.identify_pain_points(details) == scoring.identify_pain_points(details)
    assert details == snapshot


@pytest.mark.parametrize("score, expected", [(100, "High"), (80, "High"), (79, "Medium"), (65, "Medium"), (64, "Low"), (None, "Low")])
def test_revenue_potential(score, expected):
    assert scoring.revenue_potential(score) == expected
