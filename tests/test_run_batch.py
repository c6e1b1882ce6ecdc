import argparse
import json

import pytest

from discovery.core.config import Settings
from discovery.core.models import DiscoveredBusiness, DiscoveryResult
from discovery.jobs import run_batch
from discovery.vendors.google_places import GooglePlacesError

CONFIGURED = Settings(google_places_api_key="g", airtable_token="pat", airtable_base_id="app123")


@pytest.fixture
def quiet(monkeypatch):
    sleeps = []
    monkeypatch.setattr(run_batch, "get_settings", lambda: CONFIGURED)
    monkeypatch.setattr(run_batch.time, "sleep", sleeps.append)
    return sleeps


def fake_discover(industry, location, radius=None, max_results=None, settings=None):
    if industry == "Roofer":
        raise GooglePlacesError("Google Places API error: OVER_QUERY_LIMIT", status="OVER_QUERY_LIMIT")
    businesses = [
        DiscoveredBusiness(place_id=f"{industry}-1", name="One", address="", crm_record_id="rec1"),
        DiscoveredBusiness(place_id=f"{industry}-2", name="Two", address=""),
    ]
    return DiscoveryResult(businesses=businesses, total_found=3)


def test_run_batch_discovery_aggregates(monkeypatch, quiet):
    monkeypatch.setattr(run_batch, "discover_businesses", fake_discover)

    results = run_batch.run_batch_discovery(
        industries=["Plumber", "Roofer", "Electrician"],
        location="Amarillo, TX",
        radius=10,
        max_results=5,
        delay=2.0,
    )

    assert results.total_found == 6
    assert results.total_enriched == 4
    assert results.total_saved == 2
    assert set(results.industry_results) == {"Plumber", "Electrician"}
    assert results.errors == ["Failed to process Roofer: Google Places API error: OVER_QUERY_LIMIT"]
    assert quiet == [2.0, 2.0]


def test_run_batch_requires_credentials(monkeypatch):
    monkeypatch.setattr(run_batch, "get_settings", lambda: Settings("", "", ""))

    with pytest.raises(RuntimeError):
        run_batch.run_batch_discovery(industries=["Plumber"], location="Amarillo", radius=None, max_results=None, delay=0)


def test_build_parser_defaults():
    parser = run_batch.build_parser()
    args = parser.parse_args(["--location", "Amarillo, TX"])
    assert isinstance(parser, argparse.ArgumentParser)
    assert args.industries is None
    assert args.max_results == 5
    assert args.delay == 2.0


def test_main_writes_summary(monkeypatch, quiet, tmp_path):
    monkeypatch.setattr(run_batch, "discover_businesses", fake_discover)
    output = tmp_path / "results.json"

    run_batch.main(["--industry", "Plumber", "--location", "Amarillo, TX", "--output", str(output)])

    summary = json.loads(output.read_text(encoding="utf-8"))
    assert summary["totalBusinessesFound"] == 3
    assert summary["totalSavedToAirtable"] == 1
    assert summary["industryResults"]["Plumber"]["savedToAirtable"] == 1
    assert quiet == []
