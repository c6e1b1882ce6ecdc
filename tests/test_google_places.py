import pytest

from discovery.vendors import google_places


class DummyResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload or {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise RuntimeError("http error")

    def json(self):
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []
        self.response = DummyResponse()

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        return self.response


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(google_places, "_SESSION", session)
    return session


def test_text_search_success(patch_session):
    patch_session.response = DummyResponse(payload={"status": "OK", "results": []})
    payload = google_places.text_search("pizza", "key", radius_meters=8047)
    assert payload["status"] == "OK"
    url, params, timeout = patch_session.calls[0]
    assert "textsearch" in url
    assert params == {"query": "pizza", "key": "key", "radius": 8047}
    assert timeout == 10


def test_text_search_error_status(patch_session):
    patch_session.response = DummyResponse(payload={"status": "REQUEST_DENIED", "error_message": "bad"})
    with pytest.raises(google_places.GooglePlacesError) as excinfo:
        google_places.text_search("pizza", "key")
    assert excinfo.value.status == "REQUEST_DENIED"


def test_place_details_success(patch_session):
    patch_session.response = DummyResponse(payload={"status": "OK", "result": {"name": "Acme"}})
    result = google_places.place_details("pid", "key")
    assert result["name"] == "Acme"
    _, params, _ = patch_session.calls[0]
    assert params["place_id"] == "pid"
    assert params["fields"] == google_places.DETAIL_FIELDS


@pytest.mark.parametrize("status", ["OVER_QUERY_LIMIT", "ZERO_RESULTS", "NOT_FOUND"])
def test_place_details_requires_ok(patch_session, status):
    patch_session.response = DummyResponse(payload={"status": status})
    with pytest.raises(google_places.GooglePlacesError):
        google_places.place_details("pid", "key")


def test_miles_to_meters():
    assert google_places.miles_to_meters(5) == 8047
    assert google_places.miles_to_meters(0.5) == 805


def test_result_cap():
    assert google_places.result_cap(None) == 20
    assert google_places.result_cap(30) == 30
    assert google_places.result_cap(500) == 50
    assert google_places.result_cap(None, serverless=True) == 10
    assert google_places.result_cap(40, serverless=True) == 15


def test_search_businesses_builds_query_and_caps_results(patch_session):
    results = [{"place_id": str(i)} for i in range(30)]
    patch_session.response = DummyResponse(payload={"status": "OK", "results": results})

    found = google_places.search_businesses("plumber", "Amarillo, TX", "key", max_results=25, serverless=True)

    assert [place["place_id"] for place in found] == [str(i) for i in range(15)]
    _, params, _ = patch_session.calls[0]
    assert params["query"] == "plumber in Amarillo, TX"
    assert params["radius"] == 8047


def test_search_businesses_zero_results_is_empty(patch_session):
    patch_session.response = DummyResponse(payload={"status": "ZERO_RESULTS"})

    assert google_places.search_businesses("plumber", "Nowhere", "key", radius_miles=2) == []
    _, params, _ = patch_session.calls[0]
    assert params["radius"] == 3219
