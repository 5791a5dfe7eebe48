import pytest
import requests

from eventhub.constants import FALLBACK_EVENTS
from eventhub.services.catalog import CatalogClient, normalize_base_url


class FakeHttp:
    def __init__(self, payloads=None, error=None):
        self.payloads = payloads or {}
        self.error = error
        self.urls = []

    def get_json(self, url, **kwargs):
        self.urls.append(url)
        if self.error:
            raise self.error
        return self.payloads[url]


FULL_EVENT = {
    "title": "Dev Days", "slug": "dev-days", "description": "d", "overview": "o",
    "venue": "v", "location": "l", "date": "2026-01-01", "time": "10:00",
    "mode": "online", "audience": "a", "agenda": ["x"], "organizer": "o",
    "tags": ["t"], "image": "https://img",
}


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("example.com", "https://example.com"),
        ("http://localhost:8000/", "http://localhost:8000"),
        ("https://events.dev", "https://events.dev"),
    ],
)
def test_normalize_base_url(raw, expected):
    assert normalize_base_url(raw) == expected


def test_normalize_base_url_requires_value():
    with pytest.raises(ValueError):
        normalize_base_url("  ")


def test_list_events_from_api():
    http = FakeHttp({"https://events.dev/api/events": {"events": [FULL_EVENT]}})
    assert CatalogClient("events.dev", http=http).list_events() == [FULL_EVENT]


def test_list_events_falls_back_when_api_unreachable():
    http = FakeHttp(error=requests.ConnectionError("refused"))
    assert CatalogClient("events.dev", http=http).list_events() == FALLBACK_EVENTS


def test_list_events_falls_back_without_base_url():
    http = FakeHttp()
    assert CatalogClient("", http=http).list_events() == FALLBACK_EVENTS
    assert http.urls == []


def test_get_event():
    http = FakeHttp({"https://events.dev/api/events/dev-days": {"event": FULL_EVENT}})
    assert CatalogClient("https://events.dev", http=http).get_event("dev-days") == FULL_EVENT


@pytest.mark.parametrize(
    "payload",
    [{"success": False}, {"event": "oops"}, {"event": {**FULL_EVENT, "agenda": []}}],
)
def test_get_event_returns_none_for_bad_payloads(payload):
    http = FakeHttp({"https://events.dev/api/events/dev-days": payload})
    assert CatalogClient("https://events.dev", http=http).get_event("dev-days") is None


def test_get_event_returns_none_on_http_error():
    http = FakeHttp(error=requests.HTTPError("404 Not Found"))
    assert CatalogClient("https://events.dev", http=http).get_event("dev-days") is None


def test_similar_events():
    http = FakeHttp({"https://events.dev/api/events/dev-days/similar": {"events": [FULL_EVENT]}})
    assert CatalogClient("events.dev", http=http).similar_events("dev-days") == [FULL_EVENT]


def test_similar_events_empty_on_failure():
    http = FakeHttp(error=requests.ConnectionError("refused"))
    assert CatalogClient("events.dev", http=http).similar_events("dev-days") == []
