"""
Read-only client the page renderer uses to call the events API.

Listing degrades to the built-in event set; detail lookups degrade to
``None`` so the caller can show a not-found page.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from eventhub.config import settings
from eventhub.constants import FALLBACK_EVENTS
from eventhub.services.storage import REQUIRED_EVENT_FIELDS
from eventhub.utils.http_client import HttpClient

logger = logging.getLogger(__name__)


def normalize_base_url(url: Optional[str]) -> str:
    if not url or not url.strip():
        raise ValueError("PUBLIC_BASE_URL is not defined")
    url = url.strip().rstrip("/")
    if url.startswith("http://") or url.startswith("https://"):
        return url
    return f"https://{url}"


class CatalogClient:
    def __init__(self, base_url: Optional[str] = None, http: Optional[HttpClient] = None) -> None:
        self._base_url = base_url if base_url is not None else settings.public_base_url
        self._http = http or HttpClient(
            timeout=settings.http_timeout_seconds,
            max_retries=settings.http_max_retries,
        )

    def list_events(self) -> List[Dict[str, Any]]:
        try:
            base = normalize_base_url(self._base_url)
            data = self._http.get_json(f"{base}/api/events")
            events = data.get("events") if isinstance(data, dict) else None
            return list(events or [])
        except Exception as exc:
            logger.error("Error fetching events, using fallback set: %s", exc)
            return [dict(e) for e in FALLBACK_EVENTS]

    def get_event(self, slug: str) -> Optional[Dict[str, Any]]:
        try:
            base = normalize_base_url(self._base_url)
            data = self._http.get_json(f"{base}/api/events/{slug}")
        except Exception as exc:
            logger.error("Error fetching event details for %s: %s", slug, exc)
            return None

        event = data.get("event") if isinstance(data, dict) else None
        if not isinstance(event, dict):
            logger.error("Invalid or missing event data in API response")
            return None

        missing = [f for f in REQUIRED_EVENT_FIELDS if not event.get(f)]
        if missing:
            logger.error("Event is missing required fields: %s", ", ".join(missing))
            return None
        return event

    def similar_events(self, slug: str) -> List[Dict[str, Any]]:
        try:
            base = normalize_base_url(self._base_url)
            data = self._http.get_json(f"{base}/api/events/{slug}/similar")
        except Exception as exc:
            logger.error("Error fetching similar events for %s: %s", slug, exc)
            return []
        events = data.get("events") if isinstance(data, dict) else None
        return list(events or [])


def get_catalog() -> CatalogClient:
    return CatalogClient()
