"""Server-rendered landing and event detail pages."""
from __future__ import annotations

import asyncio
from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from fasthtml.common import (
    A, Article, Aside, Body, Div, Footer, H1, H2, H3, Head, Html, Img, Li,
    Main, P, Section, Small, Span, Title, Ul, to_xml,
)

from eventhub.services.catalog import CatalogClient, get_catalog

router = APIRouter(tags=["pages"])


def _page(title: str, *content: Any, status_code: int = 200) -> HTMLResponse:
    doc = Html(
        Head(Title(title)),
        Body(
            Main(*content, cls="container"),
            Footer(Small("DevEvents: hackathons, meetups and conferences in one place")),
        ),
    )
    return HTMLResponse(to_xml(doc), status_code=status_code)


def event_card(e: Dict[str, Any]) -> Any:
    chips = [p for p in (e.get("location"), e.get("date"), e.get("time")) if p]
    parts = [
        Img(src=e.get("image") or "", alt=e.get("title") or ""),
        H3(A(e.get("title") or "Untitled Event", href=f"/events/{e.get('slug')}")),
    ]
    if chips:
        parts.append(Small(" • ".join(chips)))
    return Article(*parts, cls="event-card")


def _cards(events: List[Dict[str, Any]], empty: str) -> Any:
    if not events:
        return P(empty)
    return Ul(*(Li(event_card(e)) for e in events), cls="events")


def not_found_page() -> HTMLResponse:
    return _page(
        "Event not found",
        H1("Event not found"),
        A("Back to all events", href="/"),
        status_code=404,
    )


@router.get("/", response_class=HTMLResponse)
async def index(catalog: CatalogClient = Depends(get_catalog)) -> HTMLResponse:
    events = await asyncio.to_thread(catalog.list_events)
    return _page(
        "DevEvents",
        H1("Hub for Every Dev Event You Can't Miss"),
        P("Hackathons, Meetups and Conferences All in One Place"),
        Section(H2("Featured Events"), _cards(events, "No events yet")),
    )


@router.get("/events/{slug}", response_class=HTMLResponse)
async def event_detail(slug: str, catalog: CatalogClient = Depends(get_catalog)) -> HTMLResponse:
    event = await asyncio.to_thread(catalog.get_event, slug)
    if event is None:
        return not_found_page()
    similar = await asyncio.to_thread(catalog.similar_events, slug)

    details = [
        ("Date", event["date"]), ("Time", event["time"]), ("Location", event["location"]),
        ("Venue", event["venue"]), ("Mode", event["mode"]), ("Audience", event["audience"]),
    ]
    return _page(
        event["title"],
        Section(H1(event["title"]), P(event["description"]), cls="header"),
        Div(
            Div(
                Img(src=event["image"], alt=event["title"], cls="banner"),
                Section(H2("Overview"), P(event["overview"])),
                Section(H2("Event Details"), Ul(*(Li(f"{k}: {v}") for k, v in details))),
                Section(H2("Agenda"), Ul(*(Li(item) for item in event["agenda"]))),
                Section(H2("About the Organizer"), P(event["organizer"])),
                Div(*(Span(tag, cls="pill") for tag in event["tags"]), cls="tags"),
                cls="content",
            ),
            Aside(H2("Book Your Spot"), P(f"Event id: {event.get('id', '')}"), cls="booking"),
            cls="details",
        ),
        Section(H2("Similar Events"), _cards(similar, "No similar events found")),
    )
