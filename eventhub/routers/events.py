from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from eventhub.db import get_connection
from eventhub.errors import (
    ConfigurationError,
    ConflictError,
    ConnectivityError,
    NotFoundError,
    UpstreamServiceError,
    ValidationError,
)
from eventhub.routers.common import error_detail, reply
from eventhub.schemas import EventOut, EventUpdate
from eventhub.services.storage import (
    BookingRepository,
    EventRepository,
    REQUIRED_EVENT_FIELDS,
    is_blank,
    validate_slug,
)
from eventhub.services.uploads import CloudinaryUploader, get_uploader

router = APIRouter(prefix="/api/events", tags=["events"])

logger = logging.getLogger(__name__)

# the image arrives as a file part and is checked separately
FORM_FIELDS = tuple(f for f in REQUIRED_EVENT_FIELDS if f != "image")
JSON_ARRAY_FIELDS = ("agenda", "tags")


def _event_out(doc: Dict[str, Any]) -> Dict[str, Any]:
    return EventOut.model_validate(doc).model_dump()


# ---------- Routes ----------


@router.get("")
async def list_events() -> JSONResponse:
    try:
        db = await get_connection()
        events = await EventRepository(db).list()
        return reply(
            200,
            message="Events fetched successfully",
            events=[_event_out(e) for e in events],
        )
    except Exception as exc:
        logger.exception("Failed to fetch events")
        return reply(500, message="Failed to fetch events", error=error_detail(exc))


@router.post("")
async def create_event(
    request: Request,
    uploader: CloudinaryUploader = Depends(get_uploader),
) -> JSONResponse:
    try:
        form = await request.form()
    except Exception as exc:
        return reply(400, message="Invalid form data", error=error_detail(exc))

    fields: Dict[str, Any] = {
        k: v for k, v in form.items() if not isinstance(v, UploadFile)
    }

    missing = [f for f in FORM_FIELDS if is_blank(fields.get(f))]
    if missing:
        return reply(
            400,
            message=f"Missing required fields: {', '.join(missing)}",
            missingFields=missing,
        )

    image = form.get("image")
    if not isinstance(image, UploadFile):
        return reply(400, message="Image is required")

    for name in JSON_ARRAY_FIELDS:
        try:
            fields[name] = json.loads(fields[name])
        except (TypeError, json.JSONDecodeError):
            return reply(400, message=f"{name} must be a JSON-encoded array")

    try:
        db = await get_connection()
        content = await image.read()
        fields["image"] = await asyncio.to_thread(
            uploader.upload, content, image.filename or "image"
        )
        event = await EventRepository(db).create(fields)
        return reply(201, message="Event created successfully", event=_event_out(event))
    except ValidationError as exc:
        return reply(
            400,
            message=exc.message,
            missingFields=exc.missing_fields or None,
        )
    except ConflictError as exc:
        return reply(409, message=exc.message)
    except UpstreamServiceError as exc:
        logger.warning("Image upload failed: %s", exc.message)
        return reply(500, message="Failed to create event", error=error_detail(exc))
    except Exception as exc:
        logger.exception("Failed to create event")
        return reply(500, message="Failed to create event", error=error_detail(exc))
    finally:
        await image.close()


@router.get("/{slug}")
async def get_event(slug: str) -> JSONResponse:
    if not slug or not slug.strip():
        return reply(400, success=False, message="Slug parameter is required")
    try:
        validate_slug(slug)
    except ValidationError as exc:
        return reply(400, success=False, message=exc.message)

    try:
        db = await get_connection()
        event = await EventRepository(db).find_by_slug(slug)
        return reply(
            200, success=True, message="Event fetched successfully", event=_event_out(event)
        )
    except NotFoundError as exc:
        return reply(404, success=False, message=exc.message)
    except (ConnectivityError, ConfigurationError) as exc:
        logger.error("Error fetching event by slug: %s", exc)
        return reply(
            503, success=False, message="Database connection error", error=error_detail(exc)
        )
    except ValidationError as exc:
        return reply(400, success=False, message="Validation error", error=exc.message)
    except Exception as exc:
        logger.exception("Error fetching event by slug")
        return reply(
            500,
            success=False,
            message="An unexpected error occurred while fetching the event",
            error=error_detail(exc),
        )


@router.patch("/{slug}")
async def update_event(slug: str, payload: EventUpdate) -> JSONResponse:
    try:
        validate_slug(slug)
        db = await get_connection()
        event = await EventRepository(db).update(
            slug, payload.model_dump(exclude_unset=True)
        )
        return reply(
            200, success=True, message="Event updated successfully", event=_event_out(event)
        )
    except ValidationError as exc:
        return reply(400, success=False, message=exc.message)
    except NotFoundError as exc:
        return reply(404, success=False, message=exc.message)
    except ConflictError as exc:
        return reply(409, success=False, message=exc.message)
    except (ConnectivityError, ConfigurationError) as exc:
        logger.error("Error updating event: %s", exc)
        return reply(
            503, success=False, message="Database connection error", error=error_detail(exc)
        )
    except Exception as exc:
        logger.exception("Error updating event")
        return reply(
            500, success=False, message="Failed to update event", error=error_detail(exc)
        )


@router.get("/{slug}/similar")
async def similar_events(slug: str) -> JSONResponse:
    """Best-effort: any failure yields an empty list."""
    events: List[Dict[str, Any]] = []
    try:
        db = await get_connection()
        events = await EventRepository(db).find_similar_by_slug(slug)
    except Exception as exc:
        logger.error("Error fetching similar events: %s", exc)
    return reply(
        200,
        message="Similar events fetched successfully",
        events=[_event_out(e) for e in events],
    )


@router.get("/{slug}/bookings/count")
async def booking_count(slug: str) -> JSONResponse:
    try:
        validate_slug(slug)
        db = await get_connection()
        event = await EventRepository(db).find_by_slug(slug)
        count = await BookingRepository(db).count_for_event(event["id"])
        return reply(200, success=True, count=count)
    except ValidationError as exc:
        return reply(400, success=False, message=exc.message)
    except NotFoundError as exc:
        return reply(404, success=False, message=exc.message)
    except (ConnectivityError, ConfigurationError) as exc:
        return reply(
            503, success=False, message="Database connection error", error=error_detail(exc)
        )
    except Exception as exc:
        logger.exception("Error counting bookings")
        return reply(
            500, success=False, message="Failed to count bookings", error=error_detail(exc)
        )
