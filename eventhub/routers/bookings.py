from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from eventhub.db import get_connection
from eventhub.errors import ConfigurationError, ConnectivityError, ValidationError
from eventhub.routers.common import error_detail, reply
from eventhub.schemas import BookingCreate, BookingOut
from eventhub.services.storage import BookingRepository

router = APIRouter(prefix="/api/bookings", tags=["bookings"])

logger = logging.getLogger(__name__)


@router.post("")
async def create_booking(req: BookingCreate) -> JSONResponse:
    try:
        db = await get_connection()
        booking = await BookingRepository(db).create(
            {"eventId": req.event_id, "email": req.email}
        )
        return reply(
            201,
            success=True,
            message="Booking created successfully",
            booking=BookingOut.model_validate(booking).model_dump(),
        )
    except ValidationError as exc:
        return reply(400, success=False, message=exc.message)
    except (ConnectivityError, ConfigurationError) as exc:
        logger.error("Error creating booking: %s", exc)
        return reply(
            503, success=False, message="Database connection error", error=error_detail(exc)
        )
    except Exception as exc:
        logger.exception("Error creating booking")
        return reply(
            500, success=False, message="Failed to create booking", error=error_detail(exc)
        )
