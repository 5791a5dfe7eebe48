from __future__ import annotations

from typing import Any, Optional

from fastapi.responses import JSONResponse

from eventhub.config import settings


def error_detail(exc: BaseException) -> Optional[str]:
    """Raw error text, only exposed in development mode."""
    return str(exc) if settings.is_development else None


def reply(status: int, **body: Any) -> JSONResponse:
    """JSON response that drops keys whose value is None."""
    return JSONResponse(
        status_code=status,
        content={k: v for k, v in body.items() if v is not None},
    )
