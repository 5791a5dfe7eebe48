from __future__ import annotations

import time as _t

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eventhub.middleware import RequestLogMiddleware
from eventhub.routers import (
    bookings as bookings_router,
    events as events_router,
    pages as pages_router,
)

app = FastAPI(title="eventhub-api", version="1.0.0")

# CORS (adjust origins as needed)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Access log
app.add_middleware(RequestLogMiddleware)

# Routers
app.include_router(events_router.router)
app.include_router(bookings_router.router)
app.include_router(pages_router.router)


@app.get("/ping")
def ping():
    return {"ok": True, "ts": _t.time()}


@app.get("/health")
def health():
    return {"status": "ok"}
