# services/storage.py
from __future__ import annotations

import json
import re
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from eventhub.db import Database
from eventhub.errors import ConflictError, NotFoundError, ValidationError
from eventhub.services.normalize import ChangeSet, normalize_event

SLUG_RE = re.compile(r"^[a-z0-9-]+$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

EVENT_MODES = ("online", "offline", "hybrid")
EVENT_TEXT_FIELDS = (
    "title", "description", "overview", "venue", "location",
    "date", "time", "mode", "audience", "organizer", "image",
)
EVENT_LIST_FIELDS = ("agenda", "tags")
# order matches the create form
REQUIRED_EVENT_FIELDS = (
    "title", "description", "overview", "venue", "location", "date", "time",
    "mode", "audience", "agenda", "organizer", "tags", "image",
)
MUTABLE_EVENT_FIELDS = frozenset(REQUIRED_EVENT_FIELDS)


# ---------- helpers ----------

def _new_id() -> str:
    return uuid.uuid4().hex[:24]


def _utcnow() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _load(row: sqlite3.Row | None) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    return json.loads(row["data"])


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def validate_slug(slug: str) -> str:
    if not slug or not SLUG_RE.match(slug):
        raise ValidationError(
            "Invalid slug format. Slug must contain only lowercase letters, "
            "numbers, and hyphens",
            field_name="slug",
        )
    return slug


def _clean_list(name: str, value: Any, *, unique: bool = False) -> List[str]:
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{name} must be a non-empty array", field_name=name)
    out: List[str] = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ValidationError(
                f"{name} items must be non-empty text", field_name=name
            )
        item = item.strip()
        if unique and item in out:
            continue
        out.append(item)
    if not out:
        raise ValidationError(f"{name} must be a non-empty array", field_name=name)
    return out


def _clean_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Trim text, check mode and list shapes for whichever fields are present."""
    out: Dict[str, Any] = {}
    for name, value in fields.items():
        if name in EVENT_TEXT_FIELDS:
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(
                    f"{name.capitalize()} cannot be empty", field_name=name
                )
            out[name] = value.strip()
        elif name in EVENT_LIST_FIELDS:
            out[name] = _clean_list(name, value, unique=(name == "tags"))
    if "mode" in out:
        out["mode"] = out["mode"].lower()
        if out["mode"] not in EVENT_MODES:
            raise ValidationError(
                "Mode must be one of: online, offline, hybrid", field_name="mode"
            )
    return out


# ---------- Events ----------

class EventRepository:
    """Create/read/update for event documents."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        missing = [f for f in REQUIRED_EVENT_FIELDS if is_blank(fields.get(f))]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                missing_fields=missing,
            )

        cleaned = _clean_fields({f: fields[f] for f in REQUIRED_EVENT_FIELDS})
        doc = normalize_event(cleaned, ChangeSet.of(REQUIRED_EVENT_FIELDS))

        if await self._slug_taken(doc["slug"]):
            raise ConflictError(f"An event with slug '{doc['slug']}' already exists")

        now = _utcnow()
        doc = {"id": _new_id(), **doc, "createdAt": now, "updatedAt": now}
        try:
            await self._db.execute(
                "INSERT INTO events (id, slug, created_at, data) VALUES (?, ?, ?, ?)",
                (doc["id"], doc["slug"], now, json.dumps(doc)),
            )
        except sqlite3.IntegrityError as exc:
            raise ConflictError(
                f"An event with slug '{doc['slug']}' already exists"
            ) from exc
        return doc

    async def update(self, slug: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply a partial change-set. Only fields whose value actually changes
        are re-validated and re-normalised (title -> slug, date, time).
        """
        current = await self.find_by_slug(slug)

        unknown = sorted(set(changes) - MUTABLE_EVENT_FIELDS)
        if unknown:
            raise ValidationError(
                f"Fields cannot be updated: {', '.join(unknown)}",
                field_name=unknown[0],
            )

        touched = {k: v for k, v in changes.items() if current.get(k) != v}
        if not touched:
            return current

        cleaned = _clean_fields(touched)
        doc = normalize_event({**current, **cleaned}, ChangeSet.of(cleaned))

        if doc["slug"] != current["slug"] and await self._slug_taken(doc["slug"]):
            raise ConflictError(f"An event with slug '{doc['slug']}' already exists")

        doc["updatedAt"] = _utcnow()
        try:
            await self._db.execute(
                "UPDATE events SET slug = ?, data = ? WHERE id = ?",
                (doc["slug"], json.dumps(doc), doc["id"]),
            )
        except sqlite3.IntegrityError as exc:
            raise ConflictError(
                f"An event with slug '{doc['slug']}' already exists"
            ) from exc
        return doc

    async def find_by_slug(self, slug: str) -> Dict[str, Any]:
        validate_slug(slug)
        row = await self._db.fetch_one("SELECT data FROM events WHERE slug = ?", (slug,))
        doc = _load(row)
        if doc is None:
            raise NotFoundError(f"Event with slug '{slug}' not found")
        return doc

    async def find_by_id(self, event_id: str) -> Optional[Dict[str, Any]]:
        row = await self._db.fetch_one("SELECT data FROM events WHERE id = ?", (event_id,))
        return _load(row)

    async def list(self) -> List[Dict[str, Any]]:
        rows = await self._db.fetch_all(
            "SELECT data FROM events ORDER BY created_at DESC, rowid DESC"
        )
        return [json.loads(r["data"]) for r in rows]

    async def find_similar_by_slug(self, slug: str) -> List[Dict[str, Any]]:
        """Events sharing at least one tag with ``slug``; empty if unknown."""
        if not slug or not SLUG_RE.match(slug):
            return []
        row = await self._db.fetch_one("SELECT data FROM events WHERE slug = ?", (slug,))
        event = _load(row)
        if event is None:
            return []
        rows = await self._db.fetch_all(
            """
            SELECT e.data FROM events e
            WHERE e.id != ?
              AND EXISTS (
                SELECT 1 FROM json_each(e.data, '$.tags') t
                WHERE t.value IN (SELECT value FROM json_each(?))
              )
            ORDER BY e.created_at DESC, e.rowid DESC
            """,
            (event["id"], json.dumps(event.get("tags") or [])),
        )
        return [json.loads(r["data"]) for r in rows]

    async def _slug_taken(self, slug: str) -> bool:
        row = await self._db.fetch_one("SELECT 1 FROM events WHERE slug = ?", (slug,))
        return row is not None


# ---------- Bookings ----------

class BookingRepository:
    """
    Bookings reference events by id only. The existence check and the
    insert are not atomic; events are never deleted so this is not a
    live race today.
    """

    def __init__(self, db: Database, events: EventRepository | None = None) -> None:
        self._db = db
        self._events = events or EventRepository(db)

    async def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        event_id = str(fields.get("eventId") or "").strip()
        email = str(fields.get("email") or "").strip().lower()

        missing = [n for n, v in (("eventId", event_id), ("email", email)) if not v]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                missing_fields=missing,
            )
        if not EMAIL_RE.match(email):
            raise ValidationError(
                "Please provide a valid email address", field_name="email"
            )
        if await self._events.find_by_id(event_id) is None:
            raise ValidationError(
                f"Event with ID {event_id} does not exist", field_name="eventId"
            )

        now = _utcnow()
        doc = {
            "id": _new_id(),
            "eventId": event_id,
            "email": email,
            "createdAt": now,
            "updatedAt": now,
        }
        await self._db.execute(
            "INSERT INTO bookings (id, event_id, created_at, data) VALUES (?, ?, ?, ?)",
            (doc["id"], event_id, now, json.dumps(doc)),
        )
        return doc

    async def list_for_event(self, event_id: str) -> List[Dict[str, Any]]:
        rows = await self._db.fetch_all(
            "SELECT data FROM bookings WHERE event_id = ? ORDER BY created_at DESC, rowid DESC",
            (event_id,),
        )
        return [json.loads(r["data"]) for r in rows]

    async def count_for_event(self, event_id: str) -> int:
        row = await self._db.fetch_one(
            "SELECT COUNT(*) AS n FROM bookings WHERE event_id = ?", (event_id,)
        )
        return int(row["n"]) if row else 0
