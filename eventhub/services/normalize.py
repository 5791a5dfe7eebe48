from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable

from dateutil import parser as date_parser

from eventhub.errors import ValidationError

_slug_strip_re = re.compile(r"[^\w\s-]", re.ASCII)
_slug_collapse_re = re.compile(r"[\s_-]+", re.ASCII)
_strict_time_re = re.compile(r"^[0-9]{2}:[0-9]{2}$")
# unanchored: "at 2:30 PM EST" reads as 14:30
_loose_time_re = re.compile(
    r"([0-9]{1,2}):([0-9]{2})(?::[0-9]{2})?(?:\s*(AM|PM))?", re.IGNORECASE
)


@dataclass(frozen=True)
class ChangeSet:
    """Names of the event fields touched by a create or update."""

    fields: frozenset[str]

    @classmethod
    def of(cls, names: Iterable[str]) -> "ChangeSet":
        return cls(fields=frozenset(names))

    def touches(self, name: str) -> bool:
        return name in self.fields


def derive_slug(title: str) -> str:
    s = title.lower().strip()
    s = _slug_strip_re.sub("", s)
    s = _slug_collapse_re.sub("-", s)
    return s.strip("-")


def normalize_date(value: str) -> str:
    """
    Canonicalise a loosely formatted date to YYYY-MM-DD.
    Date-only ISO strings are taken verbatim; anything else goes through
    dateutil and keeps the calendar date as written (no UTC shift).
    """
    text = (value or "").strip()
    if not text:
        raise ValidationError(
            f"Invalid date format: {value!r}. Expected ISO format (YYYY-MM-DD)",
            field_name="date",
        )
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError:
        pass
    try:
        return date_parser.parse(text).date().isoformat()
    except (ValueError, OverflowError) as exc:
        raise ValidationError(
            f"Invalid date format: {value!r}. Expected ISO format (YYYY-MM-DD)",
            field_name="date",
        ) from exc


def normalize_time(value: str) -> str:
    """
    Canonicalise a time to 24-hour HH:MM.
    Strict HH:MM passes through; otherwise the first H:MM[:SS][ AM|PM]
    found anywhere in the text is used and any seconds are dropped.
    """
    text = (value or "").strip()

    if _strict_time_re.match(text):
        hours, minutes = (int(p) for p in text.split(":"))
        if 0 <= hours <= 23 and 0 <= minutes <= 59:
            return text

    m = _loose_time_re.search(text)
    if m:
        hours = int(m.group(1))
        minutes = int(m.group(2))
        ampm = (m.group(3) or "").upper()

        in_range = 0 <= minutes <= 59
        if ampm:
            in_range = in_range and 1 <= hours <= 12
        else:
            in_range = in_range and 0 <= hours <= 23

        if in_range:
            if ampm == "PM" and hours != 12:
                hours += 12
            elif ampm == "AM" and hours == 12:
                hours = 0
            return f"{hours:02d}:{minutes:02d}"

    raise ValidationError(
        f"Invalid time format: {value!r}. Expected HH:MM format",
        field_name="time",
    )


def normalize_event(doc: Dict[str, Any], changes: ChangeSet) -> Dict[str, Any]:
    """
    Return a copy of ``doc`` with derived/canonical fields refreshed.

    - slug is rebuilt when the title is touched or no slug exists yet
    - date and time are normalised only when touched
    """
    out = dict(doc)
    if changes.touches("title") or not out.get("slug"):
        out["slug"] = derive_slug(out.get("title") or "")
        if not out["slug"]:
            raise ValidationError(
                "Title must contain at least one letter or digit",
                field_name="title",
            )
    if changes.touches("date"):
        out["date"] = normalize_date(out.get("date") or "")
    if changes.touches("time"):
        out["time"] = normalize_time(out.get("time") or "")
    return out
