"""Shared pytest fixtures."""

import asyncio
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

from eventhub.config import settings
from eventhub.db import connection_cache, open_database
from eventhub.main import app
from eventhub.services.uploads import get_uploader

IMAGE_URL = "https://res.cloudinary.com/demo/image/upload/DevEvents/banner.png"


def event_fields(**overrides: Any) -> Dict[str, Any]:
    fields: Dict[str, Any] = {
        "title": "PyCon Lithuania 2026",
        "description": "The Python conference of the Baltics.",
        "overview": "Two days of talks and one day of sprints.",
        "venue": "Vilnius Tech Park",
        "location": "Vilnius, Lithuania",
        "date": "2026-04-22",
        "time": "9:30 AM",
        "mode": "offline",
        "audience": "Python developers",
        "agenda": ["Registration", "Keynote", "Talks"],
        "organizer": "PyCon LT team",
        "tags": ["python", "conference"],
        "image": IMAGE_URL,
    }
    fields.update(overrides)
    return fields


class FakeUploader:
    def __init__(self) -> None:
        self.calls: List[tuple] = []

    def upload(self, content: bytes, filename: str = "image") -> str:
        self.calls.append((filename, content))
        return IMAGE_URL


@pytest.fixture
def db(tmp_path):
    database = asyncio.run(open_database(str(tmp_path / "events.db")))
    yield database
    database.close()


@pytest.fixture
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture
def client(tmp_path, monkeypatch, uploader):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "api.db"))
    monkeypatch.setattr(settings, "app_env", "dev")
    connection_cache.reset()
    app.dependency_overrides[get_uploader] = lambda: uploader
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    if connection_cache.connection is not None:
        connection_cache.connection.close()
    connection_cache.reset()
