"""Shared test fixtures."""

import os
import uuid

os.environ.setdefault("SUPABASE_URL", "https://fake.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-bytes-for-hs256")
os.environ.setdefault("RATE_LIMIT_STANDARD", "10000")
os.environ.setdefault("RATE_LIMIT_UPLOAD", "10000")

import pytest
from fastapi.testclient import TestClient

from meari.auth import routes as auth_routes
from meari.db import client as db_client
from meari.main import app
from meari.unread.registry import TrackerRegistry
from fakes import WEBM_HEADER, FakeSupabase, auth_header_for


@pytest.fixture
def fake_db(monkeypatch):
    db = FakeSupabase()
    monkeypatch.setattr(db_client, "_client", db)
    monkeypatch.setattr(auth_routes, "create_anon_client", lambda: db)
    return db


@pytest.fixture
def client(fake_db):
    app.state.trackers = TrackerRegistry()
    return TestClient(app)


@pytest.fixture
def user_id():
    return str(uuid.uuid4())


@pytest.fixture
def other_id():
    return str(uuid.uuid4())


@pytest.fixture
def auth_header(user_id):
    return auth_header_for(user_id)


@pytest.fixture
def webm_audio():
    """A small payload that passes the audio checks."""
    return WEBM_HEADER + b"audio" + b"\x01" * 512
