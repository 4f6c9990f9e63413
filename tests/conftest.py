import pytest
from fastapi.testclient import TestClient

from database import supabase_client
from tests.fake_supabase import FakeSupabase


@pytest.fixture
def fake_db(monkeypatch) -> FakeSupabase:
    """Route every repository call to a fresh in-memory store."""
    db = FakeSupabase()
    monkeypatch.setattr(supabase_client, "get_supabase_client", lambda: db)
    return db


@pytest.fixture
def client(fake_db) -> TestClient:
    from app.main import app
    return TestClient(app)


@pytest.fixture
def customer(fake_db) -> dict:
    from app.services import loyalty
    return loyalty.register_customer("+254700000001", "Asha")


@pytest.fixture
def business(fake_db) -> dict:
    from app.services import loyalty
    return loyalty.register_business("+254711111111", "Glow Salon", "salon")
