"""Pytest configuration and fixtures."""

import os
from collections.abc import AsyncGenerator, Generator
from datetime import UTC, datetime

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Set test environment before importing app modules
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SEED_DEMO_DATA"] = "true"
os.environ["DISPLAY_TIMEZONE"] = "UTC"
os.environ["TRAINING_PROVIDER"] = "stub"
os.environ["API_BASE_URL"] = "http://testserver"


@pytest.fixture(scope="session")
def test_client() -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app."""
    from engage_dashboard.main import app

    with TestClient(app) as client:
        yield client


@pytest.fixture
def fresh_app() -> Generator[FastAPI, None, None]:
    """The app with a newly seeded store, restored afterwards."""
    from engage_dashboard.main import app
    from engage_dashboard.services.storage import build_store

    original = app.state.store
    app.state.store = build_store(seed=True)
    try:
        yield app
    finally:
        app.state.store = original


@pytest.fixture
def api_client(fresh_app: FastAPI) -> TestClient:
    """Test client over a freshly seeded store; safe for tests that write."""
    return TestClient(fresh_app)


@pytest_asyncio.fixture
async def dashboard_client(fresh_app: FastAPI) -> AsyncGenerator:
    """Dashboard client talking to the app in-process."""
    from engage_dashboard.client import DashboardClient

    transport = httpx.ASGITransport(app=fresh_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield DashboardClient(http_client=http)


@pytest.fixture
def store():
    """An empty in-memory store."""
    from engage_dashboard.services.storage import MemoryStore

    return MemoryStore()


@pytest.fixture
def ai_provider():
    """Get a stub AI provider."""
    from engage_dashboard.adapters.ai.stub import StubAIProvider

    return StubAIProvider()


@pytest.fixture
def now() -> datetime:
    """A fixed reference instant."""
    return datetime(2024, 6, 20, 12, 0, tzinfo=UTC)


def make_model_payload(**overrides) -> dict:
    """Wire-format engagement model."""
    pattern = {
        "topics": ["growth"],
        "formats": ["image"],
        "timing": {"daysOfWeek": ["Monday"], "timeOfDay": ["evening"]},
        "contentAttributes": {
            "length": "short",
            "mediaTypes": ["image"],
            "toneAttributes": ["enthusiastic"],
        },
    }
    payload = {
        "modelId": "model-0001",
        "trainedOn": "2024-06-20T12:00:00Z",
        "lookbackPeriod": 90,
        "platforms": ["instagram", "twitter", "facebook"],
        "contentPatterns": {"highEngagement": pattern, "lowEngagement": pattern},
        "audienceAffinities": ["marketing"],
        "predictedPerformanceFactors": ["Posting on Monday evening"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def model_payload():
    """Factory for wire-format engagement models."""
    return make_model_payload
