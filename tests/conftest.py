"""Shared fixtures for the portfolio viewer test suite."""
from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT))

from portfolio_viewer.app import create_app
from portfolio_viewer.models import ResolvedPortfolio, normalize_access_code
from portfolio_viewer.repository import PortfolioNotFound, PortfolioRepository, RepositoryUnavailable

FIXTURE_FILE = Path(__file__).parent / "fixtures" / "portfolio-fixture.json"


class StubRepository(PortfolioRepository):
    """In-memory repository serving the fixture profiles; records every lookup."""

    def __init__(self, profiles):
        super().__init__({})
        self.profiles = {p["code"].lower(): p for p in profiles}
        self.calls: list[str] = []
        self.unavailable = False

    def resolve(self, code: str) -> ResolvedPortfolio:
        self.calls.append(code)
        if self.unavailable:
            raise RepositoryUnavailable("stub is down")
        profile = self.profiles.get(normalize_access_code(code))
        if profile is None:
            raise PortfolioNotFound(code)
        return ResolvedPortfolio.from_payload(
            {"code": profile["code"], "data": profile["portfolio"], "available_views": 19},
            requested_code=code,
        )


@pytest.fixture(scope="session")
def fixture_data():
    return json.loads(FIXTURE_FILE.read_text(encoding="utf-8"))


@pytest.fixture(scope="session")
def fixture_path():
    return FIXTURE_FILE


@pytest.fixture
def primary_profile(fixture_data):
    return fixture_data["profiles"][0]


@pytest.fixture
def secondary_profile(fixture_data):
    return fixture_data["profiles"][1]


@pytest.fixture
def stub_repository(fixture_data):
    return StubRepository(fixture_data["profiles"])


@pytest.fixture
def app(monkeypatch, stub_repository):
    monkeypatch.setenv("SECRET_KEY", "test_secret_key_for_testing_only")
    monkeypatch.setenv("FLASK_ENV", "local_test")

    app = create_app(
        repository=stub_repository,
        config={
            "TESTING": True,
            "WTF_CSRF_ENABLED": False,
            "RATELIMIT_ENABLED": False,
        },
    )
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def mock_portfolio_api_server():
    """Running mock portfolio service on a free local port."""
    from ui_tests.mock_portfolio_api import MockPortfolioAPIServer, reset_mock_state

    reset_mock_state()
    server = MockPortfolioAPIServer()
    server.start()

    yield server

    server.stop()
    reset_mock_state()
