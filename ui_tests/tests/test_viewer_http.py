"""Plain HTTP checks against a live viewer (no browser)."""
import httpx
import pytest

from ui_tests.config import settings
from ui_tests.mock_portfolio_api import set_failure_mode


@pytest.fixture
def http(viewer_server):
    with httpx.Client(base_url=settings.url("/"), follow_redirects=False, timeout=10) as client:
        yield client


def test_health(http):
    response = http.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.parametrize("path,status", [
    ("/zzz999", 404),
    ("/abc12", 400),
])
def test_deep_link_failure_statuses(http, path, status):
    assert http.get(path).status_code == status


def test_deep_link_success_redirects_and_sets_cookie(http, portfolio_api):
    response = http.get("/ada123")

    assert response.status_code == 302
    assert response.headers["location"].endswith("/walkthrough")
    assert "session" in response.cookies
    assert portfolio_api.requests == ["ada123"]


def test_deep_link_when_service_fails(http, portfolio_api):
    set_failure_mode("not_json")

    assert http.get("/ada123").status_code == 503


def test_walkthrough_post_requires_csrf_token(http):
    http.get("/ada123")

    response = http.post("/walkthrough", data={"action": "proceed"})

    assert response.status_code == 400
