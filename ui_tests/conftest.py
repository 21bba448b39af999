import sys
import threading
from contextlib import AsyncExitStack
from pathlib import Path

import pytest
import pytest_asyncio
from werkzeug.serving import make_server

ROOT = Path(__file__).resolve().parents[1]
for path in (ROOT / "src", ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from ui_tests.browser import browser_session
from ui_tests.config import settings
from ui_tests.mock_portfolio_api import MockPortfolioAPIServer, reset_mock_state


# ============================================================================
# Mock portfolio service + viewer under test
# ============================================================================

@pytest.fixture(scope='function')
def portfolio_api():
    """Running mock portfolio service seeded with the fixture profiles."""
    reset_mock_state()
    server = MockPortfolioAPIServer()
    server.start()

    yield server

    server.stop()
    reset_mock_state()


class ViewerServer:
    """Serves a viewer app from a background thread on a free port."""

    def __init__(self, app, host='127.0.0.1'):
        self.host = host
        self.server = make_server(host, 0, app, threaded=True)
        self.port = self.server.server_port
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)

    def start(self):
        self.thread.start()

    def stop(self):
        self.server.shutdown()
        self.server.server_close()
        self.thread.join(timeout=5)

    @property
    def url(self):
        return f"http://{self.host}:{self.port}"


@pytest.fixture(scope='function')
def viewer_server(monkeypatch, portfolio_api):
    """Viewer wired to the mock service over HTTP, CSRF on, rate limit off."""
    from portfolio_viewer.app import create_app
    from portfolio_viewer.repository import HttpPortfolioRepository

    monkeypatch.setenv("SECRET_KEY", "ui_test_secret_key")
    monkeypatch.setenv("FLASK_ENV", "local_test")

    app = create_app(
        repository=HttpPortfolioRepository({'base_url': portfolio_api.url, 'timeout': 5}),
        config={'RATELIMIT_ENABLED': False},
    )
    server = ViewerServer(app)
    server.start()

    with settings.use_base_url(server.url):
        yield server

    server.stop()


# ============================================================================
# Browser fixtures
# ============================================================================

async def _open_browser(stack):
    try:
        return await stack.enter_async_context(browser_session())
    except Exception as exc:
        pytest.skip(f"Playwright browser unavailable: {exc}")


@pytest_asyncio.fixture()
async def browser(viewer_server):
    """Browser with its own cookie jar, pointed at the viewer."""
    async with AsyncExitStack() as stack:
        yield await _open_browser(stack)


@pytest_asyncio.fixture()
async def second_browser(viewer_server):
    """A second, independent visitor."""
    async with AsyncExitStack() as stack:
        yield await _open_browser(stack)
