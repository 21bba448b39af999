"""
Viewer sessions.

A ViewerSession is everything one browser owns: its access gate, the
resolved portfolio and the walkthrough over it. Sessions live in an
in-process SessionStore; the browser only carries the session id in
Flask's signed session cookie.
"""
import logging
import secrets
import threading
import time
from typing import Dict, Optional

from .access_gate import AccessGate, GateResult, GateState
from .models import ResolvedPortfolio
from .repository import PortfolioRepository
from .walkthrough import WalkthroughController

logger = logging.getLogger(__name__)

SESSION_ID_BYTES = 24
DEFAULT_SESSION_LIFETIME = 3600


class ViewerSession:
    """Gate + walkthrough for a single visitor."""

    def __init__(self, session_id: str, repository: PortfolioRepository):
        self.session_id = session_id
        self.gate = AccessGate(repository)
        self.portfolio: Optional[ResolvedPortfolio] = None
        self.walkthrough: Optional[WalkthroughController] = None
        self.last_seen = time.monotonic()

    @property
    def is_resolved(self) -> bool:
        return self.portfolio is not None

    def touch(self) -> None:
        self.last_seen = time.monotonic()

    def open(self, raw_code: Optional[str]) -> GateResult:
        """
        Run an access code through the gate.

        On success the previous portfolio (if any) is replaced and the
        walkthrough restarts at the intro. On failure the visitor is back on
        the gate with no portfolio.
        """
        result = self.gate.submit(raw_code)
        if result.success:
            self.portfolio = result.resolved
            self.walkthrough = WalkthroughController(result.resolved.document)
        elif self.gate.state is GateState.ERROR:
            # A rejected busy submit leaves the running one alone.
            self._discard()
        return result

    def _discard(self) -> None:
        self.portfolio = None
        self.walkthrough = None

    def reset(self) -> None:
        """Back to an empty gate."""
        self._discard()
        self.gate.reset()


class SessionStore:
    """Thread-safe in-process store of viewer sessions with idle expiry."""

    def __init__(self, repository: PortfolioRepository, lifetime: int = DEFAULT_SESSION_LIFETIME):
        self.repository = repository
        self.lifetime = lifetime
        self._sessions: Dict[str, ViewerSession] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _expired(self, viewer: ViewerSession, now: float) -> bool:
        return now - viewer.last_seen > self.lifetime

    def _evict_expired(self, now: float) -> None:
        stale = [sid for sid, viewer in self._sessions.items() if self._expired(viewer, now)]
        for sid in stale:
            del self._sessions[sid]
        if stale:
            logger.info(f"Evicted {len(stale)} idle viewer session(s)")

    def create(self) -> ViewerSession:
        session_id = secrets.token_urlsafe(SESSION_ID_BYTES)
        viewer = ViewerSession(session_id, self.repository)
        with self._lock:
            self._evict_expired(time.monotonic())
            self._sessions[session_id] = viewer
        logger.debug("Created viewer session")
        return viewer

    def get(self, session_id: Optional[str]) -> Optional[ViewerSession]:
        """Return a live session and refresh its idle timer."""
        if not session_id:
            return None
        with self._lock:
            now = time.monotonic()
            self._evict_expired(now)
            viewer = self._sessions.get(session_id)
            if viewer is not None:
                viewer.touch()
            return viewer

    def get_or_create(self, session_id: Optional[str]) -> ViewerSession:
        return self.get(session_id) or self.create()

    def discard(self, session_id: Optional[str]) -> None:
        if not session_id:
            return
        with self._lock:
            self._sessions.pop(session_id, None)
