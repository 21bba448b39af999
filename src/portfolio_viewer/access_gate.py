"""
Access gate: exchanges an access code for a portfolio.

Flow:
1. Visitor submits a code (form post or deep link)
2. Format is checked locally; bad codes never reach the repository
3. Valid codes are resolved with exactly one repository call
4. Not-found and transport failures keep the visitor on the gate
   with a specific message; success hands the portfolio over

Only one submission per gate can be in flight. A second submit while the
first is still resolving is rejected, not queued.
"""
import logging
import threading
from enum import Enum
from typing import NamedTuple, Optional

from .models import (
    ERROR_INVALID_FORMAT,
    ResolvedPortfolio,
    mask_access_code,
    validate_access_code,
)
from .repository import (
    PortfolioNotFound,
    PortfolioRepository,
    RepositoryError,
)

logger = logging.getLogger(__name__)

ERROR_NOT_FOUND = "Access code not found."
ERROR_UNAVAILABLE = "Portfolio service is unavailable. Please try again later."
ERROR_BUSY = "A code is already being checked. Please wait."


class GateState(str, Enum):
    IDLE = 'idle'
    SUBMITTING = 'submitting'
    ERROR = 'error'
    RESOLVED = 'resolved'


class GateErrorKind(str, Enum):
    INVALID_FORMAT = 'invalid_format'
    NOT_FOUND = 'not_found'
    UNAVAILABLE = 'unavailable'
    BUSY = 'busy'


class GateResult(NamedTuple):
    """Result of a gate submission."""
    success: bool
    resolved: Optional[ResolvedPortfolio] = None
    error: Optional[str] = None
    kind: Optional[GateErrorKind] = None


class AccessGate:
    """Code-entry state machine in front of a portfolio repository."""

    def __init__(self, repository: PortfolioRepository):
        self.repository = repository
        self.state = GateState.IDLE
        self.error: Optional[str] = None
        self.error_kind: Optional[GateErrorKind] = None
        self.last_code: Optional[str] = None
        self._in_flight = threading.Lock()

    @property
    def is_submitting(self) -> bool:
        return self.state is GateState.SUBMITTING

    def _fail(self, kind: GateErrorKind, message: str) -> GateResult:
        self.state = GateState.ERROR
        self.error = message
        self.error_kind = kind
        return GateResult(success=False, error=message, kind=kind)

    def submit(self, raw_code: Optional[str]) -> GateResult:
        """
        Submit an access code.

        Returns:
            GateResult with the resolved portfolio on success, or the
            error message and kind on failure
        """
        is_valid, error_msg = validate_access_code(raw_code)
        if not is_valid:
            logger.info(f"Rejected access code {mask_access_code(raw_code)}: invalid format")
            return self._fail(GateErrorKind.INVALID_FORMAT, error_msg or ERROR_INVALID_FORMAT)

        code = raw_code.strip()

        if not self._in_flight.acquire(blocking=False):
            logger.warning(f"Rejected access code {mask_access_code(code)}: another submission is in flight")
            # The running submission owns the gate state; only report.
            return GateResult(success=False, error=ERROR_BUSY, kind=GateErrorKind.BUSY)

        try:
            self.state = GateState.SUBMITTING
            self.last_code = code
            self.error = None
            self.error_kind = None

            try:
                resolved = self.repository.resolve(code)
            except PortfolioNotFound:
                return self._fail(GateErrorKind.NOT_FOUND, ERROR_NOT_FOUND)
            except RepositoryError as e:
                logger.error(f"Portfolio repository unavailable for {mask_access_code(code)}: {e}")
                return self._fail(GateErrorKind.UNAVAILABLE, ERROR_UNAVAILABLE)

            self.state = GateState.RESOLVED
            logger.info(f"Access code {mask_access_code(code)} resolved to portfolio '{resolved.code}'")
            return GateResult(success=True, resolved=resolved)
        finally:
            if self.state is GateState.SUBMITTING:
                # resolve() raised something unexpected
                self.state = GateState.ERROR
            self._in_flight.release()

    def reset(self) -> None:
        """Return the gate to its idle state."""
        self.state = GateState.IDLE
        self.error = None
        self.error_kind = None
        self.last_code = None
