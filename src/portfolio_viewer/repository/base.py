"""
Abstract base class for portfolio repositories.

A repository resolves an access code to a portfolio document. Every
provider (HTTP service, local fixture file) must implement this interface
so the gate never depends on transport details.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict

from ..models import ResolvedPortfolio

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Base exception for repository failures."""
    pass


class PortfolioNotFound(RepositoryError):
    """No portfolio matches the requested access code."""

    def __init__(self, code: str):
        super().__init__(f"No portfolio for code {code!r}")
        self.code = code


class RepositoryUnavailable(RepositoryError):
    """The repository could not answer (transport error, bad status, malformed body)."""
    pass


class PortfolioRepository(ABC):
    """Abstract base class for portfolio repositories."""

    def __init__(self, config: Dict[str, Any] | None = None):
        """Initialize repository with provider-specific configuration."""
        self.config = config or {}

    @abstractmethod
    def resolve(self, code: str) -> ResolvedPortfolio:
        """Resolve an access code to a portfolio.

        Performs exactly one lookup per call; nothing is cached between calls.

        Args:
            code: Access code (already format-validated by the caller)

        Returns:
            ResolvedPortfolio with the document and service metadata

        Raises:
            PortfolioNotFound: If no portfolio matches the code
            RepositoryUnavailable: If the lookup itself failed
        """
        pass
