"""
Repository registry.

Maps provider codes to repository implementations so the application
factory can build the configured one.
"""

import logging
from typing import Any, Dict, Type

from .base import PortfolioRepository, RepositoryError
from .fixture import FixturePortfolioRepository
from .http import HttpPortfolioRepository

logger = logging.getLogger(__name__)


REPOSITORY_REGISTRY: Dict[str, Type[PortfolioRepository]] = {
    'http': HttpPortfolioRepository,
    'fixture': FixturePortfolioRepository,
}


def get_repository(provider_code: str, config: Dict[str, Any]) -> PortfolioRepository:
    """Get repository instance by provider code and configuration.

    Raises:
        RepositoryError: If the provider is unknown
    """
    repository_class = REPOSITORY_REGISTRY.get(provider_code)
    if not repository_class:
        raise RepositoryError(f"Unknown portfolio repository provider: {provider_code}")

    logger.info(f"Using portfolio repository provider '{provider_code}'")
    return repository_class(config)


def get_available_providers() -> list[str]:
    return sorted(REPOSITORY_REGISTRY)
