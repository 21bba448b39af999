"""
Portfolio repositories.

Provides:
- PortfolioRepository: the `resolve(code)` interface
- HttpPortfolioRepository: the portfolio service client
- FixturePortfolioRepository: local JSON fixture file
"""
from .base import (
    PortfolioNotFound,
    PortfolioRepository,
    RepositoryError,
    RepositoryUnavailable,
)
from .fixture import FixturePortfolioRepository
from .http import HttpPortfolioRepository
from .registry import get_available_providers, get_repository

__all__ = [
    'FixturePortfolioRepository',
    'HttpPortfolioRepository',
    'PortfolioNotFound',
    'PortfolioRepository',
    'RepositoryError',
    'RepositoryUnavailable',
    'get_available_providers',
    'get_repository',
]
