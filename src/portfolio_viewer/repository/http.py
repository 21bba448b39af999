"""
HTTP portfolio repository.

Talks to the portfolio service: `GET {base_url}/{code}` returns
200 `{code, data, available_views}` or 404 `{error}`.
"""
import logging
from typing import Any, Dict
from urllib.parse import quote

import requests

from ..models import ResolvedPortfolio, mask_access_code, normalize_access_code
from .base import PortfolioNotFound, PortfolioRepository, RepositoryUnavailable

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://127.0.0.1:5000"
DEFAULT_TIMEOUT = 10


class HttpPortfolioRepository(PortfolioRepository):
    """Client for the portfolio service."""

    def __init__(self, config: Dict[str, Any] | None = None):
        super().__init__(config)
        self.base_url = str(self.config.get('base_url') or DEFAULT_API_URL).rstrip('/')
        self.timeout = float(self.config.get('timeout') or DEFAULT_TIMEOUT)
        self.session: requests.Session = self.config.get('session') or requests.Session()

    def _url_for(self, code: str) -> str:
        return f"{self.base_url}/{quote(normalize_access_code(code), safe='')}"

    def resolve(self, code: str) -> ResolvedPortfolio:
        url = self._url_for(code)
        masked = mask_access_code(code)

        try:
            response = self.session.get(url, timeout=self.timeout, headers={'Accept': 'application/json'})
        except requests.RequestException as e:
            logger.error(f"Portfolio lookup for {masked} failed: {e}")
            raise RepositoryUnavailable(f"Request failed: {e}") from e

        if response.status_code == 404:
            logger.info(f"Portfolio lookup for {masked}: not found")
            raise PortfolioNotFound(code)

        if response.status_code != 200:
            logger.error(f"Portfolio lookup for {masked} returned HTTP {response.status_code}")
            raise RepositoryUnavailable(f"Unexpected status {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"Portfolio lookup for {masked} returned a non-JSON body")
            raise RepositoryUnavailable("Response is not valid JSON") from e

        try:
            resolved = ResolvedPortfolio.from_payload(payload, requested_code=code)
        except ValueError as e:
            logger.error(f"Portfolio lookup for {masked} returned a malformed document: {e}")
            raise RepositoryUnavailable(f"Malformed portfolio document: {e}") from e

        logger.info(
            f"Resolved portfolio for {masked} "
            f"({len(resolved.document.experience)} experience, {len(resolved.document.project)} projects, "
            f"available_views={resolved.available_views})"
        )
        return resolved
