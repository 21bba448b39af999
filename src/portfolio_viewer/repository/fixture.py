"""
Fixture-file portfolio repository for local demos.

Serves the profiles of a JSON file shaped like the test fixture:

    {"profiles": [{"code": "...", "portfolio": {...}}, ...]}

The file is read on every lookup so edits show up without a restart.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict

from ..models import PortfolioDocument, ResolvedPortfolio, mask_access_code, normalize_access_code
from .base import PortfolioNotFound, PortfolioRepository, RepositoryError, RepositoryUnavailable

logger = logging.getLogger(__name__)


class FixturePortfolioRepository(PortfolioRepository):
    """Repository backed by a local JSON fixture file."""

    def __init__(self, config: Dict[str, Any] | None = None):
        super().__init__(config)
        path = self.config.get('path')
        if not path:
            raise RepositoryError("Fixture repository requires a 'path'")
        self.path = Path(path)

    def _load_profiles(self) -> list[Dict[str, Any]]:
        try:
            with self.path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Cannot read portfolio fixture {self.path}: {e}")
            raise RepositoryUnavailable(f"Cannot read fixture file: {e}") from e

        profiles = data.get('profiles') if isinstance(data, dict) else None
        if not isinstance(profiles, list):
            raise RepositoryUnavailable(f"Fixture file {self.path} has no 'profiles' list")
        return profiles

    def resolve(self, code: str) -> ResolvedPortfolio:
        wanted = normalize_access_code(code)

        for profile in self._load_profiles():
            if str(profile.get('code', '')).lower() != wanted:
                continue
            try:
                document = PortfolioDocument.from_dict(profile.get('portfolio'))
            except ValueError as e:
                raise RepositoryUnavailable(f"Malformed fixture profile: {e}") from e
            logger.info(f"Resolved portfolio for {mask_access_code(code)} from {self.path.name}")
            return ResolvedPortfolio(
                code=profile['code'],
                document=document,
                available_views=profile.get('available_views'),
            )

        logger.info(f"Portfolio lookup for {mask_access_code(code)}: not found in {self.path.name}")
        raise PortfolioNotFound(code)
