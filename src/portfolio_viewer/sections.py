"""
Section views: how each content section of a walkthrough is presented.

Two shapes:
- PaginatedSectionView: one item at a time, forward-only "Next >"
  (Experience, Projects)
- SingleSectionView: the whole collection on one screen
  (Education, Certifications)

Views are stateless; the walkthrough controller owns the item index.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Sequence

from .models import PortfolioDocument, Section

logger = logging.getLogger(__name__)


class SectionView(ABC):
    """Presentation of one content section."""

    paginated = False

    def __init__(self, section: Section, title: str, collection: str, item_template: str):
        """
        Args:
            section: Section this view renders
            title: Heading shown on the screen
            collection: PortfolioDocument attribute holding the items
            item_template: Jinja template rendering a single item
        """
        self.section = section
        self.title = title
        self.collection = collection
        self.item_template = item_template

    def items(self, document: PortfolioDocument) -> Sequence[Any]:
        return getattr(document, self.collection)

    def count(self, document: PortfolioDocument) -> int:
        return len(self.items(document))

    def clamp_index(self, document: PortfolioDocument, item_index: int) -> int:
        """Bring an index into [0, count-1] (0 for an empty collection)."""
        last = max(self.count(document) - 1, 0)
        return min(max(item_index, 0), last)

    def has_next(self, document: PortfolioDocument, item_index: int) -> bool:
        return False

    @abstractmethod
    def context(self, document: PortfolioDocument, item_index: int) -> Dict[str, Any]:
        """Template context for the screen."""
        pass


class PaginatedSectionView(SectionView):
    """Shows the item at the current index and pages forward through the rest."""

    paginated = True

    def has_next(self, document: PortfolioDocument, item_index: int) -> bool:
        return item_index + 1 < self.count(document)

    def next_index(self, document: PortfolioDocument, item_index: int) -> int:
        """Index after advancing once; unchanged at the last item."""
        if self.has_next(document, item_index):
            return item_index + 1
        return item_index

    def context(self, document: PortfolioDocument, item_index: int) -> Dict[str, Any]:
        items = self.items(document)
        index = self.clamp_index(document, item_index)
        return {
            'title': self.title,
            'item_template': self.item_template,
            'paginated': True,
            'item': items[index] if items else None,
            'items': [],
            'position': index + 1 if items else 0,
            'total': len(items),
            'has_next': self.has_next(document, index),
        }


class SingleSectionView(SectionView):
    """Shows every item of the collection at once."""

    def context(self, document: PortfolioDocument, item_index: int = 0) -> Dict[str, Any]:
        items = self.items(document)
        return {
            'title': self.title,
            'item_template': self.item_template,
            'paginated': False,
            'item': None,
            'items': list(items),
            'position': 0,
            'total': len(items),
            'has_next': False,
        }


SECTION_VIEWS: Dict[Section, SectionView] = {
    Section.EXPERIENCE: PaginatedSectionView(
        Section.EXPERIENCE, 'Experience', 'experience', 'items/experience.html'
    ),
    Section.PROJECTS: PaginatedSectionView(
        Section.PROJECTS, 'Projects', 'project', 'items/project.html'
    ),
    Section.EDUCATION: SingleSectionView(
        Section.EDUCATION, 'Education', 'education', 'items/education.html'
    ),
    Section.CERTIFICATIONS: SingleSectionView(
        Section.CERTIFICATIONS, 'Certifications', 'certifications', 'items/certification.html'
    ),
}


def get_section_view(section: Section) -> SectionView | None:
    """View for a content section (None for intro, main menu and end)."""
    return SECTION_VIEWS.get(section)
