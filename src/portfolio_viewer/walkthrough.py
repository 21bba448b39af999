"""
Walkthrough controller: the state machine behind the portfolio screens.

Shape: a hub with a linear tail.

    INTRO --proceed--> MAIN_MENU
    MAIN_MENU --select--> EXPERIENCE | PROJECTS | EDUCATION --return--> MAIN_MENU
    MAIN_MENU --advance--> CERTIFICATIONS --advance--> END
    CERTIFICATIONS --return--> MAIN_MENU

Inside EXPERIENCE and PROJECTS, "advance" pages through the items instead
of leaving the section. END has no transitions.

Every Section must have an entry in TRANSITIONS and every content section
must return to MAIN_MENU; both are checked when the module is imported.
"""
import logging
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from .models import PortfolioDocument, Section, WalkthroughState
from .sections import SECTION_VIEWS, PaginatedSectionView, SectionView

logger = logging.getLogger(__name__)


class Action(str, Enum):
    PROCEED = 'proceed'
    SELECT = 'select'
    ADVANCE = 'advance'
    RETURN = 'return'


# Sections reachable from the hub by explicit selection, in menu order
HUB_SECTIONS = (Section.EXPERIENCE, Section.PROJECTS, Section.EDUCATION)

# SELECT is listed with the hub as a placeholder target; the chosen section
# must be one of HUB_SECTIONS.
TRANSITIONS: Dict[Section, Dict[Action, Optional[Section]]] = {
    Section.INTRO: {Action.PROCEED: Section.MAIN_MENU},
    Section.MAIN_MENU: {Action.SELECT: None, Action.ADVANCE: Section.CERTIFICATIONS},
    Section.EXPERIENCE: {Action.RETURN: Section.MAIN_MENU},
    Section.PROJECTS: {Action.RETURN: Section.MAIN_MENU},
    Section.EDUCATION: {Action.RETURN: Section.MAIN_MENU},
    Section.CERTIFICATIONS: {Action.ADVANCE: Section.END, Action.RETURN: Section.MAIN_MENU},
    Section.END: {},
}


def _check_transition_table() -> None:
    missing = [section.name for section in Section if section not in TRANSITIONS]
    if missing:
        raise RuntimeError(f"Walkthrough transition table has no entry for: {', '.join(missing)}")
    for section in (*HUB_SECTIONS, Section.CERTIFICATIONS):
        if TRANSITIONS[section].get(Action.RETURN) is not Section.MAIN_MENU:
            raise RuntimeError(f"Section {section.name} must return to MAIN_MENU")


_check_transition_table()


class WalkthroughError(Exception):
    """Base exception for walkthrough navigation errors."""
    pass


class InvalidTransition(WalkthroughError):
    """The requested action is not allowed from the current section."""

    def __init__(self, section: Section, action: Action, target: Optional[Section] = None):
        detail = f" to {target.name}" if target else ""
        super().__init__(f"Cannot {action.value}{detail} from {section.name}")
        self.section = section
        self.action = action
        self.target = target


class WalkthroughController:
    """Owns the walkthrough state for one resolved portfolio."""

    def __init__(self, document: PortfolioDocument):
        self.document = document
        self.state = WalkthroughState()
        self.visited: set[Section] = {self.state.section}

    @property
    def section(self) -> Section:
        return self.state.section

    @property
    def item_index(self) -> int:
        return self.state.item_index

    @property
    def is_finished(self) -> bool:
        return self.state.section is Section.END

    def current_view(self) -> Optional[SectionView]:
        return SECTION_VIEWS.get(self.state.section)

    def _enter(self, section: Section) -> None:
        previous = self.state.section
        self.state = WalkthroughState(section=section, item_index=0)
        self.visited.add(section)
        logger.debug(f"Walkthrough {previous.name} -> {section.name}")

    def can_advance(self) -> bool:
        """Whether "Next >" does anything from the current screen."""
        view = self.current_view()
        if isinstance(view, PaginatedSectionView):
            return view.has_next(self.document, self.state.item_index)
        return Action.ADVANCE in TRANSITIONS[self.state.section]

    def available_actions(self) -> FrozenSet[Action]:
        actions = set(TRANSITIONS[self.state.section])
        if self.can_advance():
            actions.add(Action.ADVANCE)
        return frozenset(actions)

    def proceed(self) -> Section:
        return self._follow(Action.PROCEED)

    def select(self, section: Section) -> Section:
        """Enter a hub section from the main menu."""
        if Action.SELECT not in TRANSITIONS[self.state.section] or section not in HUB_SECTIONS:
            raise InvalidTransition(self.state.section, Action.SELECT, section)
        self._enter(section)
        return section

    def advance(self) -> bool:
        """
        Press "Next >".

        In a paginated section this moves to the next item and returns
        False at the last item without changing anything. Elsewhere it
        follows the ADVANCE transition.

        Returns:
            True if the state changed

        Raises:
            InvalidTransition: If the current section has no forward step
        """
        view = self.current_view()
        if isinstance(view, PaginatedSectionView):
            next_index = view.next_index(self.document, self.state.item_index)
            if next_index == self.state.item_index:
                return False
            self.state.item_index = next_index
            return True

        self._follow(Action.ADVANCE)
        return True

    def return_to_menu(self) -> Section:
        return self._follow(Action.RETURN)

    def _follow(self, action: Action) -> Section:
        target = TRANSITIONS[self.state.section].get(action)
        if target is None:
            raise InvalidTransition(self.state.section, action)
        self._enter(target)
        return target

    def apply(self, action: Action, section: Optional[Section] = None) -> bool:
        """Dispatch an action by name (used by the web layer)."""
        if action is Action.PROCEED:
            self.proceed()
        elif action is Action.SELECT:
            if section is None:
                raise InvalidTransition(self.state.section, action)
            self.select(section)
        elif action is Action.ADVANCE:
            return self.advance()
        elif action is Action.RETURN:
            self.return_to_menu()
        else:
            raise InvalidTransition(self.state.section, action)
        return True

    def menu_entries(self) -> List[dict]:
        """Main menu buttons: hub sections with item counts and visited markers."""
        entries = []
        for section in HUB_SECTIONS:
            view = SECTION_VIEWS[section]
            entries.append({
                'section': section,
                'title': view.title,
                'count': view.count(self.document),
                'visited': section in self.visited,
            })
        return entries

    def screen_context(self) -> dict:
        """Everything a template needs to draw the current screen."""
        context = {
            'section': self.state.section,
            'document': self.document,
            'can_advance': self.can_advance(),
            'actions': self.available_actions(),
        }
        view = self.current_view()
        if view is not None:
            context['view'] = view.context(self.document, self.state.item_index)
        if self.state.section is Section.MAIN_MENU:
            context['menu'] = self.menu_entries()
        return context
