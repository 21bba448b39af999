"""
Data model for the portfolio viewer.

- AccessCode: 6 ASCII alphanumeric characters, case-insensitive for lookup
- PortfolioDocument: identity fields, summary and four ordered collections
  (experience, education, certifications, project)
- ResolvedPortfolio: a document plus the service metadata returned with it
- Section / WalkthroughState: where a visitor is inside a walkthrough

Documents are immutable once built. Collection order is the pagination order.
"""
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

# Access code format
ACCESS_CODE_LENGTH = 6
ACCESS_CODE_PATTERN = re.compile(rf'^[A-Za-z0-9]{{{ACCESS_CODE_LENGTH}}}$')

ERROR_INVALID_FORMAT = "Code must be exactly 6 alphanumeric characters."


def validate_access_code(code: str | None) -> tuple[bool, str | None]:
    """
    Validate access code format.

    Surrounding whitespace is ignored; anything else outside [A-Za-z0-9]
    or a length other than 6 is rejected.

    Returns:
        (is_valid, error_message)
    """
    if code is None:
        return False, ERROR_INVALID_FORMAT
    if not ACCESS_CODE_PATTERN.match(code.strip()):
        return False, ERROR_INVALID_FORMAT
    return True, None


def normalize_access_code(code: str) -> str:
    """Canonical lookup key for a code (stripped, lower-cased)."""
    return code.strip().lower()


def mask_access_code(code: str | None) -> str:
    """Mask a code for log output (`ab****`)."""
    if not code:
        return "<empty>"
    visible = code[:2]
    return visible + "*" * max(len(code) - len(visible), 0)


def _require(data: Mapping[str, Any], key: str, kind: str) -> Any:
    if key not in data:
        raise ValueError(f"{kind} entry is missing required field '{key}'")
    return data[key]


def _string_list(data: Mapping[str, Any], key: str) -> tuple[str, ...]:
    values = data.get(key) or []
    if not isinstance(values, (list, tuple)):
        raise ValueError(f"Field '{key}' must be a list, got {type(values).__name__}")
    return tuple(str(value) for value in values)


@dataclass(frozen=True)
class Experience:
    company: str
    role: str = ""
    location: str = ""
    from_date: str = ""
    to_date: str = ""
    points: tuple[str, ...] = ()
    skills: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Experience":
        return cls(
            company=str(_require(data, 'company', 'Experience')),
            role=str(data.get('role', '')),
            location=str(data.get('location', '')),
            from_date=str(data.get('from', '')),
            to_date=str(data.get('to', '')),
            points=_string_list(data, 'points'),
            skills=_string_list(data, 'skills'),
        )


@dataclass(frozen=True)
class Education:
    university: str
    course: str = ""
    location: str = ""
    from_date: str = ""
    to_date: str = ""
    points: tuple[str, ...] = ()
    skills: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Education":
        return cls(
            university=str(_require(data, 'university', 'Education')),
            course=str(data.get('course', '')),
            location=str(data.get('location', '')),
            from_date=str(data.get('from', '')),
            to_date=str(data.get('to', '')),
            points=_string_list(data, 'points'),
            skills=_string_list(data, 'skills'),
        )


@dataclass(frozen=True)
class Project:
    name: str
    description: str = ""
    duration: str = ""
    skills: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Project":
        return cls(
            name=str(_require(data, 'name', 'Project')),
            description=str(data.get('description', '')),
            duration=str(data.get('duration', '')),
            skills=_string_list(data, 'skills'),
        )


@dataclass(frozen=True)
class PortfolioDocument:
    """The full profile record returned for a valid access code."""

    name: str
    summary: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    dob: str = ""
    experience: tuple[Experience, ...] = ()
    education: tuple[Education, ...] = ()
    certifications: tuple[str, ...] = ()
    project: tuple[Project, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PortfolioDocument":
        """
        Build a document from the service JSON.

        Raises:
            ValueError: If the payload is not an object or a required
                field is missing
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Portfolio data must be an object, got {type(data).__name__}")

        def _entries(key: str, entry_type):
            raw = data.get(key) or []
            if not isinstance(raw, (list, tuple)):
                raise ValueError(f"Field '{key}' must be a list, got {type(raw).__name__}")
            for entry in raw:
                if not isinstance(entry, Mapping):
                    raise ValueError(f"Entries of '{key}' must be objects")
            return tuple(entry_type.from_dict(entry) for entry in raw)

        return cls(
            name=str(_require(data, 'name', 'Portfolio')),
            summary=str(data.get('summary', '')),
            address=str(data.get('address', '')),
            phone=str(data.get('phone', '')),
            email=str(data.get('email', '')),
            dob=str(data.get('dob', '')),
            experience=_entries('experience', Experience),
            education=_entries('education', Education),
            certifications=_string_list(data, 'certifications'),
            project=_entries('project', Project),
        )


@dataclass(frozen=True)
class ResolvedPortfolio:
    """Successful resolution of an access code."""

    code: str
    document: PortfolioDocument
    available_views: Optional[int] = None
    metadata: dict = field(default_factory=dict, compare=False)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], requested_code: str) -> "ResolvedPortfolio":
        """Build from a `{code, data, available_views}` response body."""
        if not isinstance(payload, Mapping):
            raise ValueError(f"Response body must be an object, got {type(payload).__name__}")
        if 'data' not in payload:
            raise ValueError("Response body is missing 'data'")

        available_views = payload.get('available_views')
        if available_views is not None:
            try:
                available_views = int(available_views)
            except (TypeError, ValueError):
                logger.warning(f"Ignoring non-numeric available_views: {available_views!r}")
                available_views = None

        extra = {k: v for k, v in payload.items() if k not in ('code', 'data', 'available_views')}
        return cls(
            code=str(payload.get('code') or requested_code),
            document=PortfolioDocument.from_dict(payload['data']),
            available_views=available_views,
            metadata=extra,
        )


class Section(str, Enum):
    """Screens of a walkthrough, in presentation order."""
    INTRO = 'intro'
    MAIN_MENU = 'main_menu'
    EXPERIENCE = 'experience'
    PROJECTS = 'projects'
    EDUCATION = 'education'
    CERTIFICATIONS = 'certifications'
    END = 'end'


@dataclass
class WalkthroughState:
    """Current screen and, inside paginated sections, the item shown."""

    section: Section = Section.INTRO
    item_index: int = 0
