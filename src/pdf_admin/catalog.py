"""Shared lookup tables: tag categories, colours, departments, years and roles."""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class TagCategory:
    value: str
    label: str
    color: str


TAG_CATEGORIES: tuple[TagCategory, ...] = (
    TagCategory("academic", "Academic", "#10B981"),
    TagCategory("department", "Department", "#F59E0B"),
    TagCategory("special-group", "Special Group", "#8B5CF6"),
    TagCategory("course", "Course", "#06B6D4"),
    TagCategory("project", "Project", "#EF4444"),
    TagCategory("research", "Research", "#84CC16"),
    TagCategory("temporary", "Temporary", "#F97316"),
    TagCategory("other", "Other", "#6B7280"),
)
FALLBACK_CATEGORY = "other"

DEFAULT_TAG_COLOR = "#3B82F6"
PREDEFINED_COLORS: tuple[str, ...] = (
    "#3B82F6", "#10B981", "#F59E0B", "#8B5CF6", "#06B6D4", "#EF4444",
    "#84CC16", "#F97316", "#EC4899", "#6366F1", "#14B8A6", "#F43F5E",
)  # fmt: skip

DEPARTMENTS: tuple[str, ...] = ("AIML", "CSE", "ECE", "EEE", "IT")
YEARS: tuple[int, ...] = (1, 2, 3, 4)
USER_ROLES: tuple[str, ...] = ("client", "admin")
TAG_BULK_ACTIONS: tuple[str, ...] = ("activate", "deactivate", "delete")

# List-screen filter value meaning "no filter"
FILTER_ALL = "all"

TAG_NAME_MIN_LENGTH = 2
TAG_NAME_MAX_LENGTH = 50
TAG_DESCRIPTION_MAX_LENGTH = 200

_HEX_COLOR = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")


class TagValidationError(ValueError):
    """Raised when an access tag fails validation; carries every problem found."""

    def __init__(self, problems: list[str]) -> None:
        super().__init__("; ".join(problems))
        self.problems = problems


def category_info(value: str | None) -> TagCategory:
    """Return the category entry for ``value``, falling back to "other"."""
    for category in TAG_CATEGORIES:
        if category.value == value:
            return category
    return next(c for c in TAG_CATEGORIES if c.value == FALLBACK_CATEGORY)


def is_filter_all(value: object) -> bool:
    """True for empty filters and the "All" option of a list screen."""
    return value is None or str(value).strip().lower() in ("", FILTER_ALL)


def validate_tag(
    name: str,
    category: str = FALLBACK_CATEGORY,
    color: str = DEFAULT_TAG_COLOR,
    description: str = "",
) -> None:
    """Check an access tag against the backend's model rules.

    Raises:
        TagValidationError: Listing every rule the tag breaks.
    """
    problems: list[str] = []
    stripped = name.strip()
    if len(stripped) < TAG_NAME_MIN_LENGTH:
        problems.append(f"Tag name must be at least {TAG_NAME_MIN_LENGTH} characters")
    if len(stripped) > TAG_NAME_MAX_LENGTH:
        problems.append(f"Tag name cannot exceed {TAG_NAME_MAX_LENGTH} characters")
    if len(description.strip()) > TAG_DESCRIPTION_MAX_LENGTH:
        problems.append(f"Description cannot exceed {TAG_DESCRIPTION_MAX_LENGTH} characters")
    if category not in {c.value for c in TAG_CATEGORIES}:
        problems.append(f"Unknown category: {category}")
    if not _HEX_COLOR.match(color):
        problems.append("Color must be a valid hex color code")
    if problems:
        raise TagValidationError(problems)
