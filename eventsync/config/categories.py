"""Predefined event categories and the free-text fallback.

Community and event type are chosen from a fixed list, or set to ``Other``
with a custom label. Both cases are represented as a tagged union so callers
never juggle a choice and a custom string separately.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from ..errors import ValidationError

OTHER = 'Other'

COMMUNITIES: Tuple[str, ...] = ('IEEE', 'TinkerHub', 'CoreAI', 'GDSC', 'NSS')
EVENT_TYPES: Tuple[str, ...] = (
    'Workshop',
    'Seminar',
    'Conference',
    'Competition',
    'Cultural',
    'Technical',
)


@dataclass(frozen=True)
class PredefinedCategory:
    tag: str

    @property
    def label(self) -> str:
        return self.tag


@dataclass(frozen=True)
class CustomCategory:
    text: str

    @property
    def label(self) -> str:
        return self.text


Category = Union[PredefinedCategory, CustomCategory]


def resolve_category(
    choice: str,
    custom_text: Optional[str],
    options: Tuple[str, ...],
    field_name: str
) -> Category:
    """
    Turn a form choice plus optional custom text into a category.

    Args:
        choice: One of ``options`` or ``Other``
        custom_text: Label to use when ``choice`` is ``Other``
        options: The predefined labels for this field
        field_name: Used in error messages (e.g. 'community')

    Returns:
        Category: The resolved category

    Raises:
        ValidationError: If the choice is unknown, or ``Other`` is chosen
            without custom text
    """
    choice = (choice or '').strip()
    if choice == OTHER:
        text = (custom_text or '').strip()
        if not text:
            raise ValidationError(f"Please specify the {field_name} when choosing '{OTHER}'")
        return CustomCategory(text)
    if choice in options:
        return PredefinedCategory(choice)
    raise ValidationError(f"Unknown {field_name}: '{choice}'")
