"""
Shared data models for the FEDIP pathway recommender.

This module contains the value types passed between the parser, grouper,
wizard and aggregator, plus the exception hierarchy they raise.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple, Union

from .constants import LAST_STEP


# ============================================================================
# Exceptions
# ============================================================================

class QuizError(Exception):
    """Base class for wizard and taxonomy errors."""


class SelectionRequiredError(QuizError):
    """Raised when advancing past a step that has no answer yet."""

    def __init__(self, step: int):
        super().__init__(f"Please select an option first (step {step})")
        self.step = step


class InvalidSelectionError(QuizError, ValueError):
    """Raised when an answer is not one of the options offered at its step."""


class WizardCompletedError(QuizError):
    """Raised when a transition is attempted after the result was computed."""


class InvalidTaxonomyError(QuizError, ValueError):
    """Raised when externally supplied taxonomy data has the wrong shape."""


# ============================================================================
# Roles and Families
# ============================================================================

@dataclass(frozen=True)
class ParsedRole:
    """A role title split into its seniority level and base role.

    ``level`` is "" for the base tier.
    """
    level: str
    base: str


@dataclass(frozen=True)
class FlatFamily:
    """Job family supplied as a plain list of role titles."""
    roles: Tuple[str, ...]


@dataclass(frozen=True)
class NestedFamily:
    """Job family supplied already grouped into sub-buckets."""
    buckets: Tuple[Tuple[str, Tuple[str, ...]], ...]


JobFamily = Union[FlatFamily, NestedFamily]

# sub-bucket name -> sorted role titles, keys in sorted order
CanonicalFamily = Dict[str, List[str]]


# ============================================================================
# Wizard
# ============================================================================

@dataclass(frozen=True)
class Recommendation:
    """Final recommendation shown once the role step is answered.

    professional_bodies keeps first-seen order of the sources consulted
    and never contains duplicates.
    """
    professional_bodies: Tuple[str, ...]
    fedip_level: str

    @property
    def professional_body(self) -> str:
        """Bodies joined for single-line display."""
        return ", ".join(self.professional_bodies)


@dataclass(frozen=True)
class WizardState:
    """Snapshot of the wizard. Transitions return new instances.

    ``answers`` is a read-only copy of the mapping passed in.
    """
    step: int = 0
    answers: Mapping[int, str] = field(default_factory=dict)
    result: Optional[Recommendation] = None

    def __post_init__(self):
        object.__setattr__(self, "answers", MappingProxyType(dict(self.answers)))

    def __hash__(self) -> int:
        return hash((self.step, tuple(sorted(self.answers.items())), self.result))

    @property
    def is_complete(self) -> bool:
        return self.result is not None

    def answer(self, step: int) -> Optional[str]:
        return self.answers.get(step)

    def with_answers_up_to(self, step: int) -> Dict[int, str]:
        """Copy of the answers with everything after ``step`` dropped."""
        return {k: v for k, v in self.answers.items() if k <= step and k <= LAST_STEP}


# ============================================================================
# External Tables
# ============================================================================

@dataclass
class QuizTables:
    """Externally supplied lookup tables.

    Dict insertion order of ``base_category_to_body`` and ``job_families``
    is the display order of categories and families.
    """
    base_category_to_body: Dict[str, str]
    job_families: Dict[str, JobFamily]
    role_to_fedip_level: Dict[str, str]
    family_to_body: Dict[str, str] = field(default_factory=dict)
    sub_bucket_to_body: Dict[str, str] = field(default_factory=dict)
    role_to_body: Dict[str, Union[str, List[str]]] = field(default_factory=dict)
