"""
Core shared utilities for the FEDIP pathway recommender.

This package provides the shared data models, constants, and I/O utilities
used by the parser, grouper, wizard and aggregator modules.

Usage:
    from core import ParsedRole, WizardState, Recommendation
    from core import load_quiz_tables
    from core import LEVELS, LEVEL_PREFIXES, DEFAULT_PROFESSIONAL_BODY
"""

from .models import (
    ParsedRole,
    FlatFamily,
    NestedFamily,
    JobFamily,
    CanonicalFamily,
    WizardState,
    Recommendation,
    QuizTables,
    QuizError,
    SelectionRequiredError,
    InvalidSelectionError,
    WizardCompletedError,
    InvalidTaxonomyError,
)
from .data_io import (
    load_quiz_tables,
    parse_job_family,
)
from .constants import (
    LEVELS,
    LEVEL_PREFIXES,
    BASE_LEVEL,
    FEDIP_SENIORITY,
    DEFAULT_PROFESSIONAL_BODY,
    DEFAULT_FEDIP_LEVEL,
    DEFAULT_AGGREGATION_POLICY,
    DEFAULT_DATA_DIR,
    POLICY_UNION,
    POLICY_SINGLE_SOURCE,
    STEP_CATEGORY,
    STEP_FAMILY,
    STEP_SUB_BUCKET,
    STEP_ROLE,
    LAST_STEP,
    STEP_QUESTIONS,
)

__all__ = [
    # Models
    "ParsedRole",
    "FlatFamily",
    "NestedFamily",
    "JobFamily",
    "CanonicalFamily",
    "WizardState",
    "Recommendation",
    "QuizTables",
    # Errors
    "QuizError",
    "SelectionRequiredError",
    "InvalidSelectionError",
    "WizardCompletedError",
    "InvalidTaxonomyError",
    # Data I/O
    "load_quiz_tables",
    "parse_job_family",
    # Constants
    "LEVELS",
    "LEVEL_PREFIXES",
    "BASE_LEVEL",
    "FEDIP_SENIORITY",
    "DEFAULT_PROFESSIONAL_BODY",
    "DEFAULT_FEDIP_LEVEL",
    "DEFAULT_AGGREGATION_POLICY",
    "DEFAULT_DATA_DIR",
    "POLICY_UNION",
    "POLICY_SINGLE_SOURCE",
    "STEP_CATEGORY",
    "STEP_FAMILY",
    "STEP_SUB_BUCKET",
    "STEP_ROLE",
    "LAST_STEP",
    "STEP_QUESTIONS",
]
