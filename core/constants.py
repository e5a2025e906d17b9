"""
Shared constants for the FEDIP pathway recommender.

This module contains the level vocabulary, fallback values and default
settings used across the parser, grouper, wizard and aggregator.
"""

from pathlib import Path


# ============================================================================
# Level Vocabulary
# ============================================================================

# Prefix tokens tested in this order; first match wins.
# "Assistant Director of" must stay ahead of "Director of".
LEVEL_PREFIXES = [
    "Trainee",
    "Apprentice",
    "Associate",
    "Junior",
    "Senior",
    "Lead",
    "Principal",
    "Head of",
    "Assistant Director of",
    "Director of",
    "Chief",
    "Qualified",
    "CXIO",
]

# Sort order for levels, lowest first. "" is the base tier (no prefix).
LEVELS = [
    "Trainee",
    "Apprentice",
    "Associate",
    "Junior",
    "",
    "Qualified",
    "Senior",
    "Lead",
    "Principal",
    "Manager",
    "Head of",
    "Assistant Director of",
    "Director of",
    "Chief",
    "CXIO",
]

BASE_LEVEL = ""

# Roles titled "X - Management" are grouped with "X"
MANAGEMENT_SUFFIX_PATTERN = r"\s*-\s*Management\s*$"


# ============================================================================
# FEDIP Seniority (presentation-time sort only)
# ============================================================================

FEDIP_SENIORITY = {
    "None": 0,
    "Associate Practitioner": 1,
    "Practitioner": 2,
    "Senior Practitioner": 3,
    "Advanced Practitioner": 4,
    "Leading Practitioner": 5,
}


# ============================================================================
# Recommendation Fallbacks
# ============================================================================

DEFAULT_PROFESSIONAL_BODY = "FEDIP - General Membership"
DEFAULT_FEDIP_LEVEL = "FEDIP Level not determined"


# ============================================================================
# Wizard Steps
# ============================================================================

STEP_CATEGORY = 0
STEP_FAMILY = 1
STEP_SUB_BUCKET = 2
STEP_ROLE = 3
LAST_STEP = STEP_ROLE

STEP_QUESTIONS = {
    STEP_CATEGORY: "What best describes you?",
    STEP_FAMILY: "Which job family are you in?",
    STEP_SUB_BUCKET: "Select your role category",
    STEP_ROLE: "Select your specific role",
}


# ============================================================================
# Default Settings
# ============================================================================

POLICY_UNION = "union"
POLICY_SINGLE_SOURCE = "single_source"
DEFAULT_AGGREGATION_POLICY = POLICY_UNION

DEFAULT_DATA_DIR = Path("data/quiz")

# Table file names inside the data directory
BASE_RECOMMENDATIONS_FILE = "base_recommendations.json"
JOB_FAMILIES_FILE = "job_families.json"
FEDIP_MAPPING_FILE = "fedip_mapping.json"
FAMILY_BODIES_FILE = "family_bodies.json"
SUB_BUCKET_BODIES_FILE = "sub_bucket_bodies.json"
ROLE_BODIES_FILE = "role_bodies.json"

# Subscription client
DEFAULT_SUBSCRIBE_TIMEOUT = 15
MAX_RETRIES = 3
RETRY_DELAY = 1.0  # seconds, multiplied by attempt number
