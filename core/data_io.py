"""
Shared data I/O utilities for the FEDIP pathway recommender.

This module loads the externally supplied taxonomy and mapping tables from
JSON files and resolves each job family into its tagged variant.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from .constants import (
    BASE_RECOMMENDATIONS_FILE,
    FAMILY_BODIES_FILE,
    FEDIP_MAPPING_FILE,
    JOB_FAMILIES_FILE,
    ROLE_BODIES_FILE,
    SUB_BUCKET_BODIES_FILE,
)
from .models import FlatFamily, InvalidTaxonomyError, JobFamily, NestedFamily, QuizTables


def parse_job_family(name: str, value: Any) -> JobFamily:
    """Resolve a raw job family value into FlatFamily or NestedFamily.

    Args:
        name: Family name (used in error messages)
        value: Either a list of role titles or a dict of bucket -> list of titles

    Returns:
        FlatFamily or NestedFamily

    Raises:
        InvalidTaxonomyError: If the value is neither shape, or a bucket
            is not a list of strings
    """
    if isinstance(value, (FlatFamily, NestedFamily)):
        return value

    if isinstance(value, list):
        return FlatFamily(roles=tuple(_check_titles(name, value)))

    if isinstance(value, dict):
        buckets = []
        for bucket, roles in value.items():
            if not isinstance(roles, list):
                raise InvalidTaxonomyError(
                    f"Family '{name}': bucket '{bucket}' must be a list of roles, "
                    f"got {type(roles).__name__}"
                )
            buckets.append((str(bucket), tuple(_check_titles(f"{name}/{bucket}", roles))))
        return NestedFamily(buckets=tuple(buckets))

    raise InvalidTaxonomyError(
        f"Family '{name}' must be a list or a mapping of sub-buckets, got {type(value).__name__}"
    )


def _check_titles(where: str, titles: List[Any]) -> List[str]:
    for title in titles:
        if not isinstance(title, str):
            raise InvalidTaxonomyError(f"Role titles in '{where}' must be strings, got {title!r}")
    return titles


def _load_json(path: Path, required: bool = True) -> Any:
    if not path.exists():
        if required:
            raise FileNotFoundError(f"Table not found: {path}")
        return {}

    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _load_mapping(path: Path, required: bool = True) -> Dict[str, Any]:
    data = _load_json(path, required=required)
    if not isinstance(data, dict):
        raise InvalidTaxonomyError(f"{path.name} must contain a JSON object, got {type(data).__name__}")
    return data


def _check_string_values(path: Path, table: Dict[str, Any]) -> Dict[str, str]:
    for key, value in table.items():
        if not isinstance(value, str):
            raise InvalidTaxonomyError(f"{path.name}: value for '{key}' must be a string")
    return table


def _check_body_values(path: Path, table: Dict[str, Any]) -> Dict[str, Union[str, List[str]]]:
    for key, value in table.items():
        if isinstance(value, str):
            continue
        if isinstance(value, list) and all(isinstance(v, str) for v in value):
            continue
        raise InvalidTaxonomyError(
            f"{path.name}: value for '{key}' must be a body name or a list of body names"
        )
    return table


def load_quiz_tables(data_dir: Path) -> QuizTables:
    """Load all lookup tables from a data directory.

    Args:
        data_dir: Directory containing base_recommendations.json,
                  job_families.json and fedip_mapping.json, and optionally
                  family_bodies.json, sub_bucket_bodies.json, role_bodies.json

    Returns:
        QuizTables with every family resolved to its tagged variant

    Raises:
        FileNotFoundError: If a required table is missing
        InvalidTaxonomyError: If a table has the wrong structure

    Example:
        tables = load_quiz_tables(Path("data/quiz"))
        for category in tables.base_category_to_body:
            print(category)
    """
    data_dir = Path(data_dir)

    base_path = data_dir / BASE_RECOMMENDATIONS_FILE
    families_path = data_dir / JOB_FAMILIES_FILE
    fedip_path = data_dir / FEDIP_MAPPING_FILE
    family_bodies_path = data_dir / FAMILY_BODIES_FILE
    sub_bucket_bodies_path = data_dir / SUB_BUCKET_BODIES_FILE
    role_bodies_path = data_dir / ROLE_BODIES_FILE

    raw_families = _load_mapping(families_path)
    job_families = {
        name: parse_job_family(name, value)
        for name, value in raw_families.items()
    }

    tables = QuizTables(
        base_category_to_body=_check_string_values(base_path, _load_mapping(base_path)),
        job_families=job_families,
        role_to_fedip_level=_check_string_values(fedip_path, _load_mapping(fedip_path)),
        family_to_body=_check_string_values(
            family_bodies_path, _load_mapping(family_bodies_path, required=False)
        ),
        sub_bucket_to_body=_check_string_values(
            sub_bucket_bodies_path, _load_mapping(sub_bucket_bodies_path, required=False)
        ),
        role_to_body=_check_body_values(
            role_bodies_path, _load_mapping(role_bodies_path, required=False)
        ),
    )

    logging.info(
        f"Loaded quiz tables from {data_dir}: {len(tables.base_category_to_body)} categories, "
        f"{len(tables.job_families)} families, {len(tables.role_to_fedip_level)} FEDIP mappings"
    )
    return tables
