#!/usr/bin/env python
"""
Taxonomy Validation Script

Audits the quiz tables before they are deployed:
1. Roles: every role with its parsed level, base and FEDIP level
2. Missing FEDIP levels: roles that would get "FEDIP Level not determined"
3. Orphan FEDIP entries: mapped roles that no family offers
4. Skipped steps: families whose role category question is auto-skipped

Usage:
    python scripts/validate_taxonomy.py
    python scripts/validate_taxonomy.py --data-dir data/quiz --output role_audit.csv
    python scripts/validate_taxonomy.py --json  # Output summary as JSON
    python scripts/validate_taxonomy.py --strict  # Exit 1 when issues exist
"""

import argparse
import json
import sys
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List

import pandas as pd

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core import DEFAULT_DATA_DIR, QuizError, QuizTables, load_quiz_tables
from role_parser import level_rank, parse_role
from taxonomy_grouper import TaxonomyGrouper


ROLE_COLUMNS = ["family", "sub_bucket", "role", "level", "base", "level_rank", "fedip_level"]


@dataclass
class TaxonomyReport:
    """Summary of taxonomy issues."""
    total_families: int = 0
    total_roles: int = 0
    missing_fedip: List[str] = field(default_factory=list)
    orphan_fedip: List[str] = field(default_factory=list)
    skipped_families: List[str] = field(default_factory=list)
    empty_families: List[str] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        return bool(self.missing_fedip or self.orphan_fedip or self.empty_families)


def build_role_frame(tables: QuizTables) -> pd.DataFrame:
    """One row per (family, sub-bucket, role) in canonical order."""
    grouper = TaxonomyGrouper(tables.job_families)
    rows = []
    for family in grouper.family_names():
        for sub_bucket, roles in grouper.canonical(family).items():
            for role in roles:
                parsed = parse_role(role)
                rows.append({
                    "family": family,
                    "sub_bucket": sub_bucket,
                    "role": role,
                    "level": parsed.level,
                    "base": parsed.base,
                    "level_rank": level_rank(parsed.level),
                    "fedip_level": tables.role_to_fedip_level.get(role, ""),
                })
    return pd.DataFrame(rows, columns=ROLE_COLUMNS)


def validate_tables(tables: QuizTables, df: pd.DataFrame) -> TaxonomyReport:
    """Collect issues from the role frame and the tables."""
    grouper = TaxonomyGrouper(tables.job_families)
    report = TaxonomyReport(
        total_families=len(tables.job_families),
        total_roles=df["role"].nunique(),
    )

    missing = df.loc[df["fedip_level"] == "", "role"]
    report.missing_fedip = sorted(missing.unique().tolist())

    offered = set(df["role"])
    report.orphan_fedip = sorted(r for r in tables.role_to_fedip_level if r not in offered)

    for family in grouper.family_names():
        bucket_count = len(grouper.canonical(family))
        if bucket_count == 0:
            report.empty_families.append(family)
        elif bucket_count == 1:
            report.skipped_families.append(family)

    return report


def print_report(report: TaxonomyReport) -> None:
    """Print a human-readable report."""
    print("=" * 60)
    print("TAXONOMY VALIDATION REPORT")
    print("=" * 60)
    print(f"Families: {report.total_families}")
    print(f"Roles:    {report.total_roles}")

    sections = [
        ("Roles without FEDIP level", report.missing_fedip),
        ("FEDIP entries not offered by any family", report.orphan_fedip),
        ("Families with no roles", report.empty_families),
        ("Families that skip the role category step", report.skipped_families),
    ]
    for title, items in sections:
        print(f"\n{title} ({len(items)}):")
        for item in items[:20]:
            print(f"  - {item}")
        if len(items) > 20:
            print(f"  ... and {len(items) - 20} more")


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate quiz taxonomy tables")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=DEFAULT_DATA_DIR,
        help=f"Directory with the JSON tables (default: {DEFAULT_DATA_DIR})",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Write the per-role audit to this CSV file",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output summary as JSON",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with code 1 when issues are found",
    )
    args = parser.parse_args()

    try:
        tables = load_quiz_tables(args.data_dir)
    except (FileNotFoundError, QuizError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    df = build_role_frame(tables)
    report = validate_tables(tables, df)

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(args.output, index=False, encoding="utf-8")
        if not args.json:
            print(f"Saved role audit to: {args.output}")

    if args.json:
        print(json.dumps(asdict(report), ensure_ascii=False, indent=2))
    else:
        print_report(report)

    if args.strict and report.has_issues:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
