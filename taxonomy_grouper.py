"""
Taxonomy Grouper Module - Canonical sub-bucket structure for job families.

A job family arrives either as a flat list of role titles or already nested
into author-supplied sub-buckets. Both are normalized into a CanonicalFamily:
an ordered mapping of sub-bucket name -> role titles, with bucket keys in
lexical order and each bucket sorted by (level rank, title).

- Flat families are bucketed by the parsed base role, so "Data Analyst",
  "Senior Data Analyst" and "Lead Data Analyst" share the "Data Analyst" bucket.
- Nested families keep their buckets and membership exactly as given; only
  the ordering is normalized.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Set

from core.constants import FEDIP_SENIORITY
from core.data_io import parse_job_family
from core.models import CanonicalFamily, FlatFamily, JobFamily
from role_parser import lexical_key, parse_role, role_sort_key


def _sort_roles(roles: Iterable[str]) -> List[str]:
    # dict.fromkeys drops repeated titles and keeps the first occurrence
    return sorted(dict.fromkeys(roles), key=role_sort_key)


def group_flat_roles(roles: Iterable[str]) -> CanonicalFamily:
    """Bucket a flat role list by parsed base role."""
    groups: Dict[str, Set[str]] = {}
    for role in roles:
        base = parse_role(role).base
        groups.setdefault(base, set()).add(role)

    return {
        base: _sort_roles(groups[base])
        for base in sorted(groups, key=lexical_key)
    }


def to_canonical(family: Any, name: str = "") -> CanonicalFamily:
    """Normalize a job family into its canonical two-level structure.

    Args:
        family: FlatFamily / NestedFamily, or the raw list / dict form
        name: Family name, used in error messages

    Returns:
        Ordered dict of sub-bucket -> sorted role titles

    Raises:
        InvalidTaxonomyError: If the raw value is neither a list nor a mapping
            of lists
    """
    resolved: JobFamily = parse_job_family(name, family)

    if isinstance(resolved, FlatFamily):
        return group_flat_roles(resolved.roles)

    # NestedFamily: no re-bucketing, only re-sorting
    buckets = dict(resolved.buckets)
    return {
        bucket: _sort_roles(buckets[bucket])
        for bucket in sorted(buckets, key=lexical_key)
    }


def sort_roles_by_fedip(roles: Iterable[str], role_to_fedip_level: Mapping[str, str]) -> List[str]:
    """Order roles by the seniority of their FEDIP level, lowest first.

    Presentation-time alternative to the level-rank order. Roles without a
    FEDIP mapping (or with an unrecognised level) sort as seniority 0. The
    sort is stable, so ties keep their canonical order.
    """
    def seniority(role: str) -> int:
        fedip_level = role_to_fedip_level.get(role)
        if fedip_level is None:
            return 0
        return FEDIP_SENIORITY.get(fedip_level, 0)

    return sorted(roles, key=seniority)


class TaxonomyGrouper:
    """Session-scoped canonicalizer with per-family memoization.

    The source taxonomy is immutable within a session, so each family is
    canonicalized at most once.

    Example:
        grouper = TaxonomyGrouper(tables.job_families)
        buckets = grouper.canonical("Data and Analytics")
        print(list(buckets))
    """

    def __init__(self, job_families: Mapping[str, Any]):
        self.job_families = {
            family: parse_job_family(family, value)
            for family, value in job_families.items()
        }
        self._cache: Dict[str, CanonicalFamily] = {}

    def family_names(self) -> List[str]:
        """Family names in their supplied order."""
        return list(self.job_families)

    def canonical(self, family: str) -> CanonicalFamily:
        """Canonical structure for a family.

        Returns a fresh copy; changing it does not affect the cache.

        Raises:
            KeyError: If the family is not in the taxonomy
        """
        return {bucket: list(roles) for bucket, roles in self._canonical(family).items()}

    def _canonical(self, family: str) -> CanonicalFamily:
        if family not in self._cache:
            if family not in self.job_families:
                raise KeyError(f"Unknown job family: {family}")
            self._cache[family] = to_canonical(self.job_families[family], name=family)
            logging.debug(
                f"Canonicalized family '{family}' into {len(self._cache[family])} sub-buckets"
            )
        return self._cache[family]

    def sub_buckets(self, family: str) -> List[str]:
        return list(self._canonical(family))

    def roles(self, family: str, sub_bucket: str) -> List[str]:
        """Roles in a sub-bucket, or an empty list if the bucket is unknown."""
        return list(self._canonical(family).get(sub_bucket, []))
