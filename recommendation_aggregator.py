"""
Recommendation Aggregator Module - Professional body and FEDIP level lookup.

Combines the externally supplied lookup tables, keyed by the wizard's final
answers, into a single deduplicated Recommendation.

Two policies exist for the professional-body part:
- union (default): role -> sub-bucket -> family -> base category, all hits
  collected in that order and deduplicated
- single_source: base category only

Both fall back to DEFAULT_PROFESSIONAL_BODY when nothing matches. The FEDIP
level is always a single lookup of the role, never part of the union.
"""

import logging
from typing import Dict, List, Mapping, Optional, Type, Union

from core.constants import (
    DEFAULT_AGGREGATION_POLICY,
    DEFAULT_FEDIP_LEVEL,
    DEFAULT_PROFESSIONAL_BODY,
    POLICY_SINGLE_SOURCE,
    POLICY_UNION,
    STEP_CATEGORY,
    STEP_FAMILY,
    STEP_ROLE,
    STEP_SUB_BUCKET,
)
from core.models import QuizTables, Recommendation


def _as_list(value: Union[str, List[str], None]) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    return [v for v in value if v]


# ============================================================================
# Aggregation Policies
# ============================================================================

class AggregationPolicy:
    """Base class for professional-body aggregation policies."""

    name = ""

    def collect_bodies(self, answers: Mapping[int, str], tables: QuizTables) -> List[str]:
        """Bodies matched by the answers, possibly with duplicates."""
        raise NotImplementedError

    def role_answer(self, answers: Mapping[int, str]) -> Optional[str]:
        """The role used for the FEDIP level lookup."""
        return answers.get(STEP_ROLE)


class UnionPolicy(AggregationPolicy):
    """Collect bodies from every table that has an entry for its answer."""

    name = POLICY_UNION

    def collect_bodies(self, answers: Mapping[int, str], tables: QuizTables) -> List[str]:
        bodies: List[str] = []
        bodies.extend(_as_list(tables.role_to_body.get(answers.get(STEP_ROLE))))
        bodies.extend(_as_list(tables.sub_bucket_to_body.get(answers.get(STEP_SUB_BUCKET))))
        bodies.extend(_as_list(tables.family_to_body.get(answers.get(STEP_FAMILY))))
        bodies.extend(_as_list(tables.base_category_to_body.get(answers.get(STEP_CATEGORY))))
        return bodies


class SingleSourcePolicy(AggregationPolicy):
    """Only the base category table decides the body."""

    name = POLICY_SINGLE_SOURCE

    def collect_bodies(self, answers: Mapping[int, str], tables: QuizTables) -> List[str]:
        return _as_list(tables.base_category_to_body.get(answers.get(STEP_CATEGORY)))

    def role_answer(self, answers: Mapping[int, str]) -> Optional[str]:
        # Older flows stored the role at the sub-bucket step
        role = answers.get(STEP_ROLE)
        return role if role is not None else answers.get(STEP_SUB_BUCKET)


AGGREGATION_POLICIES: Dict[str, Type[AggregationPolicy]] = {
    POLICY_UNION: UnionPolicy,
    POLICY_SINGLE_SOURCE: SingleSourcePolicy,
}


def get_policy(name: str) -> AggregationPolicy:
    """Instantiate a policy by name.

    Raises:
        ValueError: If the name is not in AGGREGATION_POLICIES
    """
    policy_cls = AGGREGATION_POLICIES.get(name)
    if policy_cls is None:
        raise ValueError(
            f"Unknown aggregation policy: {name} (expected one of {', '.join(AGGREGATION_POLICIES)})"
        )
    return policy_cls()


# ============================================================================
# Aggregator
# ============================================================================

class RecommendationAggregator:
    """Turns a complete answer set into a Recommendation.

    Lookups are total: a missing body or FEDIP level never raises, the
    documented fallback constant is used instead.

    Example:
        aggregator = RecommendationAggregator(tables, policy="union")
        rec = aggregator.aggregate({0: "Health informatics professional",
                                    1: "Data and Analytics",
                                    2: "Data Analyst",
                                    3: "Senior Data Analyst"})
        print(rec.professional_bodies, rec.fedip_level)
    """

    def __init__(self, tables: QuizTables, policy: Union[str, AggregationPolicy] = DEFAULT_AGGREGATION_POLICY):
        self.tables = tables
        self.policy = get_policy(policy) if isinstance(policy, str) else policy

    def aggregate(self, answers: Mapping[int, str]) -> Recommendation:
        bodies = list(dict.fromkeys(self.policy.collect_bodies(answers, self.tables)))
        if not bodies:
            logging.debug(f"No professional body matched {dict(answers)}, using fallback")
            bodies = [DEFAULT_PROFESSIONAL_BODY]

        role = self.policy.role_answer(answers)
        fedip_level = self.tables.role_to_fedip_level.get(role) if role is not None else None
        if not fedip_level:
            logging.debug(f"No FEDIP level for role '{role}', using fallback")
            fedip_level = DEFAULT_FEDIP_LEVEL

        return Recommendation(
            professional_bodies=tuple(bodies),
            fedip_level=fedip_level,
        )
