"""
Quiz Wizard Module - Four-step decision process for FEDIP recommendations.

Steps:
0. Base category ("What best describes you?")
1. Job family
2. Sub-bucket (skipped when the family has exactly one)
3. Specific role -> recommendation

Design:
- WizardState values are immutable; every transition returns a new one
- Answering step s drops every answer after s, so recorded answers are
  always a consistent prefix
- WizardEngine holds only the (immutable) taxonomy and the aggregator;
  QuizSession holds the current state for a presentation layer
"""

import logging
from typing import List, Mapping, Optional, Union

from core.constants import (
    DEFAULT_AGGREGATION_POLICY,
    LAST_STEP,
    STEP_CATEGORY,
    STEP_FAMILY,
    STEP_QUESTIONS,
    STEP_ROLE,
    STEP_SUB_BUCKET,
)
from core.models import (
    CanonicalFamily,
    InvalidSelectionError,
    QuizTables,
    Recommendation,
    SelectionRequiredError,
    WizardCompletedError,
    WizardState,
)
from recommendation_aggregator import AggregationPolicy, RecommendationAggregator
from taxonomy_grouper import TaxonomyGrouper, sort_roles_by_fedip


# ============================================================================
# Engine
# ============================================================================

class WizardEngine:
    """Pure transition functions over WizardState.

    Example:
        engine = WizardEngine(tables)
        state = engine.initial_state()
        state = engine.select(state, 0, "Health informatics professional")
        state = engine.select(state, 1, "Data and Analytics")
    """

    def __init__(
        self,
        tables: QuizTables,
        grouper: Optional[TaxonomyGrouper] = None,
        aggregator: Optional[RecommendationAggregator] = None,
        policy: Union[str, AggregationPolicy] = DEFAULT_AGGREGATION_POLICY,
    ):
        self.tables = tables
        self.grouper = grouper or TaxonomyGrouper(tables.job_families)
        self.aggregator = aggregator or RecommendationAggregator(tables, policy=policy)

    def initial_state(self) -> WizardState:
        return WizardState()

    def options(self, answers: Mapping[int, str], step: int) -> List[str]:
        """Choices offered at a step given the earlier answers."""
        if step == STEP_CATEGORY:
            return list(self.tables.base_category_to_body)
        if step == STEP_FAMILY:
            return self.grouper.family_names()

        family = answers.get(STEP_FAMILY)
        if family is None or family not in self.grouper.job_families:
            return []
        if step == STEP_SUB_BUCKET:
            return self.grouper.sub_buckets(family)
        if step == STEP_ROLE:
            sub_bucket = answers.get(STEP_SUB_BUCKET)
            if sub_bucket is None:
                return []
            return self.grouper.roles(family, sub_bucket)
        return []

    def select(self, state: WizardState, step: int, answer: str) -> WizardState:
        """Record an answer, drop everything downstream and move on.

        On a completed state this reopens the wizard: the result is dropped
        along with every answer after the changed step.

        Raises:
            InvalidSelectionError: If the step is out of range or not reached
                yet, or the answer is not offered at that step
        """
        if not STEP_CATEGORY <= step <= LAST_STEP:
            raise InvalidSelectionError(f"Step must be between {STEP_CATEGORY} and {LAST_STEP}, got {step}")
        if step > state.step:
            raise InvalidSelectionError(f"Step {step} is not reachable yet (current step {state.step})")

        answers = state.with_answers_up_to(step - 1)
        if answer not in self.options(answers, step):
            raise InvalidSelectionError(f"'{answer}' is not an option at step {step}")
        answers[step] = answer

        if step == STEP_CATEGORY:
            return WizardState(step=STEP_FAMILY, answers=answers)

        if step == STEP_FAMILY:
            sub_buckets = self.grouper.sub_buckets(answer)
            if len(sub_buckets) == 1:
                answers[STEP_SUB_BUCKET] = sub_buckets[0]
                logging.debug(f"Family '{answer}' has one sub-bucket, skipping to role step")
                return WizardState(step=STEP_ROLE, answers=answers)
            return WizardState(step=STEP_SUB_BUCKET, answers=answers)

        if step == STEP_SUB_BUCKET:
            return WizardState(step=STEP_ROLE, answers=answers)

        return self._complete(answers)

    def advance(self, state: WizardState) -> WizardState:
        """The "Next" action: move on without changing the current answer.

        Raises:
            WizardCompletedError: If the state already holds a result
            SelectionRequiredError: If the current step has no answer
        """
        if state.is_complete:
            raise WizardCompletedError("Recommendation already computed; restart to start again")
        if state.answer(state.step) is None:
            raise SelectionRequiredError(state.step)

        if state.step < LAST_STEP:
            return WizardState(step=state.step + 1, answers=dict(state.answers))
        return self._complete(dict(state.answers))

    def back(self, state: WizardState) -> WizardState:
        """Go back one step, keeping answers until they are overwritten."""
        if state.is_complete or state.step == STEP_CATEGORY:
            return state
        return WizardState(step=state.step - 1, answers=dict(state.answers))

    def restart(self) -> WizardState:
        return self.initial_state()

    def _complete(self, answers: dict) -> WizardState:
        result = self.aggregator.aggregate(answers)
        logging.debug(f"Wizard complete: {result}")
        return WizardState(step=STEP_ROLE, answers=answers, result=result)


# ============================================================================
# Session Facade
# ============================================================================

class QuizSession:
    """Presentation-facing wrapper that keeps the current WizardState.

    Example:
        session = QuizSession(load_quiz_tables(Path("data/quiz")))
        print(session.question(), session.options())
        session.select(0, session.list_categories()[0])
    """

    def __init__(
        self,
        tables: QuizTables,
        policy: Union[str, AggregationPolicy] = DEFAULT_AGGREGATION_POLICY,
        sort_by_fedip: bool = False,
    ):
        self.tables = tables
        self.engine = WizardEngine(tables, policy=policy)
        self.sort_by_fedip = sort_by_fedip
        self._state = self.engine.initial_state()

    @property
    def state(self) -> WizardState:
        return self._state

    # Listing

    def list_categories(self) -> List[str]:
        return self.engine.options({}, STEP_CATEGORY)

    def list_families(self) -> List[str]:
        return self.engine.options({}, STEP_FAMILY)

    def get_canonical_family(self, family: str) -> CanonicalFamily:
        return self.engine.grouper.canonical(family)

    def list_sub_buckets(self) -> List[str]:
        return self.engine.options(self._state.answers, STEP_SUB_BUCKET)

    def list_roles(self, by_fedip: Optional[bool] = None) -> List[str]:
        """Roles for the chosen family and sub-bucket.

        Args:
            by_fedip: Use the FEDIP seniority order instead of level rank;
                      defaults to the session setting
        """
        roles = self.engine.options(self._state.answers, STEP_ROLE)
        if by_fedip is None:
            by_fedip = self.sort_by_fedip
        if by_fedip:
            roles = sort_roles_by_fedip(roles, self.tables.role_to_fedip_level)
        return roles

    def question(self) -> str:
        return STEP_QUESTIONS[self._state.step]

    def options(self) -> List[str]:
        """Choices for the current step, in display order."""
        if self._state.step == STEP_ROLE:
            return self.list_roles()
        return self.engine.options(self._state.answers, self._state.step)

    # Transitions

    def select(self, step: int, answer: str) -> WizardState:
        self._state = self.engine.select(self._state, step, answer)
        return self._state

    def advance(self) -> WizardState:
        self._state = self.engine.advance(self._state)
        return self._state

    def back(self) -> WizardState:
        self._state = self.engine.back(self._state)
        return self._state

    def restart(self) -> WizardState:
        self._state = self.engine.restart()
        return self._state

    def current_result(self) -> Optional[Recommendation]:
        return self._state.result
