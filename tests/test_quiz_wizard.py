#!/usr/bin/env python3
"""
Quiz Wizard Test Suite

Tests for the four-step decision process:
1. Forward transitions and auto-skip of the role category step
2. Downstream invalidation when an earlier answer changes
3. Next / back / restart
4. Selection validation and terminal state
5. QuizSession facade
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.constants import DEFAULT_FEDIP_LEVEL, DEFAULT_PROFESSIONAL_BODY
from core.models import (
    InvalidSelectionError,
    QuizTables,
    SelectionRequiredError,
    WizardCompletedError,
    WizardState,
)
from api.schemas import WizardStateResponse
from quiz_wizard import QuizSession, WizardEngine


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def tables():
    return QuizTables(
        base_category_to_body={
            "Technologist": "BCS",
            "Clinician": "Faculty of Clinical Informatics",
        },
        job_families={
            "Data and Analytics": [
                "Data Analyst",
                "Senior Data Analyst",
                "Data Engineer",
                "Lead Data Engineer",
            ],
            "Architecture": ["Solution Architect", "Senior Solution Architect"],
            "IT Operations": {
                "Service Desk": ["Service Desk Analyst", "Senior Service Desk Analyst"],
                "Infrastructure": ["Infrastructure Engineer"],
            },
        },
        role_to_fedip_level={
            "Data Analyst": "Practitioner",
            "Senior Data Analyst": "Senior Practitioner",
            "Senior Solution Architect": "Advanced Practitioner",
            "Solution Architect": "Associate Practitioner",
        },
        family_to_body={"Data and Analytics": "AphA"},
    )


@pytest.fixture
def engine(tables):
    return WizardEngine(tables)


@pytest.fixture
def at_role_step(engine):
    """State with category, family and sub-bucket answered."""
    state = engine.initial_state()
    state = engine.select(state, 0, "Technologist")
    state = engine.select(state, 1, "Data and Analytics")
    return engine.select(state, 2, "Data Analyst")


# =============================================================================
# Unit Tests: Forward Transitions
# =============================================================================


class TestForwardTransitions:
    """Tests for select() moving through the steps."""

    def test_initial_state(self, engine):
        state = engine.initial_state()
        assert state == WizardState(step=0, answers={}, result=None)

    def test_category_to_family(self, engine):
        state = engine.select(engine.initial_state(), 0, "Technologist")
        assert state.step == 1
        assert state.answers == {0: "Technologist"}

    def test_multi_bucket_family_goes_to_sub_bucket_step(self, engine):
        state = engine.select(engine.initial_state(), 0, "Technologist")
        state = engine.select(state, 1, "Data and Analytics")
        assert state.step == 2
        assert 2 not in state.answers

    def test_single_bucket_family_skips_to_role(self, engine):
        state = engine.select(engine.initial_state(), 0, "Technologist")
        state = engine.select(state, 1, "Architecture")
        assert state.step == 3
        assert state.answers[2] == "Solution Architect"

    def test_sub_bucket_to_role(self, at_role_step):
        assert at_role_step.step == 3
        assert at_role_step.answers == {0: "Technologist", 1: "Data and Analytics", 2: "Data Analyst"}

    def test_role_completes(self, engine, at_role_step):
        state = engine.select(at_role_step, 3, "Senior Data Analyst")
        assert state.step == 3
        assert state.is_complete
        assert state.result.professional_bodies == ("AphA", "BCS")
        assert state.result.fedip_level == "Senior Practitioner"

    def test_transitions_do_not_mutate_input(self, engine):
        initial = engine.initial_state()
        engine.select(initial, 0, "Technologist")
        assert initial.answers == {}
        assert initial.step == 0

    def test_state_answers_are_read_only(self, engine):
        state = engine.select(engine.initial_state(), 0, "Technologist")
        with pytest.raises(TypeError):
            state.answers[3] = "Bogus"
        assert state.answers == {0: "Technologist"}

    def test_state_copies_answers_passed_in(self):
        answers = {0: "Technologist"}
        state = WizardState(step=1, answers=answers)
        answers[1] = "Architecture"
        assert state.answers == {0: "Technologist"}

    def test_state_is_hashable(self, engine, at_role_step):
        done = engine.select(at_role_step, 3, "Data Analyst")
        same = WizardState(step=3, answers=dict(done.answers), result=done.result)
        assert hash(done) == hash(same)
        assert {done, same} == {done}

    def test_nested_family_sub_buckets(self, engine):
        state = engine.select(engine.initial_state(), 0, "Clinician")
        state = engine.select(state, 1, "IT Operations")
        assert state.step == 2
        assert engine.options(state.answers, 2) == ["Infrastructure", "Service Desk"]


# =============================================================================
# Unit Tests: Invalidation
# =============================================================================


class TestInvalidation:
    """Tests for dropping downstream answers."""

    def test_changing_family_clears_sub_bucket_and_role(self, engine, at_role_step):
        state = engine.back(engine.back(at_role_step))
        assert state.step == 1
        state = engine.select(state, 1, "IT Operations")
        assert state.answers == {0: "Technologist", 1: "IT Operations"}
        assert state.step == 2

    def test_reselecting_same_answer_still_clears_downstream(self, engine, at_role_step):
        state = engine.back(engine.back(at_role_step))
        state = engine.select(state, 1, "Data and Analytics")
        assert 2 not in state.answers
        assert 3 not in state.answers

    def test_changing_category_clears_everything_after(self, engine, at_role_step):
        state = engine.back(engine.back(engine.back(at_role_step)))
        state = engine.select(state, 0, "Clinician")
        assert state.answers == {0: "Clinician"}
        assert state.step == 1

    def test_select_earlier_step_without_back(self, engine, at_role_step):
        state = engine.select(at_role_step, 1, "Architecture")
        assert state.answers == {0: "Technologist", 1: "Architecture", 2: "Solution Architect"}
        assert state.step == 3


# =============================================================================
# Unit Tests: Next / Back / Restart
# =============================================================================


class TestNavigation:
    """Tests for advance(), back() and restart()."""

    def test_advance_without_selection_rejected(self, engine):
        state = engine.initial_state()
        with pytest.raises(SelectionRequiredError) as exc_info:
            engine.advance(state)
        assert exc_info.value.step == 0
        assert state == engine.initial_state()

    def test_advance_after_back_reuses_answer(self, engine, at_role_step):
        state = engine.back(at_role_step)
        assert state.step == 2
        state = engine.advance(state)
        assert state.step == 3
        assert state.answers[2] == "Data Analyst"

    def test_advance_at_role_step_requires_role(self, engine, at_role_step):
        with pytest.raises(SelectionRequiredError):
            engine.advance(at_role_step)

    def test_advance_at_last_step_computes_result(self, engine, at_role_step):
        done = engine.select(at_role_step, 3, "Data Analyst")
        # Go through a state that has the role answer but no result
        pending = WizardState(step=3, answers=dict(done.answers))
        state = engine.advance(pending)
        assert state.result == done.result

    def test_back_keeps_answers(self, engine, at_role_step):
        state = engine.back(at_role_step)
        assert state.step == 2
        assert state.answers == at_role_step.answers

    def test_back_at_first_step_is_noop(self, engine):
        state = engine.initial_state()
        assert engine.back(state) == state

    def test_restart(self, engine, at_role_step):
        done = engine.select(at_role_step, 3, "Data Analyst")
        assert engine.restart() == WizardState()
        assert done.is_complete


# =============================================================================
# Unit Tests: Validation and Terminal State
# =============================================================================


class TestValidation:
    """Tests for rejected selections."""

    def test_unknown_category(self, engine):
        with pytest.raises(InvalidSelectionError):
            engine.select(engine.initial_state(), 0, "Astronaut")

    def test_step_out_of_range(self, engine):
        with pytest.raises(InvalidSelectionError):
            engine.select(engine.initial_state(), 4, "Technologist")
        with pytest.raises(InvalidSelectionError):
            engine.select(engine.initial_state(), -1, "Technologist")

    def test_step_not_reached(self, engine):
        with pytest.raises(InvalidSelectionError, match="not reachable"):
            engine.select(engine.initial_state(), 2, "Data Analyst")

    def test_sub_bucket_must_belong_to_family(self, engine):
        state = engine.select(engine.initial_state(), 0, "Technologist")
        state = engine.select(state, 1, "Data and Analytics")
        with pytest.raises(InvalidSelectionError):
            engine.select(state, 2, "Service Desk")

    def test_role_must_belong_to_sub_bucket(self, engine, at_role_step):
        with pytest.raises(InvalidSelectionError):
            engine.select(at_role_step, 3, "Data Engineer")

    def test_invalid_selection_is_value_error(self, engine):
        with pytest.raises(ValueError):
            engine.select(engine.initial_state(), 0, "Astronaut")

    def test_completed_state_rejects_advance(self, engine, at_role_step):
        done = engine.select(at_role_step, 3, "Data Analyst")
        with pytest.raises(WizardCompletedError):
            engine.advance(done)
        assert engine.back(done) is done

    def test_changing_family_after_completion_clears_later_answers(self, engine, at_role_step):
        done = engine.select(at_role_step, 3, "Senior Data Analyst")
        state = engine.select(done, 1, "Architecture")
        assert not state.is_complete
        assert state.step == 3
        assert state.answers == {0: "Technologist", 1: "Architecture", 2: "Solution Architect"}

    def test_changing_family_to_multi_bucket_after_completion(self, engine, at_role_step):
        done = engine.select(at_role_step, 3, "Senior Data Analyst")
        state = engine.select(done, 1, "IT Operations")
        assert state.step == 2
        assert state.result is None
        assert state.answers == {0: "Technologist", 1: "IT Operations"}

    def test_changing_role_after_completion_recomputes(self, engine, at_role_step):
        done = engine.select(at_role_step, 3, "Data Analyst")
        state = engine.select(done, 3, "Senior Data Analyst")
        assert state.is_complete
        assert state.result.fedip_level == "Senior Practitioner"
        assert done.result.fedip_level == "Practitioner"


# =============================================================================
# Unit Tests: QuizSession
# =============================================================================


class TestQuizSession:
    """Tests for the presentation-facing facade."""

    def test_listing(self, tables):
        session = QuizSession(tables)
        assert session.list_categories() == ["Technologist", "Clinician"]
        assert session.list_families() == ["Data and Analytics", "Architecture", "IT Operations"]
        assert list(session.get_canonical_family("Data and Analytics")) == ["Data Analyst", "Data Engineer"]

    def test_changing_listed_family_does_not_change_options(self, tables):
        session = QuizSession(tables)
        session.get_canonical_family("Data and Analytics")["Injected"] = ["X"]
        session.select(0, "Technologist")
        session.select(1, "Data and Analytics")
        assert session.list_sub_buckets() == ["Data Analyst", "Data Engineer"]
        with pytest.raises(InvalidSelectionError):
            session.select(2, "Injected")

    def test_full_run(self, tables):
        session = QuizSession(tables)
        assert session.question() == "What best describes you?"
        session.select(0, "Technologist")
        session.select(1, "Data and Analytics")
        assert session.list_sub_buckets() == ["Data Analyst", "Data Engineer"]
        session.select(2, "Data Engineer")
        assert session.options() == ["Data Engineer", "Lead Data Engineer"]
        state = session.select(3, "Lead Data Engineer")
        assert state is session.state
        result = session.current_result()
        assert result.fedip_level == DEFAULT_FEDIP_LEVEL
        assert result.professional_bodies == ("AphA", "BCS")

    def test_current_result_none_until_complete(self, tables):
        session = QuizSession(tables)
        session.select(0, "Technologist")
        assert session.current_result() is None

    def test_restart_clears_result(self, tables):
        session = QuizSession(tables)
        session.select(0, "Clinician")
        session.select(1, "Architecture")
        session.select(3, "Solution Architect")
        assert session.current_result() is not None
        session.restart()
        assert session.current_result() is None
        assert session.state == WizardState()

    def test_roles_sorted_by_fedip(self, tables):
        session = QuizSession(tables, sort_by_fedip=True)
        session.select(0, "Technologist")
        session.select(1, "Architecture")
        assert session.list_roles() == ["Solution Architect", "Senior Solution Architect"]
        assert session.list_roles(by_fedip=False) == ["Solution Architect", "Senior Solution Architect"]

    def test_fedip_sort_differs_from_level_sort(self, tables):
        tables.role_to_fedip_level["Data Analyst"] = "Leading Practitioner"
        session = QuizSession(tables)
        session.select(0, "Technologist")
        session.select(1, "Data and Analytics")
        session.select(2, "Data Analyst")
        assert session.list_roles() == ["Data Analyst", "Senior Data Analyst"]
        assert session.list_roles(by_fedip=True) == ["Senior Data Analyst", "Data Analyst"]

    def test_single_source_policy(self, tables):
        session = QuizSession(tables, policy="single_source")
        session.select(0, "Clinician")
        session.select(1, "Data and Analytics")
        session.select(2, "Data Analyst")
        session.select(3, "Data Analyst")
        assert session.current_result().professional_bodies == ("Faculty of Clinical Informatics",)

    def test_advance_error_leaves_session_state(self, tables):
        session = QuizSession(tables)
        session.select(0, "Technologist")
        before = session.state
        with pytest.raises(SelectionRequiredError):
            session.advance()
        assert session.state is before

    def test_fallback_body_when_nothing_matches(self):
        tables = QuizTables(
            base_category_to_body={"Other": ""},
            job_families={"Misc": ["Porter"]},
            role_to_fedip_level={},
        )
        session = QuizSession(tables)
        session.select(0, "Other")
        session.select(1, "Misc")
        session.select(3, "Porter")
        assert session.current_result().professional_bodies == (DEFAULT_PROFESSIONAL_BODY,)


class TestWizardStateResponse:
    """Tests for the serialized wizard state."""

    def test_in_progress(self, tables):
        session = QuizSession(tables)
        session.select(0, "Technologist")
        response = WizardStateResponse.from_state(session.state, session.question(), session.options())
        assert response.step == 1
        assert response.answers == {0: "Technologist"}
        assert response.options == ["Data and Analytics", "Architecture", "IT Operations"]
        assert response.result is None

    def test_complete(self, tables):
        session = QuizSession(tables)
        session.select(0, "Technologist")
        session.select(1, "Architecture")
        session.select(3, "Senior Solution Architect")
        response = WizardStateResponse.from_state(session.state, session.question(), session.options())
        data = response.model_dump()
        assert data["step"] == 3
        assert data["result"]["fedip_level"] == "Advanced Practitioner"
        assert data["result"]["professional_bodies"] == ["BCS"]
