"""
Unit tests for the case lifecycle state machine.
"""
import itertools

import pytest

from cases.models import CaseStatus
from cases.state_machine import CaseStateMachine, TransitionContext
from core.exceptions import Forbidden, InvalidTransition, PreconditionFailed

pytestmark = pytest.mark.unit

CHAIN = [
    CaseStatus.CREATED,
    CaseStatus.ASSIGNED,
    CaseStatus.ACKNOWLEDGED,
    CaseStatus.EN_ROUTE,
    CaseStatus.ON_SCENE,
    CaseStatus.ACTION_TAKEN,
    CaseStatus.CLOSED,
]
FORWARD = set(zip(CHAIN, CHAIN[1:]))
ALL_PAIRS = list(itertools.product(CHAIN, CHAIN))

OFFICER = TransitionContext(has_officer_assigned=True, actor_is_assigned_officer=True)
ADMIN = TransitionContext(has_officer_assigned=True, actor_is_admin=True)
STRANGER = TransitionContext(has_officer_assigned=True)


def is_legal(current, requested):
    return current == requested or (current, requested) in FORWARD


class TestTransitionTable:

    def test_table_has_thirteen_legal_pairs(self):
        assert len(ALL_PAIRS) == 49
        assert sum(is_legal(c, r) for c, r in ALL_PAIRS) == 13

    @pytest.mark.parametrize('current,requested', [p for p in ALL_PAIRS if is_legal(*p)])
    def test_legal_pairs_pass(self, current, requested):
        CaseStateMachine.validate_transition(current, requested)

    @pytest.mark.parametrize('current,requested', [p for p in ALL_PAIRS if not is_legal(*p)])
    def test_illegal_pairs_raise(self, current, requested):
        with pytest.raises(InvalidTransition) as exc:
            CaseStateMachine.validate_transition(current, requested)
        assert current.value in exc.value.message
        assert requested.value in exc.value.message

    def test_accepts_plain_strings(self):
        CaseStateMachine.validate_transition('CREATED', 'ASSIGNED')

    def test_reapplying_assigned_is_idempotent(self):
        CaseStateMachine.validate_transition(CaseStatus.ASSIGNED, CaseStatus.ASSIGNED)

    def test_allowed_next_is_single_successor(self):
        for current, nxt in FORWARD:
            assert CaseStateMachine.allowed_next(current) == frozenset({nxt})

    def test_only_closed_is_terminal(self):
        assert CaseStateMachine.is_terminal(CaseStatus.CLOSED)
        assert CaseStateMachine.allowed_next(CaseStatus.CLOSED) == frozenset()
        assert not any(CaseStateMachine.is_terminal(s) for s in CHAIN[:-1])

    def test_initial_status(self):
        assert CaseStateMachine.initial_status() == CaseStatus.CREATED


class TestRoleGuards:

    @pytest.mark.parametrize('current,requested', [
        (CaseStatus.ASSIGNED, CaseStatus.ACKNOWLEDGED),
        (CaseStatus.ACKNOWLEDGED, CaseStatus.EN_ROUTE),
        (CaseStatus.EN_ROUTE, CaseStatus.ON_SCENE),
        (CaseStatus.ON_SCENE, CaseStatus.ACTION_TAKEN),
    ])
    def test_officer_steps_need_assigned_officer_or_admin(self, current, requested):
        CaseStateMachine.validate_with_context(current, requested, OFFICER)
        CaseStateMachine.validate_with_context(current, requested, ADMIN)
        with pytest.raises(Forbidden):
            CaseStateMachine.validate_with_context(current, requested, STRANGER)

    def test_acknowledge_unassigned_case_fails_precondition(self):
        ctx = TransitionContext(has_officer_assigned=False, actor_is_admin=True)
        with pytest.raises(PreconditionFailed) as exc:
            CaseStateMachine.validate_with_context(CaseStatus.ASSIGNED, CaseStatus.ACKNOWLEDGED, ctx)
        assert 'assigned before acknowledgement' in exc.value.message

    def test_acknowledge_from_created_is_invalid(self):
        ctx = TransitionContext(has_officer_assigned=False)
        with pytest.raises(InvalidTransition):
            CaseStateMachine.validate_with_context(CaseStatus.CREATED, CaseStatus.ACKNOWLEDGED, ctx)

    def test_close_after_action_taken(self):
        CaseStateMachine.validate_with_context(CaseStatus.ACTION_TAKEN, CaseStatus.CLOSED, OFFICER)

    @pytest.mark.parametrize('current', CHAIN[:-2])
    def test_admin_can_force_close_any_open_case(self, current):
        CaseStateMachine.validate_with_context(current, CaseStatus.CLOSED, ADMIN)

    @pytest.mark.parametrize('current', CHAIN[:-2])
    def test_officer_cannot_skip_to_closed(self, current):
        with pytest.raises(InvalidTransition):
            CaseStateMachine.validate_with_context(current, CaseStatus.CLOSED, OFFICER)

    def test_closed_case_cannot_be_reopened_by_admin(self):
        with pytest.raises(InvalidTransition):
            CaseStateMachine.validate_with_context(CaseStatus.CLOSED, CaseStatus.ASSIGNED, ADMIN)

    def test_guards_still_apply_to_reapplied_status(self):
        with pytest.raises(Forbidden):
            CaseStateMachine.validate_with_context(CaseStatus.EN_ROUTE, CaseStatus.EN_ROUTE, STRANGER)
