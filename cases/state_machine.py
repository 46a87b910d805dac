"""
SOS case state machine.

The transition table is a plain lookup: every state has zero or one
canonical successor and CLOSED is terminal. Role guards live in
validate_with_context() so the table itself stays a pure structure.
"""

import logging
from dataclasses import dataclass

from core.exceptions import Forbidden, InvalidTransition, PreconditionFailed
from .models import CaseStatus

logger = logging.getLogger(__name__)


TRANSITIONS = {
    CaseStatus.CREATED: frozenset({CaseStatus.ASSIGNED}),
    CaseStatus.ASSIGNED: frozenset({CaseStatus.ACKNOWLEDGED}),
    CaseStatus.ACKNOWLEDGED: frozenset({CaseStatus.EN_ROUTE}),
    CaseStatus.EN_ROUTE: frozenset({CaseStatus.ON_SCENE}),
    CaseStatus.ON_SCENE: frozenset({CaseStatus.ACTION_TAKEN}),
    CaseStatus.ACTION_TAKEN: frozenset({CaseStatus.CLOSED}),
    CaseStatus.CLOSED: frozenset(),
}

# Statuses only the assigned officer (or an admin) may move a case into
OFFICER_STATUSES = frozenset({
    CaseStatus.ACKNOWLEDGED,
    CaseStatus.EN_ROUTE,
    CaseStatus.ON_SCENE,
    CaseStatus.ACTION_TAKEN,
})


@dataclass(frozen=True)
class TransitionContext:
    """Identity and case facts needed by the role guards."""
    has_officer_assigned: bool = False
    actor_is_assigned_officer: bool = False
    actor_is_admin: bool = False


class CaseStateMachine:
    """
    Validates and authorizes lifecycle transitions for SOS cases.
    """

    @staticmethod
    def initial_status():
        """The only legal creation-time status."""
        return CaseStatus.CREATED

    @staticmethod
    def allowed_next(current):
        return TRANSITIONS[CaseStatus(current)]

    @classmethod
    def is_terminal(cls, status):
        return not cls.allowed_next(status)

    @classmethod
    def validate_transition(cls, current, requested):
        """
        Succeed silently if the transition is legal or a re-application of
        the current status; raise InvalidTransition otherwise.
        """
        current = CaseStatus(current)
        requested = CaseStatus(requested)

        if current == requested:
            return

        if requested not in TRANSITIONS[current]:
            logger.warning(f"Invalid status transition attempted: {current} -> {requested}")
            raise InvalidTransition(current.value, requested.value)

    @classmethod
    def validate_with_context(cls, current, requested, ctx):
        """
        Validate a transition against the table and the role guards.

        An admin may force-close a case from any non-terminal state; every
        other transition must follow the canonical chain.

        Raises:
            InvalidTransition: not on the chain
            Forbidden: actor lacks the role for this transition
            PreconditionFailed: acknowledging a case with no officer
        """
        current = CaseStatus(current)
        requested = CaseStatus(requested)

        force_close = (
            requested == CaseStatus.CLOSED
            and ctx.actor_is_admin
            and not cls.is_terminal(current)
        )
        if not force_close:
            cls.validate_transition(current, requested)

        if requested in OFFICER_STATUSES:
            if not (ctx.actor_is_assigned_officer or ctx.actor_is_admin):
                raise Forbidden("Only the assigned officer can update this status")

        if requested == CaseStatus.ACKNOWLEDGED and not ctx.has_officer_assigned:
            raise PreconditionFailed("case must be assigned before acknowledgement")

        if requested == CaseStatus.CLOSED:
            if current != CaseStatus.ACTION_TAKEN and not ctx.actor_is_admin:
                raise Forbidden("Only an admin can force close a case")
