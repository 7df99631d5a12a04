"""Application status transition table."""

from types import MappingProxyType
from typing import FrozenSet, Mapping, Union

from hireflow.core.errors import InvalidTransition
from hireflow.core.models import ApplicationStatus

INITIAL_STATUS = ApplicationStatus.APPLIED

TRANSITIONS: Mapping[ApplicationStatus, FrozenSet[ApplicationStatus]] = MappingProxyType({
    ApplicationStatus.APPLIED: frozenset({ApplicationStatus.INTERVIEWING}),
    ApplicationStatus.INTERVIEWING: frozenset({
        ApplicationStatus.UNDER_CONSIDERATION,
        ApplicationStatus.REJECTED,
    }),
    ApplicationStatus.UNDER_CONSIDERATION: frozenset({
        ApplicationStatus.SELECTED,
        ApplicationStatus.REJECTED,
    }),
    ApplicationStatus.SELECTED: frozenset(),
    ApplicationStatus.REJECTED: frozenset(),
})

TERMINAL_STATUSES: FrozenSet[ApplicationStatus] = frozenset(
    status for status, targets in TRANSITIONS.items() if not targets
)


def allowed_transitions(current: ApplicationStatus) -> FrozenSet[ApplicationStatus]:
    return TRANSITIONS[current]


def is_terminal(status: ApplicationStatus) -> bool:
    return status in TERMINAL_STATUSES


def check_transition(
    current: ApplicationStatus,
    requested: Union[ApplicationStatus, str]
) -> ApplicationStatus:
    """
    Validate a transition against the table.

    Args:
        current: Status the application is in now
        requested: Target status, as an enum member or its string value

    Returns:
        The requested status as an enum member

    Raises:
        InvalidTransition: unknown target, or target not allowed from current
    """
    try:
        target = ApplicationStatus(requested)
    except ValueError:
        raise InvalidTransition(current, requested) from None

    if target not in TRANSITIONS[current]:
        raise InvalidTransition(current, target)
    return target
