"""
Transition tables for lost reports and found items.

Each table maps ``(current_status, action)`` to the next status. An action
missing from a table is illegal from that status; ``next_lost_status`` and
``next_found_status`` are the only places that decide legality.
"""

from enum import Enum

from app.models.status import FoundStatus, LostStatus
from app.services.errors import InvalidTransition


class Action(str, Enum):
    mark_found = "mark_found"
    match = "match"
    claim = "claim"
    expire = "expire"
    archive = "archive"


LOST_TRANSITIONS = {
    (LostStatus.Reported, Action.mark_found): LostStatus.Found,
    (LostStatus.Reported, Action.match): LostStatus.Matched,
    (LostStatus.Found, Action.match): LostStatus.Matched,
    (LostStatus.Matched, Action.claim): LostStatus.Claimed,
    (LostStatus.Reported, Action.expire): LostStatus.Unclaimed,
    (LostStatus.Reported, Action.archive): LostStatus.Archived,
    (LostStatus.Found, Action.archive): LostStatus.Archived,
    (LostStatus.Matched, Action.archive): LostStatus.Archived,
    (LostStatus.Unclaimed, Action.archive): LostStatus.Archived,
}

FOUND_TRANSITIONS = {
    (FoundStatus.Found, Action.match): FoundStatus.Matched,
    (FoundStatus.Found, Action.claim): FoundStatus.Claimed,
    (FoundStatus.Matched, Action.claim): FoundStatus.Claimed,
    (FoundStatus.Found, Action.expire): FoundStatus.Unclaimed,
    (FoundStatus.Found, Action.archive): FoundStatus.Archived,
    (FoundStatus.Matched, Action.archive): FoundStatus.Archived,
    (FoundStatus.Unclaimed, Action.archive): FoundStatus.Archived,
}

# Hard delete is not a status edge; these are the only statuses it may leave from
LOST_DELETABLE = frozenset({LostStatus.Reported, LostStatus.Unclaimed})

LOST_TERMINAL = frozenset({LostStatus.Claimed, LostStatus.Archived})


def can_transition_lost(status: LostStatus, action: Action) -> bool:
    return (LostStatus(status), action) in LOST_TRANSITIONS


def can_transition_found(status: FoundStatus, action: Action) -> bool:
    return (FoundStatus(status), action) in FOUND_TRANSITIONS


def next_lost_status(status: LostStatus, action: Action) -> LostStatus:
    try:
        return LOST_TRANSITIONS[(LostStatus(status), action)]
    except KeyError:
        raise InvalidTransition(
            f"Cannot {action.value} a lost report in status '{LostStatus(status).value}'"
        )


def next_found_status(status: FoundStatus, action: Action) -> FoundStatus:
    try:
        return FOUND_TRANSITIONS[(FoundStatus(status), action)]
    except KeyError:
        raise InvalidTransition(
            f"Cannot {action.value} a found item in status '{FoundStatus(status).value}'"
        )


def lost_sources(action: Action) -> frozenset:
    """Statuses a lost report may leave from via ``action``."""
    return frozenset(src for (src, act) in LOST_TRANSITIONS if act == action)


def found_sources(action: Action) -> frozenset:
    """Statuses a found item may leave from via ``action``."""
    return frozenset(src for (src, act) in FOUND_TRANSITIONS if act == action)
