"""Group deal status state machine.

Every status change of a deal goes through :func:`transition`. The function is
pure: it never touches storage and knows nothing about counters, it only maps
``(current status, event)`` to the next status or rejects the pair.

    pending   --TARGET_REACHED--> active
    active    --BELOW_TARGET----> pending
    pending   --CANCEL----------> cancelled     (also from active)
    pending   --EXPIRE----------> expired       (also from active)
    active    --COMPLETE--------> completed

``completed``, ``cancelled`` and ``expired`` are terminal. Expiry is never
written by a background job; :func:`effective_status` derives it at read time
from ``end_date``.
"""

from datetime import datetime
from enum import StrEnum

from src.splicer.core.errors import InvalidTransition
from src.splicer.entities.core._base import as_utc
from src.splicer.entities.service.deal.entity import DealStatus, GroupDeal


class DealEvent(StrEnum):
    TARGET_REACHED = "target_reached"
    BELOW_TARGET = "below_target"
    CANCEL = "cancel"
    EXPIRE = "expire"
    COMPLETE = "complete"


OPEN_STATES = frozenset({DealStatus.PENDING, DealStatus.ACTIVE})
TERMINAL_STATES = frozenset(
    {DealStatus.COMPLETED, DealStatus.CANCELLED, DealStatus.EXPIRED}
)

_TRANSITIONS: dict[tuple[DealStatus, DealEvent], DealStatus] = {
    (DealStatus.PENDING, DealEvent.TARGET_REACHED): DealStatus.ACTIVE,
    (DealStatus.ACTIVE, DealEvent.TARGET_REACHED): DealStatus.ACTIVE,
    (DealStatus.PENDING, DealEvent.BELOW_TARGET): DealStatus.PENDING,
    (DealStatus.ACTIVE, DealEvent.BELOW_TARGET): DealStatus.PENDING,
    (DealStatus.PENDING, DealEvent.CANCEL): DealStatus.CANCELLED,
    (DealStatus.ACTIVE, DealEvent.CANCEL): DealStatus.CANCELLED,
    (DealStatus.PENDING, DealEvent.EXPIRE): DealStatus.EXPIRED,
    (DealStatus.ACTIVE, DealEvent.EXPIRE): DealStatus.EXPIRED,
    (DealStatus.ACTIVE, DealEvent.COMPLETE): DealStatus.COMPLETED,
}


def can_transition(status: DealStatus, event: DealEvent) -> bool:
    return (DealStatus(status), event) in _TRANSITIONS


def transition(status: DealStatus, event: DealEvent) -> DealStatus:
    """Return the status a deal in ``status`` moves to on ``event``.

    Raises:
        InvalidTransition: when the event is not allowed from ``status``.
    """
    try:
        return _TRANSITIONS[(DealStatus(status), event)]
    except KeyError:
        raise InvalidTransition(
            f"A {DealStatus(status).value} deal cannot handle '{event.value}'."
        ) from None


def is_past_end(deal: GroupDeal, now: datetime) -> bool:
    return as_utc(deal.end_date) <= as_utc(now)


def effective_status(deal: GroupDeal, now: datetime) -> DealStatus:
    """Status as seen by readers: open deals past their end date read as expired."""
    if deal.status in OPEN_STATES and is_past_end(deal, now):
        return transition(deal.status, DealEvent.EXPIRE)
    return deal.status


def is_joinable(status: DealStatus) -> bool:
    return status in OPEN_STATES


def status_after_join(deal: GroupDeal, participants_after: int) -> DealStatus:
    if participants_after >= deal.target_participants:
        return transition(deal.status, DealEvent.TARGET_REACHED)
    return deal.status


def status_after_leave(
    deal: GroupDeal, participants_after: int, now: datetime
) -> DealStatus:
    """Revert an active deal that dropped below target; leave other states alone.

    A deal past its end date keeps its stored status so it can still be completed.
    """
    if (
        deal.status == DealStatus.ACTIVE
        and participants_after < deal.target_participants
        and not is_past_end(deal, now)
    ):
        return transition(deal.status, DealEvent.BELOW_TARGET)
    return deal.status
