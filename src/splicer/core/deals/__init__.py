"""Pure deal rules: the status state machine and price arithmetic."""

from .lifecycle import (
    OPEN_STATES,
    TERMINAL_STATES,
    DealEvent,
    can_transition,
    effective_status,
    is_joinable,
    is_past_end,
    status_after_join,
    status_after_leave,
    transition,
)
from .pricing import (
    completion_percentage,
    compute_deal_price,
    compute_end_date,
    projected_savings,
    to_money,
)

__all__ = [
    "OPEN_STATES",
    "TERMINAL_STATES",
    "DealEvent",
    "can_transition",
    "completion_percentage",
    "compute_deal_price",
    "compute_end_date",
    "effective_status",
    "is_joinable",
    "is_past_end",
    "projected_savings",
    "status_after_join",
    "status_after_leave",
    "to_money",
    "transition",
]
