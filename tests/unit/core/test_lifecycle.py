"""Unit tests for the group deal status state machine."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from src.splicer.core.deals import (
    DealEvent,
    can_transition,
    effective_status,
    is_joinable,
    is_past_end,
    status_after_join,
    status_after_leave,
    transition,
)
from src.splicer.core.errors import InvalidTransition
from src.splicer.entities.service.deal import DealStatus, GroupDeal

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=UTC)


def make_deal(**overrides) -> GroupDeal:
    fields = {
        "product_id": "product-1",
        "title": "Test deal",
        "target_participants": 3,
        "target_quantity": 3,
        "deal_price": Decimal("75.00"),
        "original_price": Decimal("100.00"),
        "discount_percentage": Decimal("25"),
        "start_date": NOW - timedelta(hours=1),
        "end_date": NOW + timedelta(hours=23),
        "created_by": "user-1",
    }
    fields.update(overrides)
    return GroupDeal(**fields)


class TestTransition:
    @pytest.mark.parametrize(
        "status,event,expected",
        [
            (DealStatus.PENDING, DealEvent.TARGET_REACHED, DealStatus.ACTIVE),
            (DealStatus.ACTIVE, DealEvent.TARGET_REACHED, DealStatus.ACTIVE),
            (DealStatus.ACTIVE, DealEvent.BELOW_TARGET, DealStatus.PENDING),
            (DealStatus.PENDING, DealEvent.CANCEL, DealStatus.CANCELLED),
            (DealStatus.ACTIVE, DealEvent.CANCEL, DealStatus.CANCELLED),
            (DealStatus.PENDING, DealEvent.EXPIRE, DealStatus.EXPIRED),
            (DealStatus.ACTIVE, DealEvent.EXPIRE, DealStatus.EXPIRED),
            (DealStatus.ACTIVE, DealEvent.COMPLETE, DealStatus.COMPLETED),
        ],
    )
    def test_allowed_transitions(self, status, event, expected):
        assert transition(status, event) == expected
        assert can_transition(status, event)

    @pytest.mark.parametrize(
        "status", [DealStatus.COMPLETED, DealStatus.CANCELLED, DealStatus.EXPIRED]
    )
    @pytest.mark.parametrize("event", list(DealEvent))
    def test_terminal_states_reject_every_event(self, status, event):
        """Should never leave a terminal status."""
        assert not can_transition(status, event)
        with pytest.raises(InvalidTransition):
            transition(status, event)

    def test_pending_deal_cannot_complete(self):
        with pytest.raises(InvalidTransition) as exc_info:
            transition(DealStatus.PENDING, DealEvent.COMPLETE)

        assert exc_info.value.message == "A pending deal cannot handle 'complete'."
        assert exc_info.value.status_code == 409

    def test_accepts_plain_string_status(self):
        assert transition("pending", DealEvent.CANCEL) == DealStatus.CANCELLED


class TestEffectiveStatus:
    def test_open_deal_before_end_keeps_status(self):
        deal = make_deal(status=DealStatus.ACTIVE)
        assert effective_status(deal, NOW) == DealStatus.ACTIVE

    @pytest.mark.parametrize("status", [DealStatus.PENDING, DealStatus.ACTIVE])
    def test_open_deal_past_end_reads_expired(self, status):
        deal = make_deal(status=status, end_date=NOW - timedelta(seconds=1))
        assert effective_status(deal, NOW) == DealStatus.EXPIRED

    def test_end_date_is_exclusive(self):
        """Should treat a deal as over at exactly its end date."""
        deal = make_deal(end_date=NOW)
        assert is_past_end(deal, NOW)
        assert effective_status(deal, NOW) == DealStatus.EXPIRED

    @pytest.mark.parametrize("status", [DealStatus.COMPLETED, DealStatus.CANCELLED])
    def test_closed_deal_past_end_keeps_status(self, status):
        deal = make_deal(status=status, end_date=NOW - timedelta(days=2))
        assert effective_status(deal, NOW) == status

    def test_naive_end_date_is_read_as_utc(self):
        deal = make_deal()
        naive = deal.model_copy(update={"end_date": NOW.replace(tzinfo=None)})
        assert is_past_end(naive, NOW)


class TestParticipationStatus:
    def test_only_open_states_are_joinable(self):
        assert is_joinable(DealStatus.PENDING)
        assert is_joinable(DealStatus.ACTIVE)
        assert not is_joinable(DealStatus.COMPLETED)
        assert not is_joinable(DealStatus.CANCELLED)
        assert not is_joinable(DealStatus.EXPIRED)

    def test_join_reaching_target_activates(self):
        deal = make_deal(target_participants=3)
        assert status_after_join(deal, 2) == DealStatus.PENDING
        assert status_after_join(deal, 3) == DealStatus.ACTIVE

    def test_join_past_target_stays_active(self):
        deal = make_deal(target_participants=3, status=DealStatus.ACTIVE)
        assert status_after_join(deal, 5) == DealStatus.ACTIVE

    def test_leave_below_target_reverts_active_deal(self):
        deal = make_deal(target_participants=3, status=DealStatus.ACTIVE)
        assert status_after_leave(deal, 2, NOW) == DealStatus.PENDING
        assert status_after_leave(deal, 3, NOW) == DealStatus.ACTIVE

    def test_leave_after_end_date_keeps_active_status(self):
        deal = make_deal(target_participants=3, status=DealStatus.ACTIVE)
        after_end = NOW + timedelta(hours=24)
        assert status_after_leave(deal, 1, after_end) == DealStatus.ACTIVE

    @pytest.mark.parametrize(
        "status", [DealStatus.PENDING, DealStatus.COMPLETED, DealStatus.CANCELLED]
    )
    def test_leave_leaves_other_states_alone(self, status):
        deal = make_deal(target_participants=3, status=status)
        assert status_after_leave(deal, 0, NOW) == status
