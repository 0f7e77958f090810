"""Unit tests for deal read models."""

from decimal import Decimal

import pytest

from src.splicer.core.errors import DealNotFound
from src.splicer.core.models import JoinDealForm
from src.splicer.entities.service.deal import DealStatus
from src.splicer.entities.service.participant import ParticipantStatus


def join(service, deal, user, quantity=1):
    return service.join_deal(JoinDealForm(deal_id=deal.id, quantity=quantity), user)


class TestDealViews:
    def test_get_deal_includes_names(self, queries, open_deal, product, creator):
        view = queries.get_deal(open_deal.id)

        assert view.deal.id == open_deal.id
        assert view.effective_status == DealStatus.PENDING
        assert view.product_name == product.name
        assert view.creator_name == creator.name
        assert not view.is_expired

    def test_get_unknown_deal(self, queries):
        with pytest.raises(DealNotFound):
            queries.get_deal("00000000-0000-0000-0000-000000000000")

    def test_expiry_is_derived_without_writing(self, db, queries, open_deal, clock):
        clock.advance(hours=25)

        view = queries.get_deal(open_deal.id)

        assert view.effective_status == DealStatus.EXPIRED
        assert view.is_expired
        assert view.deal.status == DealStatus.PENDING
        assert view.deal.version == open_deal.version


class TestListDeals:
    @pytest.fixture
    def deals(self, deal_service, deal_form_factory, creator):
        short = deal_service.create_deal(
            deal_form_factory(title="Short", duration_hours=2), creator
        )
        long = deal_service.create_deal(
            deal_form_factory(title="Long", duration_hours=48), creator
        )
        cancelled = deal_service.create_deal(
            deal_form_factory(title="Cancelled", duration_hours=24), creator
        )
        deal_service.cancel_deal(cancelled.id, creator)
        return short, long, cancelled

    def test_open_deals_soonest_ending_first(self, queries, deals):
        titles = [v.deal.title for v in queries.list_deals()]
        assert titles == ["Short", "Long"]

    def test_expired_deals_drop_out_of_the_open_list(self, queries, deals, clock):
        clock.advance(hours=3)

        assert [v.deal.title for v in queries.list_deals()] == ["Long"]
        expired = queries.list_deals(status=DealStatus.EXPIRED)
        assert [v.deal.title for v in expired] == ["Short"]

    def test_include_closed(self, queries, deals):
        titles = {v.deal.title for v in queries.list_deals(include_closed=True)}
        assert titles == {"Short", "Long", "Cancelled"}

    def test_filter_by_status_and_product(self, queries, deals, product, product_factory):
        cancelled = queries.list_deals(status=DealStatus.CANCELLED)
        assert [v.deal.title for v in cancelled] == ["Cancelled"]

        other = product_factory(name="Dutch oven")
        assert queries.list_deals(product_id=other.id) == []
        assert len(queries.list_deals(product_id=product.id)) == 2

    def test_filter_by_creator(self, queries, deals, creator, alice):
        assert len(queries.list_deals(created_by=creator.id)) == 2
        assert queries.list_deals(created_by=alice.id) == []


class TestDealStats:
    def test_stats_follow_active_participants(
        self, queries, deal_service, open_deal, alice, bob, clock
    ):
        join(deal_service, open_deal, alice, quantity=2)
        join(deal_service, open_deal, bob, quantity=1)
        deal_service.leave_deal(open_deal.id, bob)
        clock.advance(hours=5, minutes=30)

        stats = queries.deal_stats(open_deal.id)

        assert stats.total_participants == 1
        assert stats.total_quantity == 2
        assert stats.completion_percentage == Decimal("50.0")
        assert stats.hours_remaining == 18
        assert not stats.is_threshold_met
        assert stats.projected_savings == Decimal("50.00")

    def test_hours_remaining_never_negative(self, queries, open_deal, clock):
        clock.advance(days=2)
        assert queries.deal_stats(open_deal.id).hours_remaining == 0

    def test_participants_list(self, queries, deal_service, open_deal, alice, bob):
        join(deal_service, open_deal, alice, quantity=2)
        join(deal_service, open_deal, bob)
        deal_service.leave_deal(open_deal.id, bob)

        participants = queries.list_participants(open_deal.id)

        assert [(p.user_name, p.quantity) for p in participants] == [("Alice", 2)]
        assert participants[0].status == ParticipantStatus.ACTIVE


class TestUserViews:
    def test_participations_and_stats(
        self,
        queries,
        deal_service,
        deal_form_factory,
        open_deal,
        creator,
        alice,
        bob,
    ):
        other = deal_service.create_deal(deal_form_factory(title="Other"), creator)
        third = deal_service.create_deal(deal_form_factory(title="Third"), creator)

        join(deal_service, open_deal, alice, quantity=2)
        join(deal_service, open_deal, bob)
        deal_service.complete_deal(open_deal.id, creator)

        join(deal_service, other, alice, quantity=3)
        join(deal_service, third, alice)
        deal_service.leave_deal(third.id, alice)

        views = queries.user_participations(alice.id)
        by_deal = {v.deal_id: v for v in views}
        assert by_deal[open_deal.id].status == ParticipantStatus.COMPLETED
        assert by_deal[open_deal.id].deal_status == DealStatus.COMPLETED
        assert by_deal[open_deal.id].savings == Decimal("50.00")
        assert by_deal[other.id].deal_title == "Other"

        stats = queries.user_stats(alice.id)
        assert stats.total_participations == 3
        assert stats.active_participations == 1
        assert stats.completed_participations == 1
        assert stats.cancelled_participations == 1
        assert stats.total_active_quantity == 3
        assert stats.total_savings == Decimal("50.00")

    def test_user_without_participations(self, queries, alice):
        assert queries.user_participations(alice.id) == []
        assert queries.user_stats(alice.id).total_savings == Decimal("0.00")
