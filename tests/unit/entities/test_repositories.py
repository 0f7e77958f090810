"""Unit tests for the entity repositories against an in-memory database."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from src.splicer.entities import (
    Category,
    CategoryRepository,
    DealParticipant,
    DealParticipantRepository,
    DealStatus,
    GroupDeal,
    GroupDealRepository,
    ParticipantStatus,
    Product,
    ProductRepository,
    User,
    UserRepository,
    UserRole,
)

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=UTC)


@pytest.fixture
def owner(session) -> User:
    return UserRepository(session).create(
        User(name="Owner", issuer="splicer-api", subject="owner")
    )


@pytest.fixture
def stored_product(session, owner) -> Product:
    category = CategoryRepository(session).create(Category(name="Outdoor"))
    return ProductRepository(session).create(
        Product(
            name="Tent",
            description="Two person tent",
            category_id=category.id,
            base_price=Decimal("250.00"),
            created_by=owner.id,
        )
    )


@pytest.fixture
def stored_deal(session, stored_product, owner) -> GroupDeal:
    return GroupDealRepository(session).create(
        GroupDeal(
            product_id=stored_product.id,
            title="Tents",
            target_participants=2,
            target_quantity=2,
            deal_price=Decimal("200.00"),
            original_price=Decimal("250.00"),
            discount_percentage=Decimal("20"),
            start_date=NOW,
            end_date=NOW + timedelta(days=1),
            created_by=owner.id,
        )
    )


class TestUserRepository:
    def test_lookup_by_issuer_and_subject(self, session, owner):
        repo = UserRepository(session)

        assert repo.get_by_issuer_subject("splicer-api", "owner") == owner
        assert repo.get_by_issuer_subject("other-issuer", "owner") is None

    def test_issuer_subject_is_unique(self, session, owner):
        with pytest.raises(IntegrityError):
            UserRepository(session).create(
                User(name="Twin", issuer="splicer-api", subject="owner")
            )

    def test_update_role(self, session, owner):
        updated = UserRepository(session).update(
            owner.model_copy(update={"role": UserRole.ADMIN})
        )
        assert updated.is_admin


class TestGroupDealRepository:
    def test_round_trip_keeps_money_and_utc(self, session, stored_deal):
        session.expire_all()
        loaded = GroupDealRepository(session).get(stored_deal.id)

        assert loaded.deal_price == Decimal("200.00")
        assert loaded.end_date.tzinfo is not None
        assert loaded.end_date == NOW + timedelta(days=1)

    def test_apply_state_bumps_version(self, session, stored_deal):
        repo = GroupDealRepository(session)

        updated = repo.apply_state(
            stored_deal,
            current_participants=2,
            current_quantity=3,
            status=DealStatus.ACTIVE,
        )

        assert updated.version == stored_deal.version + 1
        reloaded = repo.get(stored_deal.id)
        assert reloaded.status == DealStatus.ACTIVE
        assert reloaded.current_quantity == 3
        assert reloaded.version == updated.version

    def test_apply_state_with_stale_version(self, session, stored_deal):
        repo = GroupDealRepository(session)
        repo.apply_state(
            stored_deal, current_participants=1, current_quantity=1, status=DealStatus.PENDING
        )

        stale = repo.apply_state(
            stored_deal, current_participants=2, current_quantity=2, status=DealStatus.ACTIVE
        )

        assert stale is None
        assert repo.get(stored_deal.id).current_participants == 1

    def test_list_filters(self, session, stored_deal, stored_product):
        repo = GroupDealRepository(session)

        assert [d.id for d in repo.list_deals(statuses=[DealStatus.PENDING])] == [
            stored_deal.id
        ]
        assert repo.list_deals(statuses=[DealStatus.ACTIVE]) == []
        assert len(repo.list_deals(product_id=stored_product.id)) == 1


class TestDealParticipantRepository:
    def test_one_row_per_user_and_deal(self, session, stored_deal, owner):
        repo = DealParticipantRepository(session)
        repo.create(DealParticipant(deal_id=stored_deal.id, user_id=owner.id, quantity=1))

        with pytest.raises(IntegrityError):
            repo.create(
                DealParticipant(deal_id=stored_deal.id, user_id=owner.id, quantity=2)
            )

    def test_active_totals_and_close(self, session, stored_deal, owner):
        users = UserRepository(session)
        guest = users.create(User(name="Guest", issuer="splicer-api", subject="guest"))
        repo = DealParticipantRepository(session)
        repo.create(DealParticipant(deal_id=stored_deal.id, user_id=owner.id, quantity=2))
        repo.create(
            DealParticipant(deal_id=stored_deal.id, user_id=guest.id, quantity=3, notes="hi")
        )

        assert repo.active_totals(stored_deal.id) == (2, 5)

        closed = repo.close_active(stored_deal.id, ParticipantStatus.CANCELLED, " [x]")

        assert closed == 2
        assert repo.active_totals(stored_deal.id) == (0, 0)
        rows = repo.list_for_deal(stored_deal.id, status=None)
        assert {p.notes for p in rows} == {" [x]", "hi [x]"}
        assert len(repo.list_for_user(guest.id)) == 1

    def test_active_totals_of_empty_deal(self, session, stored_deal):
        assert DealParticipantRepository(session).active_totals(stored_deal.id) == (0, 0)


class TestCatalogRepositories:
    def test_usage_counts(self, session, stored_product, stored_deal):
        categories = CategoryRepository(session)
        products = ProductRepository(session)

        assert categories.count_products(stored_product.category_id) == 1
        assert products.count_deals(stored_product.id) == 1

    def test_get_active_skips_inactive(self, session, stored_product):
        products = ProductRepository(session)
        products.update(stored_product.model_copy(update={"is_active": False}))

        assert products.get_active(stored_product.id) is None
        assert products.get(stored_product.id) is not None
