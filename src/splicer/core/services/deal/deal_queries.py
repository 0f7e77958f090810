"""Read models over deals and participations.

Reads never write. Expiry is applied on the fly through
:func:`~src.splicer.core.deals.lifecycle.effective_status`.
"""

from collections.abc import Callable
from datetime import datetime
from decimal import Decimal

from sqlmodel import Session

from src.splicer.core.deals.lifecycle import OPEN_STATES, effective_status
from src.splicer.core.deals.pricing import completion_percentage, projected_savings
from src.splicer.core.models.views import (
    DealStats,
    DealView,
    ParticipantView,
    UserDealStats,
    UserParticipationView,
)
from src.splicer.core.services.database.db_session import DbSessionService
from src.splicer.core.services.database.db_utils import run_in_transaction
from src.splicer.core.services.deal.deal_service import load_deal
from src.splicer.entities.core._base import as_utc, utc_now
from src.splicer.entities.core.user.repository import UserRepository
from src.splicer.entities.service.deal.entity import DealStatus, GroupDeal
from src.splicer.entities.service.deal.repository import GroupDealRepository
from src.splicer.entities.service.participant.entity import ParticipantStatus
from src.splicer.entities.service.participant.repository import (
    DealParticipantRepository,
)
from src.splicer.entities.service.product.repository import ProductRepository


class DealQueryService:
    def __init__(
        self,
        db: DbSessionService,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._db = db
        self._clock = clock

    def _read(self, action: str, work: Callable[[Session], object]):
        return run_in_transaction(self._db, work, action=action)

    def _views(self, session: Session, deals: list[GroupDeal]) -> list[DealView]:
        now = self._clock()
        products = ProductRepository(session).get_many(
            sorted({d.product_id for d in deals})
        )
        users = UserRepository(session).get_many(sorted({d.created_by for d in deals}))
        views = []
        for deal in deals:
            product = products.get(deal.product_id)
            creator = users.get(deal.created_by)
            views.append(
                DealView(
                    deal=deal,
                    effective_status=effective_status(deal, now),
                    product_name=product.name if product else None,
                    creator_name=creator.name if creator else None,
                )
            )
        return views

    def get_deal(self, deal_id: str) -> DealView:
        def work(session: Session) -> DealView:
            deal = load_deal(GroupDealRepository(session), deal_id)
            return self._views(session, [deal])[0]

        return self._read("fetch group deal", work)

    def list_deals(
        self,
        status: DealStatus | None = None,
        product_id: str | None = None,
        created_by: str | None = None,
        include_closed: bool = False,
    ) -> list[DealView]:
        """List deals soonest-ending first, filtered on their effective status.

        Without ``status`` only open (pending or active, not yet expired) deals
        are returned unless ``include_closed`` is set.
        """

        def work(session: Session) -> list[DealView]:
            deals = GroupDealRepository(session).list_deals(
                product_id=product_id, created_by=created_by
            )
            views = self._views(session, deals)
            if status is not None:
                return [v for v in views if v.effective_status == status]
            if include_closed:
                return views
            return [v for v in views if v.effective_status in OPEN_STATES]

        return self._read("fetch group deals", work)

    def deal_stats(self, deal_id: str) -> DealStats:
        def work(session: Session) -> DealStats:
            deal = load_deal(GroupDealRepository(session), deal_id)
            count, quantity = DealParticipantRepository(session).active_totals(deal.id)
            remaining = as_utc(deal.end_date) - as_utc(self._clock())
            return DealStats(
                deal_id=deal.id,
                total_participants=count,
                total_quantity=quantity,
                completion_percentage=completion_percentage(
                    count, deal.target_participants
                ),
                hours_remaining=max(0, int(remaining.total_seconds() // 3600)),
                is_threshold_met=count >= deal.target_participants,
                projected_savings=projected_savings(
                    deal.original_price, deal.deal_price, quantity
                ),
            )

        return self._read("fetch deal statistics", work)

    def list_participants(self, deal_id: str) -> list[ParticipantView]:
        def work(session: Session) -> list[ParticipantView]:
            deal = load_deal(GroupDealRepository(session), deal_id)
            rows = DealParticipantRepository(session).list_for_deal(deal.id)
            users = UserRepository(session).get_many([p.user_id for p in rows])
            return [
                ParticipantView(
                    id=p.id,
                    user_id=p.user_id,
                    user_name=users[p.user_id].name if p.user_id in users else "Unknown",
                    quantity=p.quantity,
                    joined_at=p.joined_at,
                    status=p.status,
                    notes=p.notes,
                )
                for p in rows
            ]

        return self._read("fetch deal participants", work)

    def user_participations(self, user_id: str) -> list[UserParticipationView]:
        def work(session: Session) -> list[UserParticipationView]:
            rows = DealParticipantRepository(session).list_for_user(user_id)
            deals = GroupDealRepository(session).get_many([p.deal_id for p in rows])
            now = self._clock()
            views = []
            for p in rows:
                deal = deals.get(p.deal_id)
                if deal is None:
                    continue
                views.append(
                    UserParticipationView(
                        participation_id=p.id,
                        deal_id=deal.id,
                        deal_title=deal.title,
                        deal_status=effective_status(deal, now),
                        quantity=p.quantity,
                        status=p.status,
                        joined_at=p.joined_at,
                        deal_price=deal.deal_price,
                        original_price=deal.original_price,
                        savings=projected_savings(
                            deal.original_price, deal.deal_price, p.quantity
                        ),
                        end_date=deal.end_date,
                    )
                )
            return views

        return self._read("fetch user participations", work)

    def user_stats(self, user_id: str) -> UserDealStats:
        stats = UserDealStats()
        total_savings = Decimal("0.00")
        for view in self.user_participations(user_id):
            stats.total_participations += 1
            if view.status == ParticipantStatus.ACTIVE:
                stats.active_participations += 1
                stats.total_active_quantity += view.quantity
            elif view.status == ParticipantStatus.COMPLETED:
                stats.completed_participations += 1
                total_savings += view.savings
            else:
                stats.cancelled_participations += 1
        stats.total_savings = total_savings
        return stats
