"""Group deal participation lifecycle: create, join, leave, cancel, complete.

Each public method is one unit of work. Counter and status writes go through
:meth:`GroupDealRepository.apply_state`, which only succeeds if the deal row
still carries the version read at the start of the transaction; otherwise the
whole unit is rolled back and run again from a fresh read.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from src.splicer.core.deals.lifecycle import (
    DealEvent,
    is_joinable,
    is_past_end,
    status_after_join,
    status_after_leave,
    transition,
)
from src.splicer.core.deals.pricing import compute_deal_price, compute_end_date
from src.splicer.core.errors import (
    AlreadyParticipating,
    DealExpired,
    DealFull,
    DealNotFound,
    DealNotJoinable,
    InvalidDealTerms,
    NotAuthorized,
    NotDealCreator,
    ParticipationNotFound,
    ProductUnavailable,
)
from src.splicer.core.models.forms import CreateDealForm, JoinDealForm
from src.splicer.core.services.database.db_session import DbSessionService
from src.splicer.core.services.database.db_utils import (
    RetryTransaction,
    run_in_transaction,
)
from src.splicer.entities.core._base import utc_now
from src.splicer.entities.core.user.entity import User
from src.splicer.entities.service.deal.entity import DealStatus, GroupDeal
from src.splicer.entities.service.deal.repository import GroupDealRepository
from src.splicer.entities.service.participant.entity import (
    DealParticipant,
    ParticipantStatus,
)
from src.splicer.entities.service.participant.repository import (
    DealParticipantRepository,
)
from src.splicer.entities.service.product.repository import ProductRepository
from src.splicer.runtime.context import get_config

LEFT_NOTE = " [Left the deal]"
CANCELLED_NOTE = " [Deal cancelled by creator]"


@dataclass(frozen=True)
class ParticipationResult:
    deal: GroupDeal
    participation: DealParticipant


def load_deal(deals: GroupDealRepository, deal_id: str) -> GroupDeal:
    deal = deals.get(deal_id)
    if deal is None:
        raise DealNotFound("Deal not found.", errors={"deal_id": ["Deal not found."]})
    return deal


def _write_state(
    deals: GroupDealRepository,
    deal: GroupDeal,
    *,
    current_participants: int,
    current_quantity: int,
    status: DealStatus,
) -> GroupDeal:
    updated = deals.apply_state(
        deal,
        current_participants=current_participants,
        current_quantity=current_quantity,
        status=status,
    )
    if updated is None:
        raise RetryTransaction(f"deal {deal.id} moved past version {deal.version}")
    return updated


class DealParticipationService:
    """Mutating operations on group deals and their participants."""

    def __init__(
        self,
        db: DbSessionService,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._db = db
        self._clock = clock

    def _run(self, action: str, work: Callable[[Session], object]):
        return run_in_transaction(
            self._db,
            work,
            action=action,
            attempts=get_config().deals.max_write_attempts,
        )

    def create_deal(self, form: CreateDealForm, actor: User) -> GroupDeal:
        def work(session: Session) -> GroupDeal:
            product = ProductRepository(session).get_active(form.product_id)
            if product is None:
                raise ProductUnavailable(
                    "Please select a valid product.",
                    errors={"product_id": ["Please select a valid product."]},
                )

            deal_price = compute_deal_price(product.base_price, form.discount_percentage)
            if deal_price <= 0:
                raise InvalidDealTerms(
                    "Discount leaves no price to pay.",
                    errors={"discount_percentage": ["Discount leaves no price to pay."]},
                )

            now = self._clock()
            deal = GroupDeal(
                product_id=product.id,
                title=form.title,
                description=form.description or "",
                target_participants=form.target_participants,
                target_quantity=form.target_quantity or form.target_participants,
                deal_price=deal_price,
                original_price=product.base_price,
                discount_percentage=form.discount_percentage,
                start_date=now,
                end_date=compute_end_date(now, form.duration_hours),
                status=DealStatus.PENDING,
                created_by=actor.id,
            )
            return GroupDealRepository(session).create(deal)

        deal = self._run("create group deal", work)
        logger.info(
            "User {} created deal {} on product {} at {}",
            actor.id,
            deal.id,
            deal.product_id,
            deal.deal_price,
        )
        return deal

    def join_deal(self, form: JoinDealForm, actor: User) -> ParticipationResult:
        def work(session: Session) -> ParticipationResult:
            deals = GroupDealRepository(session)
            participants = DealParticipantRepository(session)

            deal = load_deal(deals, form.deal_id)
            if not is_joinable(deal.status):
                raise DealNotJoinable("This group deal is no longer active.")
            now = self._clock()
            if is_past_end(deal, now):
                raise DealExpired("This group deal has expired.")

            product = ProductRepository(session).get(deal.product_id)
            cap = product.max_participants if product else None
            if cap is not None and deal.current_participants >= cap:
                raise DealFull("This group deal is already full.")

            existing = participants.get_for_user(deal.id, actor.id)
            if existing is not None and existing.status == ParticipantStatus.ACTIVE:
                raise AlreadyParticipating(
                    "You are already participating in this group deal."
                )

            if existing is not None:
                participation = participants.save(
                    existing.model_copy(
                        update={
                            "quantity": form.quantity,
                            "notes": form.notes,
                            "joined_at": now,
                            "status": ParticipantStatus.ACTIVE,
                        }
                    )
                )
            else:
                try:
                    participation = participants.create(
                        DealParticipant(
                            deal_id=deal.id,
                            user_id=actor.id,
                            quantity=form.quantity,
                            notes=form.notes,
                            joined_at=now,
                        )
                    )
                except IntegrityError as exc:
                    # Another request by the same user inserted first
                    raise RetryTransaction(str(exc.orig)) from exc

            count, quantity = participants.active_totals(deal.id)
            updated = _write_state(
                deals,
                deal,
                current_participants=count,
                current_quantity=quantity,
                status=status_after_join(deal, count),
            )
            return ParticipationResult(deal=updated, participation=participation)

        result = self._run("join group deal", work)
        logger.info(
            "User {} joined deal {} with quantity {} ({}/{} participants, {})",
            actor.id,
            result.deal.id,
            result.participation.quantity,
            result.deal.current_participants,
            result.deal.target_participants,
            result.deal.status,
        )
        return result

    def leave_deal(
        self, deal_id: str, actor: User, target_user_id: str | None = None
    ) -> ParticipationResult:
        """Withdraw ``target_user_id`` (default: the actor) from a deal.

        Removing someone else takes an admin or the deal's creator.
        """
        user_id = target_user_id or actor.id

        def work(session: Session) -> ParticipationResult:
            deals = GroupDealRepository(session)
            participants = DealParticipantRepository(session)

            deal = load_deal(deals, deal_id)
            if user_id != actor.id and not (actor.is_admin or deal.created_by == actor.id):
                raise NotAuthorized(
                    "Only an admin or the deal creator can remove other participants."
                )

            existing = participants.get_for_user(deal.id, user_id)
            if existing is None or existing.status != ParticipantStatus.ACTIVE:
                raise ParticipationNotFound("Participation not found.")

            participation = participants.save(
                existing.model_copy(
                    update={
                        "status": ParticipantStatus.CANCELLED,
                        "notes": (existing.notes or "") + LEFT_NOTE,
                    }
                )
            )

            count, quantity = participants.active_totals(deal.id)
            updated = _write_state(
                deals,
                deal,
                current_participants=count,
                current_quantity=quantity,
                status=status_after_leave(deal, count, self._clock()),
            )
            return ParticipationResult(deal=updated, participation=participation)

        result = self._run("leave group deal", work)
        logger.info(
            "User {} left deal {} (removed by {}); deal now {} with {} participants",
            user_id,
            result.deal.id,
            actor.id,
            result.deal.status,
            result.deal.current_participants,
        )
        return result

    def cancel_deal(self, deal_id: str, actor: User) -> GroupDeal:
        def work(session: Session) -> GroupDeal:
            deals = GroupDealRepository(session)
            deal = load_deal(deals, deal_id)
            if deal.created_by != actor.id:
                raise NotDealCreator("Only the deal creator can cancel this deal.")

            new_status = transition(deal.status, DealEvent.CANCEL)
            updated = _write_state(
                deals,
                deal,
                current_participants=deal.current_participants,
                current_quantity=deal.current_quantity,
                status=new_status,
            )
            closed = DealParticipantRepository(session).close_active(
                deal.id, ParticipantStatus.CANCELLED, CANCELLED_NOTE
            )
            logger.debug("Cancelled {} participations of deal {}", closed, deal.id)
            return updated

        deal = self._run("cancel group deal", work)
        logger.info("User {} cancelled deal {}", actor.id, deal.id)
        return deal

    def complete_deal(self, deal_id: str, actor: User) -> GroupDeal:
        """Close a deal whose participant target was met.

        Works from the stored ``active`` status, so a successful deal can be
        closed after its end date.
        """

        def work(session: Session) -> GroupDeal:
            deals = GroupDealRepository(session)
            deal = load_deal(deals, deal_id)
            if not (actor.is_admin or deal.created_by == actor.id):
                raise NotAuthorized(
                    "Only an admin or the deal creator can complete this deal."
                )

            new_status = transition(deal.status, DealEvent.COMPLETE)
            updated = _write_state(
                deals,
                deal,
                current_participants=deal.current_participants,
                current_quantity=deal.current_quantity,
                status=new_status,
            )
            DealParticipantRepository(session).close_active(
                deal.id, ParticipantStatus.COMPLETED
            )
            return updated

        deal = self._run("complete group deal", work)
        logger.info("User {} completed deal {}", actor.id, deal.id)
        return deal
