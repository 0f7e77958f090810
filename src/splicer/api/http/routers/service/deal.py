"""Group deal API router: browsing plus the participation lifecycle."""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.splicer.api.http.deps import (
    get_current_user,
    get_deal_queries,
    get_deal_service,
    rate_limited_user,
)
from src.splicer.core.models.forms import CreateDealForm, JoinDealForm
from src.splicer.core.models.views import DealStats, DealView, ParticipantView
from src.splicer.core.services import DealParticipationService, DealQueryService
from src.splicer.entities.core.user import User
from src.splicer.entities.service.deal import DealStatus, GroupDeal
from src.splicer.entities.service.participant import DealParticipant

router = APIRouter()


class JoinRequest(BaseModel):
    """Raw join payload; checked by :class:`JoinDealForm` together with the path id."""

    quantity: Any = 1
    notes: Any = None


class LeaveRequest(BaseModel):
    user_id: str | None = None


class ParticipationResponse(BaseModel):
    message: str
    deal: GroupDeal
    participation: DealParticipant


@router.get("/", response_model=list[DealView])
def list_deals(
    status: DealStatus | None = None,
    product_id: str | None = None,
    include_closed: bool = False,
    queries: DealQueryService = Depends(get_deal_queries),
) -> list[DealView]:
    """List deals by effective status; open deals only unless asked otherwise."""
    return queries.list_deals(
        status=status, product_id=product_id, include_closed=include_closed
    )


@router.post(
    "/",
    response_model=GroupDeal,
    status_code=201,
    dependencies=[Depends(rate_limited_user())],
)
def create_deal(
    form: CreateDealForm,
    user: User = Depends(get_current_user),
    deals: DealParticipationService = Depends(get_deal_service),
) -> GroupDeal:
    return deals.create_deal(form, user)


@router.get("/{deal_id}", response_model=DealView)
def get_deal(
    deal_id: str, queries: DealQueryService = Depends(get_deal_queries)
) -> DealView:
    return queries.get_deal(deal_id)


@router.get("/{deal_id}/stats", response_model=DealStats)
def get_deal_stats(
    deal_id: str, queries: DealQueryService = Depends(get_deal_queries)
) -> DealStats:
    return queries.deal_stats(deal_id)


@router.get("/{deal_id}/participants", response_model=list[ParticipantView])
def list_participants(
    deal_id: str, queries: DealQueryService = Depends(get_deal_queries)
) -> list[ParticipantView]:
    return queries.list_participants(deal_id)


@router.post(
    "/{deal_id}/join",
    response_model=ParticipationResponse,
    dependencies=[Depends(rate_limited_user())],
)
def join_deal(
    deal_id: str,
    body: JoinRequest | None = None,
    user: User = Depends(get_current_user),
    deals: DealParticipationService = Depends(get_deal_service),
) -> ParticipationResponse:
    payload = body.model_dump() if body else {}
    form = JoinDealForm.model_validate({**payload, "deal_id": deal_id})
    result = deals.join_deal(form, user)
    return ParticipationResponse(
        message="Successfully joined the group deal!",
        deal=result.deal,
        participation=result.participation,
    )


@router.post(
    "/{deal_id}/leave",
    response_model=ParticipationResponse,
    dependencies=[Depends(rate_limited_user())],
)
def leave_deal(
    deal_id: str,
    body: LeaveRequest | None = None,
    user: User = Depends(get_current_user),
    deals: DealParticipationService = Depends(get_deal_service),
) -> ParticipationResponse:
    target = body.user_id if body else None
    result = deals.leave_deal(deal_id, user, target_user_id=target)
    return ParticipationResponse(
        message="Successfully left the group deal.",
        deal=result.deal,
        participation=result.participation,
    )


@router.post("/{deal_id}/cancel", response_model=GroupDeal)
def cancel_deal(
    deal_id: str,
    user: User = Depends(get_current_user),
    deals: DealParticipationService = Depends(get_deal_service),
) -> GroupDeal:
    return deals.cancel_deal(deal_id, user)


@router.post("/{deal_id}/complete", response_model=GroupDeal)
def complete_deal(
    deal_id: str,
    user: User = Depends(get_current_user),
    deals: DealParticipationService = Depends(get_deal_service),
) -> GroupDeal:
    return deals.complete_deal(deal_id, user)
