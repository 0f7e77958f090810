"""Endpoints about the authenticated caller."""

from fastapi import APIRouter, Depends

from src.splicer.api.http.deps import get_current_user, get_deal_queries
from src.splicer.core.models.views import UserDealStats, UserParticipationView
from src.splicer.core.services import DealQueryService
from src.splicer.entities.core.user import User

router = APIRouter(prefix="/me", tags=["me"])


@router.get("", response_model=User)
def get_me(user: User = Depends(get_current_user)) -> User:
    return user


@router.get("/participations", response_model=list[UserParticipationView])
def my_participations(
    user: User = Depends(get_current_user),
    queries: DealQueryService = Depends(get_deal_queries),
) -> list[UserParticipationView]:
    return queries.user_participations(user.id)


@router.get("/stats", response_model=UserDealStats)
def my_stats(
    user: User = Depends(get_current_user),
    queries: DealQueryService = Depends(get_deal_queries),
) -> UserDealStats:
    return queries.user_stats(user.id)
