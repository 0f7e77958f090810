"""Forms, token claims and read models."""

from .claims import TokenClaims
from .forms import CategoryForm, CreateDealForm, JoinDealForm, ProductForm, field_errors
from .views import (
    DealStats,
    DealView,
    ParticipantView,
    UserDealStats,
    UserParticipationView,
)

__all__ = [
    "CategoryForm",
    "CreateDealForm",
    "DealStats",
    "DealView",
    "JoinDealForm",
    "ParticipantView",
    "ProductForm",
    "TokenClaims",
    "UserDealStats",
    "UserParticipationView",
    "field_errors",
]
