"""Entities grouped by business concept.

Each entity package holds the domain model (``entity.py``), its persistence
model (``table.py``) and its data-access layer (``repository.py``).
"""

from .core.user import User, UserRepository, UserRole, UserTable
from .service.category import Category, CategoryRepository, CategoryTable
from .service.deal import DealStatus, GroupDeal, GroupDealRepository, GroupDealTable
from .service.participant import (
    DealParticipant,
    DealParticipantRepository,
    DealParticipantTable,
    ParticipantStatus,
)
from .service.product import Product, ProductRepository, ProductTable

__all__ = [
    "Category",
    "CategoryRepository",
    "CategoryTable",
    "DealParticipant",
    "DealParticipantRepository",
    "DealParticipantTable",
    "DealStatus",
    "GroupDeal",
    "GroupDealRepository",
    "GroupDealTable",
    "ParticipantStatus",
    "Product",
    "ProductRepository",
    "ProductTable",
    "User",
    "UserRepository",
    "UserRole",
    "UserTable",
]
