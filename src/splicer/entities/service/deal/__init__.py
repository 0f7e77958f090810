"""Entity package: GroupDeal."""

from .entity import DealStatus, GroupDeal
from .repository import GroupDealRepository
from .table import GroupDealTable

__all__ = ["DealStatus", "GroupDeal", "GroupDealRepository", "GroupDealTable"]
