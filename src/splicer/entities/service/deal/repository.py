from collections.abc import Iterable

from sqlalchemy import update
from sqlmodel import Session, select

from src.splicer.entities.core._base import utc_now
from src.splicer.entities.service.deal.entity import DealStatus, GroupDeal
from src.splicer.entities.service.deal.table import GroupDealTable


class GroupDealRepository:
    """Data-access layer for group deals."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, deal_id: str) -> GroupDeal | None:
        row = self._session.get(GroupDealTable, deal_id, populate_existing=True)
        if row is None:
            return None
        return GroupDeal.model_validate(row, from_attributes=True)

    def create(self, deal: GroupDeal) -> GroupDeal:
        row = GroupDealTable(**deal.model_dump())
        self._session.add(row)
        self._session.flush()
        return GroupDeal.model_validate(row, from_attributes=True)

    def list_deals(
        self,
        statuses: Iterable[DealStatus] | None = None,
        product_id: str | None = None,
        created_by: str | None = None,
    ) -> list[GroupDeal]:
        statement = select(GroupDealTable).order_by(GroupDealTable.end_date)
        if statuses is not None:
            statement = statement.where(
                GroupDealTable.status.in_([str(s) for s in statuses])  # type: ignore[attr-defined]
            )
        if product_id:
            statement = statement.where(GroupDealTable.product_id == product_id)
        if created_by:
            statement = statement.where(GroupDealTable.created_by == created_by)
        return [
            GroupDeal.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def get_many(self, deal_ids: list[str]) -> dict[str, GroupDeal]:
        if not deal_ids:
            return {}
        statement = select(GroupDealTable).where(GroupDealTable.id.in_(deal_ids))  # type: ignore[union-attr]
        return {
            row.id: GroupDeal.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        }

    def apply_state(
        self,
        deal: GroupDeal,
        *,
        current_participants: int,
        current_quantity: int,
        status: DealStatus,
    ) -> GroupDeal | None:
        """Write new counters and status if nobody else wrote since ``deal`` was read.

        Returns the updated deal, or ``None`` when the stored version moved on.
        """
        now = utc_now()
        statement = (
            update(GroupDealTable)
            .where(
                GroupDealTable.id == deal.id,
                GroupDealTable.version == deal.version,
            )
            .values(
                current_participants=current_participants,
                current_quantity=current_quantity,
                status=str(status),
                version=deal.version + 1,
                updated_at=now,
            )
        )
        result = self._session.exec(statement)  # type: ignore[call-overload]
        if result.rowcount != 1:
            return None
        return deal.model_copy(
            update={
                "current_participants": current_participants,
                "current_quantity": current_quantity,
                "status": status,
                "version": deal.version + 1,
                "updated_at": now,
            }
        )
