from sqlalchemy import func, update
from sqlmodel import Session, select

from src.splicer.entities.core._base import utc_now
from src.splicer.entities.service.participant.entity import (
    DealParticipant,
    ParticipantStatus,
)
from src.splicer.entities.service.participant.table import DealParticipantTable

_ACTIVE = str(ParticipantStatus.ACTIVE)


class DealParticipantRepository:
    """Data-access layer for deal participation rows."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_for_user(self, deal_id: str, user_id: str) -> DealParticipant | None:
        """Return the user's row for the deal whatever its status."""
        statement = select(DealParticipantTable).where(
            (DealParticipantTable.deal_id == deal_id)
            & (DealParticipantTable.user_id == user_id)
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return DealParticipant.model_validate(row, from_attributes=True)

    def create(self, participant: DealParticipant) -> DealParticipant:
        row = DealParticipantTable(**participant.model_dump())
        self._session.add(row)
        self._session.flush()
        return DealParticipant.model_validate(row, from_attributes=True)

    def save(self, participant: DealParticipant) -> DealParticipant:
        row = self._session.get(DealParticipantTable, participant.id)
        if row is None:
            raise ValueError(f"Participation {participant.id} not found")
        row.quantity = participant.quantity
        row.joined_at = participant.joined_at
        row.status = str(participant.status)
        row.notes = participant.notes
        row.updated_at = utc_now()
        self._session.add(row)
        self._session.flush()
        return DealParticipant.model_validate(row, from_attributes=True)

    def list_for_deal(
        self, deal_id: str, status: ParticipantStatus | None = ParticipantStatus.ACTIVE
    ) -> list[DealParticipant]:
        statement = (
            select(DealParticipantTable)
            .where(DealParticipantTable.deal_id == deal_id)
            .order_by(DealParticipantTable.joined_at)
        )
        if status is not None:
            statement = statement.where(DealParticipantTable.status == str(status))
        return [
            DealParticipant.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def list_for_user(self, user_id: str) -> list[DealParticipant]:
        statement = (
            select(DealParticipantTable)
            .where(DealParticipantTable.user_id == user_id)
            .order_by(DealParticipantTable.joined_at.desc())  # type: ignore[attr-defined]
        )
        return [
            DealParticipant.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def close_active(
        self, deal_id: str, status: ParticipantStatus, note: str | None = None
    ) -> int:
        """Move every active row of a deal to ``status``; returns the row count."""
        values: dict = {"status": str(status), "updated_at": utc_now()}
        if note:
            values["notes"] = func.coalesce(DealParticipantTable.notes, "") + note
        statement = (
            update(DealParticipantTable)
            .where(
                DealParticipantTable.deal_id == deal_id,
                DealParticipantTable.status == _ACTIVE,
            )
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        result = self._session.exec(statement)  # type: ignore[call-overload]
        return result.rowcount

    def active_totals(self, deal_id: str) -> tuple[int, int]:
        """Count and quantity sum of the deal's active rows."""
        statement = select(
            func.count(DealParticipantTable.id),
            func.coalesce(func.sum(DealParticipantTable.quantity), 0),
        ).where(
            DealParticipantTable.deal_id == deal_id,
            DealParticipantTable.status == _ACTIVE,
        )
        count, quantity = self._session.exec(statement).one()
        return int(count), int(quantity)
