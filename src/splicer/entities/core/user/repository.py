from sqlmodel import Session, select

from src.splicer.entities.core._base import utc_now
from src.splicer.entities.core.user.entity import User
from src.splicer.entities.core.user.table import UserTable


class UserRepository:
    """Data-access layer for users."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: str) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def get_by_issuer_subject(self, issuer: str, subject: str) -> User | None:
        statement = select(UserTable).where(
            (UserTable.issuer == issuer) & (UserTable.subject == subject)
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def get_many(self, user_ids: list[str]) -> dict[str, User]:
        if not user_ids:
            return {}
        statement = select(UserTable).where(UserTable.id.in_(user_ids))  # type: ignore[union-attr]
        return {
            row.id: User.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        }

    def create(self, user: User) -> User:
        row = UserTable(**user.model_dump())
        self._session.add(row)
        self._session.flush()
        return User.model_validate(row, from_attributes=True)

    def update(self, user: User) -> User:
        row = self._session.get(UserTable, user.id)
        if row is None:
            raise ValueError(f"User {user.id} not found")
        row.name = user.name
        row.email = user.email
        row.role = user.role
        row.updated_at = utc_now()
        self._session.add(row)
        self._session.flush()
        return User.model_validate(row, from_attributes=True)

    def list_all(self) -> list[User]:
        statement = select(UserTable).order_by(UserTable.name)
        return [
            User.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]
