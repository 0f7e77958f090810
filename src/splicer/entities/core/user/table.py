"""User database table model."""

import sqlalchemy as sa
from sqlmodel import Field

from src.splicer.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Database persistence model for users."""

    __tablename__ = "users"
    __table_args__ = (
        sa.UniqueConstraint("issuer", "subject", name="uq_users_issuer_subject"),
        sa.CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
    )

    name: str
    email: str | None = Field(default=None, unique=True)
    role: str = Field(default="user", index=True)
    issuer: str
    subject: str
