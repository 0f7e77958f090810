from collections.abc import Callable
from typing import TypeVar

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from src.splicer.core.errors import ConcurrentUpdate, StoreError
from src.splicer.core.services.database.db_session import DbSessionService

T = TypeVar("T")


class RetryTransaction(Exception):
    """Raised inside a unit of work to roll it back and run it again."""


def run_in_transaction(
    db: DbSessionService,
    work: Callable[[Session], T],
    *,
    action: str,
    attempts: int = 1,
) -> T:
    """Run ``work`` in its own transaction, re-running it on :class:`RetryTransaction`.

    Business errors propagate unchanged after the rollback. Database failures
    are logged and re-raised as :class:`StoreError` carrying a generic message
    built from ``action`` (e.g. "join group deal").

    Raises:
        ConcurrentUpdate: every attempt asked to be retried.
        StoreError: the database failed.
    """
    for attempt in range(1, attempts + 1):
        try:
            with db.session_scope() as session:
                return work(session)
        except RetryTransaction as exc:
            logger.warning(
                "Conflict while trying to {} (attempt {}/{}): {}",
                action,
                attempt,
                attempts,
                exc,
            )
        except SQLAlchemyError as exc:
            logger.exception("Database error while trying to {}", action)
            raise StoreError(f"Database Error: Failed to {action}.") from exc

    raise ConcurrentUpdate(
        f"Failed to {action}: it was changed by someone else. Please try again."
    )
