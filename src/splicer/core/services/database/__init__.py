from .db_session import DbSessionService
from .db_utils import RetryTransaction, run_in_transaction

__all__ = ["DbSessionService", "RetryTransaction", "run_in_transaction"]
