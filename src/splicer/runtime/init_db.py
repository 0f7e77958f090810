"""Database initialization script."""

from loguru import logger

from src.splicer.core.services.database.db_session import DbSessionService


def init_db(db: DbSessionService | None = None) -> None:
    """Create all database tables."""
    db = db or DbSessionService()
    db.create_all()
    logger.info("Database tables created")


if __name__ == "__main__":
    init_db()
