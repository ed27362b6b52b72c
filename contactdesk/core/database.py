import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from .config import normalize_database_url


logger = logging.getLogger(__name__)


def create_db_engine(database_url: str, **kwargs) -> Engine:
    """Create the process-wide connection pool.

    The engine is owned by whoever builds the application and handed to the
    repository explicitly.
    """
    kwargs.setdefault("pool_pre_ping", True)
    return create_engine(normalize_database_url(database_url), **kwargs)


def check_connection(engine: Engine) -> bool:
    try:
        with engine.connect() as conn:
            current_time = conn.execute(text("SELECT CURRENT_TIMESTAMP")).scalar()
        logger.info(f"Database connected successfully at: {current_time}")
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        logger.error("Please check DATABASE_URL in your environment or .env file")
        return False
