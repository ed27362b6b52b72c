import logging
from typing import List

from sqlalchemy import DateTime, inspect, text
from sqlalchemy.engine import Connection, Engine

from .tables import CONTACT_INDEXES, contacts


logger = logging.getLogger(__name__)


class SchemaInitError(RuntimeError):
    pass


def get_table_columns(engine: Engine) -> List[str]:
    """Return the column names of the contacts table, or [] if it is missing."""
    inspector = inspect(engine)
    if not inspector.has_table(contacts.name):
        return []
    return [column["name"] for column in inspector.get_columns(contacts.name)]


def _add_created_at_column(conn: Connection) -> None:
    column_type = DateTime(timezone=True).compile(dialect=conn.dialect)
    if conn.dialect.name == "sqlite":
        # SQLite refuses ADD COLUMN with a non-constant default
        conn.execute(text(f"ALTER TABLE {contacts.name} ADD COLUMN created_at {column_type}"))
    else:
        conn.execute(text(
            f"ALTER TABLE {contacts.name} "
            f"ADD COLUMN created_at {column_type} DEFAULT CURRENT_TIMESTAMP"
        ))
    conn.execute(text(
        f"UPDATE {contacts.name} SET created_at = CURRENT_TIMESTAMP WHERE created_at IS NULL"
    ))


def _ensure_table(engine: Engine) -> None:
    existing_columns = get_table_columns(engine)
    logger.info(f"Current table structure: {existing_columns}")

    if existing_columns and "created_at" not in existing_columns:
        logger.warning("Table exists but is missing created_at column, adding it")
        with engine.begin() as conn:
            _add_created_at_column(conn)
        logger.info("Added created_at column to existing table")
    else:
        contacts.create(bind=engine, checkfirst=True)
        logger.info("Contacts table created or already exists")


def _ensure_indexes(engine: Engine) -> None:
    for index in CONTACT_INDEXES:
        try:
            index.create(bind=engine, checkfirst=True)
            logger.info(f"Index {index.name} ready")
        except Exception as e:
            logger.warning(f"Index {index.name} may already exist: {e}")


def initialize_schema(engine: Engine, strict: bool = False) -> List[str]:
    """Make sure the contacts table and its two indexes exist.

    Safe to call on every start. A legacy table without created_at gets the
    column added and its rows backfilled. Failures are logged and swallowed
    unless strict is set, in which case SchemaInitError is raised.

    Returns:
        The column names found after initialization.
    """
    try:
        _ensure_table(engine)
        _ensure_indexes(engine)
        final_columns = get_table_columns(engine)
    except Exception as e:
        logger.error(f"Error creating contacts table: {e}", exc_info=True)
        if strict:
            raise SchemaInitError(f"Failed to initialize {contacts.name} table") from e
        return []

    logger.info(f"Final table structure verified: {final_columns}")
    return final_columns
