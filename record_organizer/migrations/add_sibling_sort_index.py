"""
Migration: Add the sibling sort index to the records table.

Databases created before the index existed get it here. The index backs
the sibling-scope queries run when a record is repositioned.
"""

import logging

from sqlalchemy import inspect, text

from record_organizer.database import engine

logger = logging.getLogger(__name__)

INDEX_NAME = "ix_records_sibling_sort"


def migrate():
    """Create the (collection_id, pid, sort) index if it doesn't exist."""
    inspector = inspect(engine)
    if "records" not in inspector.get_table_names():
        logger.info("Migration skipped: records table does not exist.")
        return

    indexes = [index["name"] for index in inspector.get_indexes("records")]

    if INDEX_NAME not in indexes:
        with engine.begin() as conn:
            conn.execute(
                text(f"CREATE INDEX {INDEX_NAME} ON records (collection_id, pid, sort)")
            )
        logger.info("Migration complete: Added %s index to records table.", INDEX_NAME)
    else:
        logger.info("Migration skipped: %s index already exists on records table.", INDEX_NAME)


if __name__ == "__main__":
    migrate()
