"""SQLite database engine and schema via SQLAlchemy Core."""

from attrstore.infrastructure.database.engine import create_db_engine, init_database
from attrstore.infrastructure.database.schema import attributes, domains, metadata

__all__ = [
    "attributes",
    "create_db_engine",
    "domains",
    "init_database",
    "metadata",
]
